"""Cascade deletion of usergroup references.

``CascadeDeleter`` wraps a base deletion.  Once the base deletion has
confirmed that a group is gone, every registered collection is searched
for documents that still reference the group and the reference is
pulled from each of them.

The cleanup is best-effort:

- Registrants are processed concurrently, and so are the documents of
  each registrant.  Both levels use :func:`asyncio.gather`, so the
  order in which sibling updates run is unspecified.
- A failing ``update`` is caught, reported as a ``warn`` diagnostic and
  recorded in the :class:`CascadeReport`.  It never reaches the caller.
- A failing ``find`` is *not* caught.  It propagates out of the gather
  and fails the whole call, although the group itself stays deleted
  and sibling branches already running are left to finish.
- A failing base deletion propagates unchanged and no cleanup runs.

Nothing is retried or timed out: a hung ``update``
hangs the call.

Usage
-----
::

    deleter = CascadeDeleter(registry, base_delete=groups.delete, sink=sink)
    deleted = await deleter.delete({"_id": "g1"})

    report = await deleter.delete_with_report({"_id": "g2"})
    print(report)
"""
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from usergroups.core.errors import MissingIdentityError
from usergroups.core.ports import BaseDelete, DiagnosticSink, ReferencingCollection
from usergroups.diagnostics.sinks import LoggingDiagnosticSink
from usergroups.registry.registry import ReferenceRegistry

RAW_UPDATE_OPTION = "rawUpdate"


def pull_patch(reference_field: str, group_id: Any) -> dict[str, Any]:
    """Return the update patch that removes ``group_id`` from ``reference_field``."""
    return {"$pull": {reference_field: group_id}}


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


@dataclass(frozen=True)
class RemovalOutcome:
    """Result of removing the reference from one document.

    Parameters
    ----------
    registrant:
        Name of the collection the document belongs to.
    document_id:
        Id of the document that was updated.
    error:
        The exception raised by ``update``, or ``None`` on success.
    """

    registrant: str
    document_id: Any
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class CascadeReport:
    """What a single cascade deletion did.

    ``outcomes`` has one entry per registrant, in registry order, and each
    entry has one :class:`RemovalOutcome` per document returned by that
    registrant's ``find``, in ``find`` order.
    """

    deleted: Any
    outcomes: list[list[RemovalOutcome]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(per_registrant) for per_registrant in self.outcomes)

    @property
    def failures(self) -> list[RemovalOutcome]:
        return [o for per_registrant in self.outcomes for o in per_registrant if not o.succeeded]

    @property
    def successful(self) -> int:
        return self.total - len(self.failures)

    @property
    def all_succeeded(self) -> bool:
        return not self.failures

    def __str__(self) -> str:
        failed = len(self.failures)
        return (
            f"usergroup cleanup: {self.successful}/{self.total} references removed "
            f"across {len(self.outcomes)} collection(s) ({failed} failed)"
        )


class CascadeDeleter:
    """Delete a usergroup and strip its id from every registrant.

    Parameters
    ----------
    registry:
        The registrants to clean up.  Read by snapshot on every call.
    base_delete:
        The actual group deletion.  Receives the arguments of
        :meth:`delete` verbatim and must return the deleted group.
    sink:
        Receives a ``warn`` diagnostic for each failed document update.
    reference_field:
        Document field holding group ids.
    id_field:
        Field holding a document's own id, in both the deleted group and
        the registrant documents.
    """

    def __init__(
        self,
        registry: ReferenceRegistry,
        base_delete: BaseDelete,
        sink: DiagnosticSink | None = None,
        reference_field: str = "userGroups",
        id_field: str = "_id",
    ) -> None:
        self._registry = registry
        self._base_delete = base_delete
        self._sink: DiagnosticSink = sink if sink is not None else LoggingDiagnosticSink()
        self._reference_field = reference_field
        self._id_field = id_field

    async def delete(self, *args: Any, **kwargs: Any) -> Any:
        """Delete a group and clean up references to it.

        Returns
        -------
        Any
            The deleted group, exactly as returned by the base deletion.

        Raises
        ------
        Exception
            Whatever the base deletion raises (no cleanup is attempted),
            or whatever a registrant's ``find`` raises.
        """
        report = await self.delete_with_report(*args, **kwargs)
        return report.deleted

    async def delete_with_report(self, *args: Any, **kwargs: Any) -> CascadeReport:
        """Same as :meth:`delete` but return the full :class:`CascadeReport`."""
        deleted = await self._base_delete(*args, **kwargs)
        group_id = _field(deleted, self._id_field)
        if group_id is None:
            raise MissingIdentityError(self._id_field, deleted)

        registrants = self._registry.snapshot()
        outcomes = await asyncio.gather(
            *(self._clean_registrant(r, group_id) for r in registrants)
        )
        return CascadeReport(deleted=deleted, outcomes=list(outcomes))

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    async def _clean_registrant(
        self, registrant: ReferencingCollection, group_id: Any
    ) -> list[RemovalOutcome]:
        documents = await registrant.find({self._reference_field: group_id})
        results = await asyncio.gather(
            *(self._remove_reference(registrant, doc, group_id) for doc in documents)
        )
        return list(results)

    async def _remove_reference(
        self, registrant: ReferencingCollection, document: Any, group_id: Any
    ) -> RemovalOutcome:
        name = getattr(registrant, "name", "")
        document_id = _field(document, self._id_field)
        try:
            await registrant.update(
                {self._id_field: document_id},
                pull_patch(self._reference_field, group_id),
                {RAW_UPDATE_OPTION: True},
            )
        except Exception as exc:  # noqa: BLE001
            self._sink.log("warn", f"Failed to remove usergroup, {exc}")
            return RemovalOutcome(registrant=name, document_id=document_id, error=exc)
        return RemovalOutcome(registrant=name, document_id=document_id)
