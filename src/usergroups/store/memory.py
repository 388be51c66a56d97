"""In-memory document stores.

``InMemoryCollection`` implements :class:`~usergroups.core.ports.ReferencingCollection`
over a list of dicts and ``InMemoryGroupStore`` provides a base deletion
for usergroups.  They back the ``usergroups cascade`` command and the
integration tests; production deployments supply their own collections.

Query semantics follow the document-database convention the cascade
relies on: every key in the filter must match, and a scalar filter value
matches a list field when the list contains it.

Updates accept either a plain patch, merged field by field, or an
operator patch (``$set``, ``$pull``, ``$addToSet``).  Operator patches
skip document validation and are therefore only accepted with
``{"rawUpdate": True}``.  ``$pull`` on an absent field is a no-op.
A simulated write failure is checked for every target before any of
them is changed.
"""
from __future__ import annotations

import asyncio
import copy
from collections.abc import Iterable, Mapping
from typing import Any

from usergroups.core.errors import GroupNotFoundError, StoreError
from usergroups.core.ports import Document

_OPERATORS = ("$set", "$pull", "$addToSet")


def matches(document: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
    """Return True when ``document`` satisfies every condition in ``query``."""
    for key, expected in query.items():
        actual = document.get(key)
        if isinstance(actual, list) and not isinstance(expected, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


def _apply_operators(document: Document, data: Mapping[str, Any], collection: str) -> None:
    for operator, changes in data.items():
        if operator not in _OPERATORS:
            raise StoreError(f"Unsupported update operator {operator!r}", collection)
        for key, value in changes.items():
            if operator == "$set":
                document[key] = copy.deepcopy(value)
                continue
            current = document.get(key)
            if current is None:
                if operator == "$pull":
                    continue
                current = document[key] = []
            if not isinstance(current, list):
                raise StoreError(f"{operator} target {key!r} is not a list", collection)
            if operator == "$pull":
                document[key] = [item for item in current if item != value]
            elif value not in current:
                current.append(copy.deepcopy(value))


class InMemoryCollection:
    """A named list of documents that may reference usergroups.

    Parameters
    ----------
    name:
        Collection name, used in diagnostics.
    schema_name:
        Schema identity used when registering with the usergroups module.
        An empty string makes the collection unregistrable.
    documents:
        Initial documents.  They are copied.
    id_field:
        Field holding each document's id.
    fail_updates_for:
        Document ids whose updates raise :class:`StoreError`, for
        exercising partial failure.
    """

    def __init__(
        self,
        name: str,
        schema_name: str,
        documents: Iterable[Mapping[str, Any]] = (),
        id_field: str = "_id",
        fail_updates_for: Iterable[Any] = (),
    ) -> None:
        self.name = name
        self.schema_name = schema_name
        self._id_field = id_field
        self._documents: list[Document] = [dict(copy.deepcopy(d)) for d in documents]
        self._fail_updates_for = set(fail_updates_for)

    async def find(self, query: Mapping[str, Any]) -> list[Document]:
        await asyncio.sleep(0)
        return [copy.deepcopy(d) for d in self._documents if matches(d, query)]

    async def update(
        self,
        query: Mapping[str, Any],
        data: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> int:
        """Apply ``data`` to every matching document and return the count.

        Raises
        ------
        StoreError
            If nothing matches, an operator patch is used without
            ``rawUpdate``, or a matching id is in ``fail_updates_for``.
        """
        await asyncio.sleep(0)
        options = options or {}
        targets = [d for d in self._documents if matches(d, query)]
        if not targets:
            raise StoreError(f"No document matches {dict(query)!r}", self.name)

        is_operator_patch = any(key.startswith("$") for key in data)
        if is_operator_patch and not options.get("rawUpdate"):
            raise StoreError("Update operators require the rawUpdate option", self.name)

        for document in targets:
            document_id = document.get(self._id_field)
            if document_id in self._fail_updates_for:
                raise StoreError(f"Write failed for document {document_id!r}", self.name)
        for document in targets:
            if is_operator_patch:
                _apply_operators(document, data, self.name)
            else:
                document.update(copy.deepcopy(dict(data)))
        return len(targets)

    def add(self, document: Mapping[str, Any]) -> None:
        self._documents.append(dict(copy.deepcopy(document)))

    def get(self, document_id: Any) -> Document | None:
        """Return a copy of the document with ``document_id``, if any."""
        for document in self._documents:
            if document.get(self._id_field) == document_id:
                return copy.deepcopy(document)
        return None

    @property
    def documents(self) -> list[Document]:
        return copy.deepcopy(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return (
            f"InMemoryCollection(name={self.name!r}, schema_name={self.schema_name!r}, "
            f"documents={len(self._documents)})"
        )


class InMemoryGroupStore:
    """The usergroups collection, exposing ``delete`` as a base deletion.

    Parameters
    ----------
    groups:
        Initial usergroup documents.  They are copied.
    """

    def __init__(self, groups: Iterable[Mapping[str, Any]] = ()) -> None:
        self._groups: list[Document] = [dict(copy.deepcopy(g)) for g in groups]

    async def delete(
        self, query: Mapping[str, Any], options: Mapping[str, Any] | None = None
    ) -> Document:
        """Remove the first group matching ``query`` and return it.

        Raises
        ------
        GroupNotFoundError
            If no group matches.
        """
        await asyncio.sleep(0)
        for index, group in enumerate(self._groups):
            if matches(group, query):
                return self._groups.pop(index)
        raise GroupNotFoundError(dict(query))

    async def find(self, query: Mapping[str, Any]) -> list[Document]:
        await asyncio.sleep(0)
        return [copy.deepcopy(g) for g in self._groups if matches(g, query)]

    def add(self, group: Mapping[str, Any]) -> None:
        self._groups.append(dict(copy.deepcopy(group)))

    @property
    def groups(self) -> list[Document]:
        return copy.deepcopy(self._groups)

    def __len__(self) -> int:
        return len(self._groups)
