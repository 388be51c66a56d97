"""Collaborator protocols for the usergroups cascade.

Every external dependency of the registry and the cascade deleter is
described here as a :class:`typing.Protocol`.  Concrete implementations
live elsewhere (``usergroups.store``, ``usergroups.host``,
``usergroups.schema``, ``usergroups.diagnostics``) or are supplied by the
host application.  The protocols are runtime-checkable so ``isinstance``
tests work, but the registry itself only relies on attribute access.

Implementations
---------------
- :class:`ReferencingCollection` — :class:`~usergroups.store.memory.InMemoryCollection`
- :class:`ModuleResolver` — :class:`~usergroups.host.directory.ModuleDirectory`
- :class:`SchemaExtender` — :class:`~usergroups.schema.catalog.SchemaCatalog`
- :class:`DiagnosticSink` — :class:`~usergroups.diagnostics.sinks.LoggingDiagnosticSink`
- :data:`BaseDelete` — :meth:`~usergroups.store.memory.InMemoryGroupStore.delete`
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, runtime_checkable

Document = dict[str, Any]
"""An opaque stored record; only its id and group-reference fields matter here."""

BaseDelete = Callable[..., Awaitable[Mapping[str, Any]]]
"""The deletion the cascade wraps. Receives the caller's arguments verbatim."""


@runtime_checkable
class ReferencingCollection(Protocol):
    """A collection whose documents may hold usergroup ids.

    ``schema_name`` is the schema identity required for registration and
    ``name`` is used in diagnostics only.
    """

    schema_name: str
    name: str

    async def find(self, query: Mapping[str, Any]) -> list[Document]:
        """Return every document matching ``query``.

        Raises
        ------
        usergroups.core.errors.StoreError
            On a store-level failure.
        """
        ...  # pragma: no cover

    async def update(
        self,
        query: Mapping[str, Any],
        data: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> Any:
        """Apply ``data`` to the documents matching ``query``.

        ``options["rawUpdate"]`` set to ``True`` bypasses document
        validation for this mutation.
        """
        ...  # pragma: no cover


@runtime_checkable
class ModuleResolver(Protocol):
    """Resolves named modules, suspending until the module is available."""

    async def wait_for_module(self, name: str) -> Any:
        ...  # pragma: no cover


@runtime_checkable
class SchemaExtender(Protocol):
    """The ``jsonschema`` collaborator.

    ``extend_schema`` may be a plain method or a coroutine function; the
    registry awaits the result when it is awaitable.
    """

    def extend_schema(self, base_schema_name: str, ext_schema_name: str) -> Any:
        ...  # pragma: no cover


@runtime_checkable
class DiagnosticSink(Protocol):
    """Fire-and-forget diagnostic output. ``log`` must never raise."""

    def log(self, level: str, *args: object) -> None:
        ...  # pragma: no cover
