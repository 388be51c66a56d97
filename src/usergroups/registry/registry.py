"""Registry of collections that reference usergroups.

Any module whose documents store usergroup ids registers here so that
the cascade deleter can strip those ids when a group is deleted.
Registration also asks the ``jsonschema`` module to merge the usergroups
extension schema into the registrant's own schema, which is what adds
the group-reference field to its documents.

Example
-------
::

    from usergroups.registry import ReferenceRegistry

    registry = ReferenceRegistry("usergroups", resolver=app, sink=sink)
    await registry.register(await app.wait_for_module("courses"))

    len(registry)
    1

The registrant sequence only grows.  There is no ``deregister`` and no
duplicate detection; registering the same collection twice appends it
twice and the cascade will visit it twice.
"""
from __future__ import annotations

import inspect
from collections.abc import Iterator
from typing import Any

from usergroups.core.ports import DiagnosticSink, ModuleResolver, ReferencingCollection
from usergroups.diagnostics.sinks import LoggingDiagnosticSink

SCHEMA_MODULE = "jsonschema"


class ReferenceRegistry:
    """Append-only sequence of :class:`ReferencingCollection` registrants.

    Parameters
    ----------
    extension_name:
        Name of the schema extension merged into each registrant's schema.
    resolver:
        Used to look up the ``jsonschema`` module on each registration.
    sink:
        Receives the ``warn`` and ``debug`` diagnostics.  Defaults to a
        :class:`~usergroups.diagnostics.sinks.LoggingDiagnosticSink`.
    """

    def __init__(
        self,
        extension_name: str,
        resolver: ModuleResolver,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self._extension_name = extension_name
        self._resolver = resolver
        self._sink: DiagnosticSink = sink if sink is not None else LoggingDiagnosticSink()
        self._registrants: list[ReferencingCollection] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register(self, registrant: Any) -> None:
        """Register ``registrant`` for usergroup cleanup.

        A registrant without a ``schema_name`` is skipped with a single
        ``warn`` diagnostic.  Otherwise its schema is extended, a
        ``debug`` diagnostic naming it is emitted and it is appended.

        Parameters
        ----------
        registrant:
            A collection exposing ``schema_name``, ``name``, ``find`` and
            ``update``.
        """
        schema_name = getattr(registrant, "schema_name", None)
        if not schema_name:
            self._sink.log(
                "warn", "cannot register module, module doesn't define a schemaName"
            )
            return

        jsonschema = await self._resolver.wait_for_module(SCHEMA_MODULE)
        result = jsonschema.extend_schema(schema_name, self._extension_name)
        if inspect.isawaitable(result):
            await result

        name = getattr(registrant, "name", schema_name)
        self._sink.log("debug", f"registered {name} for use with {self._extension_name}")
        self._registrants.append(registrant)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def snapshot(self) -> list[ReferencingCollection]:
        """Return a copy of the current registrants in registration order.

        Registrations made after the snapshot is taken are not reflected
        in it.
        """
        return list(self._registrants)

    @property
    def extension_name(self) -> str:
        return self._extension_name

    def __iter__(self) -> Iterator[ReferencingCollection]:
        return iter(self.snapshot())

    def __contains__(self, registrant: object) -> bool:
        return any(r is registrant for r in self._registrants)

    def __len__(self) -> int:
        return len(self._registrants)

    def __repr__(self) -> str:
        names = [getattr(r, "name", "?") for r in self._registrants]
        return f"ReferenceRegistry(extension={self._extension_name!r}, registrants={names})"
