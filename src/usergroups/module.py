"""The usergroups module.

``UserGroupsModule`` owns the lifetime of one :class:`ReferenceRegistry`
and one :class:`CascadeDeleter` and exposes the operations other modules
and the host call:

``set_values``
    Apply configuration and create an empty registry.  Called by the
    constructor.
``init``
    Register the built-in ``users`` collection, resolved through the host.
``register_module``
    Register any other collection that stores usergroup ids.
``delete``
    Delete a usergroup and pull its id from every registered collection.

The base deletion is composed in rather than inherited: the host passes
the function that actually removes the group document.
"""
from __future__ import annotations

from typing import Any

from usergroups.cascade.deleter import CascadeDeleter, CascadeReport
from usergroups.config import UserGroupsConfig
from usergroups.core.ports import BaseDelete, DiagnosticSink, ModuleResolver, ReferencingCollection
from usergroups.diagnostics.sinks import LoggingDiagnosticSink
from usergroups.registry.registry import ReferenceRegistry


class UserGroupsModule:
    """Usergroup management with cascading reference cleanup.

    Parameters
    ----------
    app:
        Host module resolver; provides ``jsonschema`` and the built-in
        registrants.
    base_delete:
        Removes a group document and returns it.
    config:
        Names and field names.  Defaults to :class:`UserGroupsConfig`.
    sink:
        Diagnostic output.  Defaults to a logging sink.
    """

    def __init__(
        self,
        app: ModuleResolver,
        base_delete: BaseDelete,
        config: UserGroupsConfig | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self.app = app
        self.config = config if config is not None else UserGroupsConfig()
        self._sink: DiagnosticSink = sink if sink is not None else LoggingDiagnosticSink()
        self._base_delete = base_delete
        self.set_values()

    def set_values(self) -> None:
        """Apply the configured names and start with no registrants."""
        self.root = self.config.root
        self.schema_name = self.config.schema_name
        self.schema_extension_name = self.config.schema_extension_name
        self.collection_name = self.config.collection_name
        self.registry = ReferenceRegistry(
            self.schema_extension_name, resolver=self.app, sink=self._sink
        )
        self.deleter = CascadeDeleter(
            self.registry,
            base_delete=self._base_delete,
            sink=self._sink,
            reference_field=self.config.reference_field,
            id_field=self.config.id_field,
        )

    async def init(self) -> None:
        """Register the built-in collections (``users`` by default)."""
        for name in self.config.builtin_registrants:
            await self.register_module(await self.app.wait_for_module(name))

    async def register_module(self, mod: Any) -> None:
        """Register ``mod`` so its documents are cleaned up on group deletion."""
        await self.registry.register(mod)

    async def delete(self, *args: Any, **kwargs: Any) -> Any:
        """Delete a group; see :meth:`CascadeDeleter.delete`."""
        return await self.deleter.delete(*args, **kwargs)

    async def delete_with_report(self, *args: Any, **kwargs: Any) -> CascadeReport:
        return await self.deleter.delete_with_report(*args, **kwargs)

    @property
    def modules(self) -> list[ReferencingCollection]:
        """The registered collections, in registration order."""
        return self.registry.snapshot()

    def log(self, level: str, *args: object) -> None:
        self._sink.log(level, *args)

    def __repr__(self) -> str:
        return f"UserGroupsModule(root={self.root!r}, modules={len(self.registry)})"
