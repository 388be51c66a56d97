"""usergroups — usergroup deletion with cascading reference cleanup.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import usergroups
    from usergroups.host import ModuleDirectory
    from usergroups.schema import SchemaCatalog
    from usergroups.store import InMemoryCollection, InMemoryGroupStore

    app = ModuleDirectory()
    app.add("jsonschema", SchemaCatalog.with_defaults())
    app.add("users", InMemoryCollection("users", "user", [{"_id": "u1", "userGroups": ["g1"]}]))
    groups = InMemoryGroupStore([{"_id": "g1", "displayName": "Editors"}])

    module = usergroups.create_module(app, base_delete=groups.delete)
    await module.init()
    deleted = await module.delete({"_id": "g1"})

    usergroups.__version__
    '0.1.0'
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from usergroups.config import UserGroupsConfig
    from usergroups.core.ports import BaseDelete, DiagnosticSink, ModuleResolver
    from usergroups.module import UserGroupsModule


def create_module(
    app: "ModuleResolver",
    base_delete: "BaseDelete",
    config: "UserGroupsConfig | None" = None,
    sink: "DiagnosticSink | None" = None,
) -> "UserGroupsModule":
    """Create a configured :class:`~usergroups.module.UserGroupsModule`.

    Parameters
    ----------
    app:
        Resolves ``jsonschema`` and the built-in registrants by name.
    base_delete:
        The deletion that removes a group document and returns it.
    config:
        Module configuration; defaults apply when omitted.
    sink:
        Diagnostic sink; defaults to logging.

    Returns
    -------
    UserGroupsModule
        The module, with ``set_values`` applied.  Call ``init()`` next.
    """
    from usergroups.module import UserGroupsModule

    return UserGroupsModule(app, base_delete=base_delete, config=config, sink=sink)


def load_config(path: str | Path | None = None) -> "UserGroupsConfig":
    """Load configuration from a YAML file, or return the defaults.

    Raises
    ------
    usergroups.core.errors.ConfigError
        If the file cannot be read or is invalid.
    """
    from usergroups.config import UserGroupsConfig

    if path is None:
        return UserGroupsConfig()
    return UserGroupsConfig.load(path)


__all__ = [
    "__version__",
    "create_module",
    "load_config",
]
