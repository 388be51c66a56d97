"""Core contracts.

Protocols describing the collaborators the cascade talks to, and the
exception hierarchy. Submodules in core/ should not import from cli/,
store/ or host/.
"""
from __future__ import annotations

from usergroups.core.errors import (
    ConfigError,
    GroupNotFoundError,
    MissingIdentityError,
    StoreError,
    UserGroupsError,
)
from usergroups.core.ports import (
    BaseDelete,
    DiagnosticSink,
    Document,
    ModuleResolver,
    ReferencingCollection,
    SchemaExtender,
)

__all__ = [
    "BaseDelete",
    "ConfigError",
    "DiagnosticSink",
    "Document",
    "GroupNotFoundError",
    "MissingIdentityError",
    "ModuleResolver",
    "ReferencingCollection",
    "SchemaExtender",
    "StoreError",
    "UserGroupsError",
]
