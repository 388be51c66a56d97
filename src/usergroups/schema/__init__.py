"""Schema catalog and the usergroups schema documents."""
from __future__ import annotations

from usergroups.schema.catalog import (
    USERGROUP_SCHEMA,
    USERGROUPS_EXTENSION,
    SchemaCatalog,
    SchemaNotFoundError,
    usergroup_schema,
    usergroups_extension,
)

__all__ = [
    "SchemaCatalog",
    "SchemaNotFoundError",
    "USERGROUP_SCHEMA",
    "USERGROUPS_EXTENSION",
    "usergroup_schema",
    "usergroups_extension",
]
