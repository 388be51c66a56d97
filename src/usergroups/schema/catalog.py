"""In-process ``jsonschema`` module.

``SchemaCatalog`` stores JSON Schema documents (draft 2020-12) by name and
records which extension schemas have been merged into which base schema.
It is the collaborator the registry calls when a collection registers:
``extend_schema("user", "usergroups")`` makes every ``user`` document
carry the ``userGroups`` array defined by :data:`USERGROUPS_EXTENSION`.

Usage
-----
::

    from usergroups.schema import SchemaCatalog

    catalog = SchemaCatalog.with_defaults()
    catalog.add_schema("user", {"type": "object", "properties": {"email": {"type": "string"}}})
    catalog.extend_schema("user", "usergroups")
    catalog.get_schema("user")["properties"]["userGroups"]["type"]
    'array'
"""
from __future__ import annotations

import copy
import logging

from usergroups.config import UserGroupsConfig

logger = logging.getLogger(__name__)

Schema = dict[str, object]

_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def usergroup_schema(config: UserGroupsConfig | None = None) -> Schema:
    """Schema of a usergroup document."""
    config = config or UserGroupsConfig()
    return {
        "$schema": _SCHEMA_DIALECT,
        "$anchor": config.schema_name,
        "type": "object",
        "properties": {
            "displayName": {"type": "string", "description": "Name of the group"},
            "description": {"type": "string", "description": "Description of the group"},
        },
        "required": ["displayName"],
    }


def usergroups_extension(config: UserGroupsConfig | None = None) -> Schema:
    """Extension schema adding the group-reference array to a document."""
    config = config or UserGroupsConfig()
    return {
        "$schema": _SCHEMA_DIALECT,
        "$anchor": config.schema_extension_name,
        "properties": {
            config.reference_field: {
                "type": "array",
                "items": {"type": "string"},
                "default": [],
                "description": "Usergroups this document is shared with",
            }
        },
    }


USERGROUP_SCHEMA: Schema = usergroup_schema()
USERGROUPS_EXTENSION: Schema = usergroups_extension()


class SchemaNotFoundError(KeyError):
    """Raised when a schema name is not present in the catalog."""

    def __init__(self, name: str) -> None:
        self.schema_name = name
        super().__init__(f"Schema {name!r} is not registered in the catalog")


class SchemaCatalog:
    """Named JSON Schemas plus their registered extensions."""

    def __init__(self) -> None:
        self._schemas: dict[str, Schema] = {}
        self._extensions: dict[str, list[str]] = {}

    @classmethod
    def with_defaults(cls, config: UserGroupsConfig | None = None) -> "SchemaCatalog":
        """Return a catalog holding the usergroup schema and its extension."""
        config = config or UserGroupsConfig()
        catalog = cls()
        catalog.add_schema(config.schema_name, usergroup_schema(config))
        catalog.add_schema(config.schema_extension_name, usergroups_extension(config))
        return catalog

    def add_schema(self, name: str, schema: Schema) -> None:
        """Store ``schema`` under ``name``, replacing any previous one."""
        self._schemas[name] = copy.deepcopy(schema)

    def extend_schema(self, base_schema_name: str, ext_schema_name: str) -> None:
        """Merge ``ext_schema_name`` into ``base_schema_name``.

        Neither schema has to exist yet; the merge happens lazily in
        :meth:`get_schema`.  Repeated calls with the same pair are kept
        once.
        """
        extensions = self._extensions.setdefault(base_schema_name, [])
        if ext_schema_name not in extensions:
            extensions.append(ext_schema_name)
        logger.debug("Extended schema %r with %r", base_schema_name, ext_schema_name)

    def extensions_for(self, base_schema_name: str) -> list[str]:
        return list(self._extensions.get(base_schema_name, []))

    def get_schema(self, name: str) -> Schema:
        """Return ``name`` with all of its extensions' properties merged in.

        Raises
        ------
        SchemaNotFoundError
            If ``name`` or one of its extensions is not in the catalog.
        """
        if name not in self._schemas:
            raise SchemaNotFoundError(name)
        schema = copy.deepcopy(self._schemas[name])
        properties: dict[str, object] = schema.setdefault("properties", {})  # type: ignore[assignment]
        for ext_name in self._extensions.get(name, []):
            if ext_name not in self._schemas:
                raise SchemaNotFoundError(ext_name)
            ext_properties = self._schemas[ext_name].get("properties", {})
            properties.update(copy.deepcopy(ext_properties))  # type: ignore[call-overload]
        return schema

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __repr__(self) -> str:
        return f"SchemaCatalog(schemas={sorted(self._schemas)})"
