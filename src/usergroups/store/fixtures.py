"""YAML fixtures for the in-memory stores.

A fixture describes the usergroups and every collection that may
reference them::

    groups:
      - _id: g1
        displayName: Editors
    collections:
      - name: users
        schemaName: user
        documents:
          - {_id: u1, userGroups: [g1, g2]}
      - name: courses
        schemaName: course
        failUpdatesFor: [c2]
        documents:
          - {_id: c1, userGroups: [g1]}
          - {_id: c2, userGroups: [g1]}

``schema_name`` and ``fail_updates_for`` are accepted as spellings of the
camel-case keys.  Collection names must be unique and may not be
``jsonschema``, which names the schema module.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from usergroups.core.errors import ConfigError
from usergroups.registry.registry import SCHEMA_MODULE
from usergroups.store.memory import InMemoryCollection, InMemoryGroupStore


@dataclass
class Fixture:
    """Stores built from a fixture document."""

    groups: InMemoryGroupStore
    collections: list[InMemoryCollection] = field(default_factory=list)

    def collection(self, name: str) -> InMemoryCollection:
        """Return the collection called ``name``.

        Raises
        ------
        KeyError
            If the fixture has no such collection.
        """
        for candidate in self.collections:
            if candidate.name == name:
                return candidate
        raise KeyError(name)


def _get(entry: dict[str, Any], camel: str, snake: str, default: Any) -> Any:
    if camel in entry:
        return entry[camel]
    return entry.get(snake, default)


def _as_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _build_collection(entry: Any, id_field: str) -> InMemoryCollection:
    if not isinstance(entry, dict) or not entry.get("name"):
        raise ConfigError(f"Every collection needs a name, got {entry!r}")
    name = str(entry["name"])
    documents = _as_list(entry.get("documents"), f"{name}.documents")
    for document in documents:
        if not isinstance(document, dict):
            raise ConfigError(f"{name}: documents must be mappings, got {document!r}")
    return InMemoryCollection(
        name=name,
        schema_name=str(_get(entry, "schemaName", "schema_name", "") or ""),
        documents=documents,
        id_field=id_field,
        fail_updates_for=_as_list(
            _get(entry, "failUpdatesFor", "fail_updates_for", None),
            f"{name}.failUpdatesFor",
        ),
    )


def fixture_from_dict(data: Any, id_field: str = "_id") -> Fixture:
    """Build a :class:`Fixture` from an already-parsed document."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Fixture must be a mapping, got {type(data).__name__}")
    groups = _as_list(data.get("groups"), "groups")
    for group in groups:
        if not isinstance(group, dict) or id_field not in group:
            raise ConfigError(f"Every group needs an {id_field!r} field, got {group!r}")
    collections = [
        _build_collection(entry, id_field)
        for entry in _as_list(data.get("collections"), "collections")
    ]
    seen: set[str] = set()
    for collection in collections:
        if collection.name == SCHEMA_MODULE:
            raise ConfigError(
                f"Collection name {SCHEMA_MODULE!r} is reserved for the schema module"
            )
        if collection.name in seen:
            raise ConfigError(f"Duplicate collection name {collection.name!r}")
        seen.add(collection.name)
    return Fixture(groups=InMemoryGroupStore(groups), collections=collections)


def load_fixture(text: str, id_field: str = "_id") -> Fixture:
    """Parse a YAML fixture document."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML fixture: {exc}") from exc
    return fixture_from_dict(data, id_field=id_field)


def load_fixture_file(path: str | Path, id_field: str = "_id") -> Fixture:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read fixture {path}: {exc}") from exc
    return load_fixture(text, id_field=id_field)
