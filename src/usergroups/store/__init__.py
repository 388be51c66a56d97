"""In-memory stores and YAML fixtures."""
from __future__ import annotations

from usergroups.store.fixtures import Fixture, fixture_from_dict, load_fixture, load_fixture_file
from usergroups.store.memory import InMemoryCollection, InMemoryGroupStore, matches

__all__ = [
    "Fixture",
    "InMemoryCollection",
    "InMemoryGroupStore",
    "fixture_from_dict",
    "load_fixture",
    "load_fixture_file",
    "matches",
]
