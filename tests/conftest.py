"""Shared test fixtures for usergroups.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from usergroups.diagnostics import RecordingDiagnosticSink
from usergroups.host import ModuleDirectory
from usergroups.schema import SchemaCatalog


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "usergroups"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def sink() -> RecordingDiagnosticSink:
    return RecordingDiagnosticSink()


@pytest.fixture()
def catalog() -> SchemaCatalog:
    return SchemaCatalog.with_defaults()


@pytest.fixture()
def app(catalog: SchemaCatalog) -> ModuleDirectory:
    """A module directory that already provides ``jsonschema``."""
    directory = ModuleDirectory()
    directory.add("jsonschema", catalog)
    return directory


@pytest.fixture()
def make_registrant() -> Callable[..., MagicMock]:
    """Factory for mock registrants with ``AsyncMock`` find/update."""

    def _make(
        name: str = "users",
        schema_name: str = "user",
        documents: list[dict[str, Any]] | None = None,
        update_side_effect: Any = None,
    ) -> MagicMock:
        registrant = MagicMock(name=f"registrant-{name}")
        registrant.name = name
        registrant.schema_name = schema_name
        registrant.find = AsyncMock(return_value=list(documents or []))
        registrant.update = AsyncMock(return_value=None, side_effect=update_side_effect)
        return registrant

    return _make
