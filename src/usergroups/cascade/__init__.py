"""Cascade deletion of usergroup references."""
from __future__ import annotations

from usergroups.cascade.deleter import (
    RAW_UPDATE_OPTION,
    CascadeDeleter,
    CascadeReport,
    RemovalOutcome,
    pull_patch,
)

__all__ = [
    "CascadeDeleter",
    "CascadeReport",
    "RAW_UPDATE_OPTION",
    "RemovalOutcome",
    "pull_patch",
]
