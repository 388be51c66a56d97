"""Minimal host-side module resolution."""
from __future__ import annotations

from usergroups.host.directory import ModuleAlreadyAddedError, ModuleDirectory

__all__ = ["ModuleAlreadyAddedError", "ModuleDirectory"]
