"""Registrant bookkeeping for the usergroups cascade.

Collections that store usergroup ids register through
:meth:`ReferenceRegistry.register`; the cascade deleter iterates a
snapshot of the registry on every deletion.
"""
from __future__ import annotations

from usergroups.registry.registry import SCHEMA_MODULE, ReferenceRegistry

__all__ = ["ReferenceRegistry", "SCHEMA_MODULE"]
