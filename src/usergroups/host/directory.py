"""In-process module directory.

``ModuleDirectory`` is a minimal :class:`~usergroups.core.ports.ModuleResolver`
for running the usergroups module outside a host framework: modules are
added by name and ``wait_for_module`` suspends until the named module has
been added.  There is no timeout; waiting on a module that is never added
waits forever.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

logger = logging.getLogger(__name__)


class ModuleAlreadyAddedError(ValueError):
    """Raised when a module name is added twice."""

    def __init__(self, name: str) -> None:
        self.module_name = name
        super().__init__(f"Module {name!r} has already been added to the directory")


class ModuleDirectory:
    """Named modules, resolved asynchronously."""

    def __init__(self) -> None:
        self._modules: dict[str, Any] = {}
        self._ready: dict[str, asyncio.Event] = {}

    def add(self, name: str, module: Any) -> None:
        """Make ``module`` available under ``name`` and wake any waiters.

        Raises
        ------
        ModuleAlreadyAddedError
            If ``name`` is already present.
        """
        if name in self._modules:
            raise ModuleAlreadyAddedError(name)
        self._modules[name] = module
        self._event(name).set()
        logger.debug("Module %r is ready", name)

    async def wait_for_module(self, name: str) -> Any:
        """Return the module named ``name``, waiting until it is added."""
        await self._event(name).wait()
        return self._modules[name]

    def _event(self, name: str) -> asyncio.Event:
        if name not in self._ready:
            self._ready[name] = asyncio.Event()
        return self._ready[name]

    def list_modules(self) -> list[str]:
        """Return the names of all added modules, sorted."""
        return sorted(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"ModuleDirectory(modules={self.list_modules()})"
