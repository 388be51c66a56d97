"""Unit tests for usergroups.host — ModuleDirectory resolution."""
from __future__ import annotations

import asyncio

import pytest

from usergroups.core.ports import ModuleResolver
from usergroups.host import ModuleAlreadyAddedError, ModuleDirectory


class TestModuleDirectory:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(ModuleDirectory(), ModuleResolver)

    @pytest.mark.asyncio
    async def test_resolves_added_module(self) -> None:
        directory = ModuleDirectory()
        module = object()
        directory.add("users", module)
        assert await directory.wait_for_module("users") is module

    @pytest.mark.asyncio
    async def test_waits_until_module_added(self) -> None:
        directory = ModuleDirectory()
        module = object()
        waiter = asyncio.create_task(directory.wait_for_module("users"))
        await asyncio.sleep(0)
        assert not waiter.done()

        directory.add("users", module)

        assert await asyncio.wait_for(waiter, timeout=1) is module

    @pytest.mark.asyncio
    async def test_unknown_module_keeps_waiting(self) -> None:
        directory = ModuleDirectory()
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(directory.wait_for_module("ghost"), timeout=0.01)

    def test_duplicate_add_rejected(self) -> None:
        directory = ModuleDirectory()
        directory.add("users", object())
        with pytest.raises(ModuleAlreadyAddedError) as excinfo:
            directory.add("users", object())
        assert excinfo.value.module_name == "users"

    def test_listing(self) -> None:
        directory = ModuleDirectory()
        directory.add("users", object())
        directory.add("jsonschema", object())
        assert directory.list_modules() == ["jsonschema", "users"]
        assert "users" in directory
        assert len(directory) == 2
        assert "jsonschema" in repr(directory)
