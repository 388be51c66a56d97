#!/usr/bin/env python3
"""Example: Quickstart — usergroups

Minimal working example: wire the usergroups module into a host,
register a second referencing collection, and delete a group.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install usergroups-cascade
"""
from __future__ import annotations

import asyncio

import usergroups
from usergroups.host import ModuleDirectory
from usergroups.schema import SchemaCatalog
from usergroups.store import InMemoryCollection, InMemoryGroupStore


async def main() -> None:
    print(f"usergroups version: {usergroups.__version__}")

    # Step 1: Build a host with a schema service and two collections
    users = InMemoryCollection(
        "users", "user", [{"_id": "u1", "userGroups": ["g1", "g2"]}]
    )
    courses = InMemoryCollection(
        "courses", "course", [{"_id": "c1", "userGroups": ["g1"]}]
    )
    app = ModuleDirectory()
    app.add("jsonschema", SchemaCatalog.with_defaults())
    app.add("users", users)
    groups = InMemoryGroupStore([{"_id": "g1", "displayName": "Editors"}])

    # Step 2: Create and initialise the module (registers "users")
    module = usergroups.create_module(app, base_delete=groups.delete)
    await module.init()
    await module.register_module(courses)
    print(f"Registered: {[m.name for m in module.modules]}")

    # Step 3: Delete the group; references are pulled everywhere
    deleted = await module.delete({"_id": "g1"})
    print(f"Deleted group: {deleted}")
    print(f"users/u1 -> {users.get('u1')}")
    print(f"courses/c1 -> {courses.get('c1')}")


if __name__ == "__main__":
    asyncio.run(main())
