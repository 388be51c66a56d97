"""Unit tests for usergroups.store — query matching, in-memory collections,
the group store and YAML fixtures.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from usergroups.core.errors import ConfigError, GroupNotFoundError, StoreError
from usergroups.core.ports import ReferencingCollection
from usergroups.store import (
    InMemoryCollection,
    InMemoryGroupStore,
    fixture_from_dict,
    load_fixture,
    load_fixture_file,
    matches,
)

_FIXTURE = """
groups:
  - _id: g1
    displayName: Editors
  - _id: g2
    displayName: Reviewers
collections:
  - name: users
    schemaName: user
    documents:
      - {_id: u1, userGroups: [g1, g2]}
      - {_id: u2, userGroups: [g2]}
  - name: courses
    schema_name: course
    fail_updates_for: [c2]
    documents:
      - {_id: c1, userGroups: [g1]}
      - {_id: c2, userGroups: [g1]}
"""


# ===========================================================================
# matches
# ===========================================================================


class TestMatches:
    def test_scalar_equality(self) -> None:
        assert matches({"_id": "a"}, {"_id": "a"})
        assert not matches({"_id": "a"}, {"_id": "b"})

    def test_scalar_in_list(self) -> None:
        assert matches({"userGroups": ["g1", "g2"]}, {"userGroups": "g2"})
        assert not matches({"userGroups": ["g1"]}, {"userGroups": "g2"})

    def test_list_equality(self) -> None:
        assert matches({"tags": ["a"]}, {"tags": ["a"]})

    def test_missing_field(self) -> None:
        assert not matches({}, {"userGroups": "g1"})

    def test_empty_query_matches_all(self) -> None:
        assert matches({"_id": "a"}, {})


# ===========================================================================
# InMemoryCollection
# ===========================================================================


def _users() -> InMemoryCollection:
    return InMemoryCollection(
        "users",
        "user",
        [
            {"_id": "u1", "userGroups": ["g1", "g2"]},
            {"_id": "u2", "userGroups": ["g2"]},
        ],
    )


class TestInMemoryCollection:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(_users(), ReferencingCollection)

    @pytest.mark.asyncio
    async def test_find_by_reference(self) -> None:
        found = await _users().find({"userGroups": "g1"})
        assert [d["_id"] for d in found] == ["u1"]

    @pytest.mark.asyncio
    async def test_find_returns_copies(self) -> None:
        users = _users()
        found = await users.find({"_id": "u1"})
        found[0]["userGroups"].clear()
        assert users.get("u1")["userGroups"] == ["g1", "g2"]  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_raw_pull(self) -> None:
        users = _users()
        count = await users.update({"_id": "u1"}, {"$pull": {"userGroups": "g1"}}, {"rawUpdate": True})
        assert count == 1
        assert users.get("u1")["userGroups"] == ["g2"]  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_operator_without_raw_update_rejected(self) -> None:
        users = _users()
        with pytest.raises(StoreError, match="rawUpdate"):
            await users.update({"_id": "u1"}, {"$pull": {"userGroups": "g1"}})
        assert users.get("u1")["userGroups"] == ["g1", "g2"]  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_add_to_set_and_set(self) -> None:
        users = _users()
        await users.update(
            {"_id": "u2"},
            {"$addToSet": {"userGroups": "g3"}, "$set": {"email": "u2@example.com"}},
            {"rawUpdate": True},
        )
        await users.update({"_id": "u2"}, {"$addToSet": {"userGroups": "g3"}}, {"rawUpdate": True})
        assert users.get("u2") == {"_id": "u2", "userGroups": ["g2", "g3"], "email": "u2@example.com"}

    @pytest.mark.asyncio
    async def test_pull_on_missing_field_leaves_document_unchanged(self) -> None:
        users = InMemoryCollection("users", "user", [{"_id": "u9"}])
        await users.update({"_id": "u9"}, {"$pull": {"userGroups": "g1"}}, {"rawUpdate": True})
        assert users.get("u9") == {"_id": "u9"}

    @pytest.mark.asyncio
    async def test_add_to_set_on_missing_field_creates_list(self) -> None:
        users = InMemoryCollection("users", "user", [{"_id": "u9"}])
        await users.update({"_id": "u9"}, {"$addToSet": {"userGroups": "g1"}}, {"rawUpdate": True})
        assert users.get("u9") == {"_id": "u9", "userGroups": ["g1"]}

    @pytest.mark.asyncio
    async def test_pull_on_scalar_rejected(self) -> None:
        users = InMemoryCollection("users", "user", [{"_id": "u9", "userGroups": "g1"}])
        with pytest.raises(StoreError, match="not a list"):
            await users.update({"_id": "u9"}, {"$pull": {"userGroups": "g1"}}, {"rawUpdate": True})

    @pytest.mark.asyncio
    async def test_unknown_operator_rejected(self) -> None:
        with pytest.raises(StoreError, match=r"\$inc"):
            await _users().update({"_id": "u1"}, {"$inc": {"n": 1}}, {"rawUpdate": True})

    @pytest.mark.asyncio
    async def test_plain_patch_merges(self) -> None:
        users = _users()
        await users.update({"_id": "u2"}, {"email": "x@example.com"})
        assert users.get("u2")["email"] == "x@example.com"  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_update_without_match(self) -> None:
        with pytest.raises(StoreError, match="No document matches") as excinfo:
            await _users().update({"_id": "nope"}, {"a": 1})
        assert excinfo.value.collection == "users"

    @pytest.mark.asyncio
    async def test_simulated_failure(self) -> None:
        users = InMemoryCollection("users", "user", [{"_id": "u1", "userGroups": ["g1"]}], fail_updates_for=["u1"])
        with pytest.raises(StoreError, match="Write failed"):
            await users.update({"_id": "u1"}, {"$pull": {"userGroups": "g1"}}, {"rawUpdate": True})
        assert users.get("u1")["userGroups"] == ["g1"]  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_simulated_failure_writes_nothing(self) -> None:
        users = InMemoryCollection(
            "users",
            "user",
            [
                {"_id": "u1", "userGroups": ["g1"]},
                {"_id": "u2", "userGroups": ["g1"]},
            ],
            fail_updates_for=["u2"],
        )
        with pytest.raises(StoreError, match="Write failed"):
            await users.update({"userGroups": "g1"}, {"$pull": {"userGroups": "g1"}}, {"rawUpdate": True})
        assert users.get("u1")["userGroups"] == ["g1"]  # type: ignore[index]
        assert users.get("u2")["userGroups"] == ["g1"]  # type: ignore[index]

    def test_add_get_len(self) -> None:
        users = _users()
        users.add({"_id": "u3"})
        assert len(users) == 3
        assert users.get("u3") == {"_id": "u3"}
        assert users.get("missing") is None
        assert "users" in repr(users)


# ===========================================================================
# InMemoryGroupStore
# ===========================================================================


class TestInMemoryGroupStore:
    @pytest.mark.asyncio
    async def test_delete_returns_group(self) -> None:
        store = InMemoryGroupStore([{"_id": "g1", "displayName": "Editors"}])
        deleted = await store.delete({"_id": "g1"})
        assert deleted == {"_id": "g1", "displayName": "Editors"}
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delete_accepts_options(self) -> None:
        store = InMemoryGroupStore([{"_id": "g1"}])
        assert (await store.delete({"_id": "g1"}, {"invokePreHook": False}))["_id"] == "g1"

    @pytest.mark.asyncio
    async def test_delete_missing(self) -> None:
        store = InMemoryGroupStore([{"_id": "g1"}])
        with pytest.raises(GroupNotFoundError) as excinfo:
            await store.delete({"_id": "g2"})
        assert excinfo.value.query == {"_id": "g2"}
        assert "g2" in str(excinfo.value)
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_find_and_add(self) -> None:
        store = InMemoryGroupStore()
        store.add({"_id": "g1"})
        assert await store.find({"_id": "g1"}) == [{"_id": "g1"}]
        assert store.groups == [{"_id": "g1"}]


# ===========================================================================
# Fixtures
# ===========================================================================


class TestFixtures:
    def test_load_fixture(self) -> None:
        fixture = load_fixture(_FIXTURE)
        assert len(fixture.groups) == 2
        assert [c.name for c in fixture.collections] == ["users", "courses"]
        assert fixture.collection("courses").schema_name == "course"

    @pytest.mark.asyncio
    async def test_fail_updates_for_applied(self) -> None:
        courses = load_fixture(_FIXTURE).collection("courses")
        with pytest.raises(StoreError):
            await courses.update({"_id": "c2"}, {"$pull": {"userGroups": "g1"}}, {"rawUpdate": True})

    def test_unknown_collection(self) -> None:
        with pytest.raises(KeyError):
            load_fixture(_FIXTURE).collection("assets")

    def test_empty_fixture(self) -> None:
        fixture = load_fixture("")
        assert len(fixture.groups) == 0
        assert fixture.collections == []

    def test_missing_schema_name_kept_empty(self) -> None:
        fixture = fixture_from_dict({"collections": [{"name": "assets"}]})
        assert fixture.collection("assets").schema_name == ""

    @pytest.mark.parametrize(
        "data",
        [
            ["not", "a", "mapping"],
            {"groups": {"_id": "g1"}},
            {"groups": [{"displayName": "no id"}]},
            {"collections": [{"schemaName": "user"}]},
            {"collections": [{"name": "users", "documents": ["u1"]}]},
            {"collections": [{"name": "users", "failUpdatesFor": "u1"}]},
            {"collections": [{"name": "users"}, {"name": "users"}]},
            {"collections": [{"name": "jsonschema", "schemaName": "x"}]},
        ],
    )
    def test_invalid_fixtures(self, data: object) -> None:
        with pytest.raises(ConfigError):
            fixture_from_dict(data)

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_fixture("groups: [")

    def test_load_fixture_file(self, tmp_path: Path) -> None:
        path = tmp_path / "fixture.yaml"
        path.write_text(_FIXTURE, encoding="utf-8")
        assert len(load_fixture_file(path).collections) == 2

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_fixture_file(tmp_path / "nope.yaml")

    def test_custom_id_field(self) -> None:
        fixture = fixture_from_dict({"groups": [{"id": "g1"}]}, id_field="id")
        assert len(fixture.groups) == 1
