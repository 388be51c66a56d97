"""Exception types for usergroups.

Only base-deletion and ``find`` failures ever reach a caller of the
cascade; per-document ``update`` failures are reported through the
diagnostic sink instead.
"""
from __future__ import annotations


class UserGroupsError(Exception):
    """Base class for every error raised by this package."""


class GroupNotFoundError(UserGroupsError, KeyError):
    """Raised when a deletion filter matches no group.

    Parameters
    ----------
    query:
        The filter that was used to look the group up.
    """

    def __init__(self, query: object) -> None:
        self.query = query
        super().__init__(f"No usergroup matches {query!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class StoreError(UserGroupsError):
    """A store-level failure raised by a collection ``find`` or ``update``.

    Parameters
    ----------
    message:
        Human-readable description of the failure.
    collection:
        Name of the collection that failed, if known.
    """

    def __init__(self, message: str, collection: str | None = None) -> None:
        self.collection = collection
        prefix = f"[{collection}] " if collection else ""
        super().__init__(f"{prefix}{message}")


class MissingIdentityError(UserGroupsError):
    """Raised when the base deletion returns a result without an id."""

    def __init__(self, id_field: str, result: object) -> None:
        self.id_field = id_field
        self.result = result
        super().__init__(
            f"Base deletion returned no {id_field!r} field; got {result!r}"
        )


class ConfigError(UserGroupsError, ValueError):
    """Raised for invalid configuration or fixture documents."""
