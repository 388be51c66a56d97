"""Configuration for the usergroups module.

``UserGroupsConfig`` holds the names the module registers itself under
and the document field names the cascade reads and writes.  Every field
has a default, so an empty YAML document is a valid configuration.

Usage
-----
::

    from usergroups.config import UserGroupsConfig

    config = UserGroupsConfig.load("usergroups.yaml")
    config.reference_field
    'userGroups'

Example file::

    schema_extension_name: usergroups
    reference_field: userGroups
    id_field: _id
    builtin_registrants: [users]
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from usergroups.core.errors import ConfigError


@dataclass(frozen=True)
class UserGroupsConfig:
    """Effective module configuration.

    Parameters
    ----------
    root:
        API root the module is mounted under.
    schema_name:
        Schema of a usergroup document.
    schema_extension_name:
        Schema merged into every registrant's schema to add the
        group-reference field.
    collection_name:
        Collection that stores usergroups.
    reference_field:
        Document field holding group ids in registrant collections.
    id_field:
        Document field holding a document's own id.
    builtin_registrants:
        Modules registered automatically during ``init``.
    """

    root: str = "usergroups"
    schema_name: str = "usergroup"
    schema_extension_name: str = "usergroups"
    collection_name: str = "usergroups"
    reference_field: str = "userGroups"
    id_field: str = "_id"
    builtin_registrants: tuple[str, ...] = ("users",)

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "builtin_registrants":
                if not all(isinstance(v, str) and v for v in value):
                    raise ConfigError(
                        f"builtin_registrants must be non-empty strings, got {value!r}"
                    )
            elif not isinstance(value, str) or not value:
                raise ConfigError(f"{f.name} must be a non-empty string, got {value!r}")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "UserGroupsConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")
        values = dict(data)
        if "builtin_registrants" in values:
            registrants = values["builtin_registrants"]
            if isinstance(registrants, str) or not isinstance(registrants, (list, tuple)):
                raise ConfigError(
                    f"builtin_registrants must be a list, got {registrants!r}"
                )
            values["builtin_registrants"] = tuple(registrants)
        return cls(**values)

    @classmethod
    def from_yaml(cls, text: str) -> "UserGroupsConfig":
        """Parse a YAML document into a config."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML configuration: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str | Path) -> "UserGroupsConfig":
        """Read and parse a YAML configuration file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
        return cls.from_yaml(text)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["builtin_registrants"] = list(self.builtin_registrants)
        return data
