"""Diagnostic record types.

A ``Diagnostic`` is a single message emitted by the registry or the
cascade deleter through a :class:`~usergroups.core.ports.DiagnosticSink`.
Levels are named with the short strings the host framework uses
(``"warn"``, ``"debug"`` ...) and map onto :mod:`logging` levels.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class DiagnosticLevel(Enum):
    """Diagnostic levels, ordered from most to least severe."""

    ERROR = "error"
    WARN = "warn"
    SUCCESS = "success"
    INFO = "info"
    DEBUG = "debug"
    VERBOSE = "verbose"

    @classmethod
    def from_name(cls, name: str) -> "DiagnosticLevel":
        """Return the level for ``name``, falling back to ``INFO``.

        ``"warning"`` is accepted as an alias of ``"warn"``.
        """
        lowered = str(name).lower()
        if lowered == "warning":
            return cls.WARN
        try:
            return cls(lowered)
        except ValueError:
            return cls.INFO

    @property
    def logging_level(self) -> int:
        """The :mod:`logging` level this diagnostic level is written at."""
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS: dict[DiagnosticLevel, int] = {
    DiagnosticLevel.ERROR: logging.ERROR,
    DiagnosticLevel.WARN: logging.WARNING,
    DiagnosticLevel.SUCCESS: logging.INFO,
    DiagnosticLevel.INFO: logging.INFO,
    DiagnosticLevel.DEBUG: logging.DEBUG,
    DiagnosticLevel.VERBOSE: logging.DEBUG,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single emitted diagnostic.

    Parameters
    ----------
    level:
        How serious this message is.
    message:
        Human-readable text.
    timestamp:
        When the message was emitted (UTC).
    """

    level: DiagnosticLevel
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return f"[{self.level.value}] {self.message}"

    @property
    def is_warning(self) -> bool:
        """Return True for ``warn`` and ``error`` diagnostics."""
        return self.level in (DiagnosticLevel.WARN, DiagnosticLevel.ERROR)
