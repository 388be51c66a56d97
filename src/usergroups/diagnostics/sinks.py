"""Diagnostic sinks.

- ``LoggingDiagnosticSink`` writes to a :mod:`logging` logger and is the
  default sink of :class:`~usergroups.module.UserGroupsModule`.
- ``RecordingDiagnosticSink`` keeps every :class:`Diagnostic` in memory,
  optionally forwarding to another sink.  The CLI uses it to print the
  messages collected during a cascade.
"""
from __future__ import annotations

import logging

from usergroups.core.ports import DiagnosticSink
from usergroups.diagnostics.diagnostics import Diagnostic, DiagnosticLevel

logger = logging.getLogger("usergroups")


def _join(args: tuple[object, ...]) -> str:
    return " ".join(str(a) for a in args)


class LoggingDiagnosticSink:
    """Write diagnostics to a standard-library logger.

    Parameters
    ----------
    target:
        The logger to write to.  Defaults to the ``usergroups`` logger.
    """

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target if target is not None else logger

    def log(self, level: str, *args: object) -> None:
        diagnostic_level = DiagnosticLevel.from_name(level)
        self._logger.log(diagnostic_level.logging_level, "%s", _join(args))

    def __repr__(self) -> str:
        return f"LoggingDiagnosticSink(logger={self._logger.name!r})"


class RecordingDiagnosticSink:
    """Collect diagnostics in memory.

    Parameters
    ----------
    forward_to:
        Optional sink that receives every message as well.
    """

    def __init__(self, forward_to: DiagnosticSink | None = None) -> None:
        self._forward_to = forward_to
        self._records: list[Diagnostic] = []

    def log(self, level: str, *args: object) -> None:
        self._records.append(Diagnostic(DiagnosticLevel.from_name(level), _join(args)))
        if self._forward_to is not None:
            self._forward_to.log(level, *args)

    @property
    def records(self) -> list[Diagnostic]:
        """All diagnostics recorded so far, in emission order."""
        return list(self._records)

    def at_level(self, level: DiagnosticLevel) -> list[Diagnostic]:
        """Return the recorded diagnostics with exactly ``level``."""
        return [d for d in self._records if d.level is level]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
