"""Diagnostics for usergroups.

Exports the diagnostic record types and the two built-in sinks.
"""
from __future__ import annotations

from usergroups.diagnostics.diagnostics import Diagnostic, DiagnosticLevel
from usergroups.diagnostics.sinks import LoggingDiagnosticSink, RecordingDiagnosticSink

__all__ = [
    "Diagnostic",
    "DiagnosticLevel",
    "LoggingDiagnosticSink",
    "RecordingDiagnosticSink",
]
