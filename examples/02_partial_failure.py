#!/usr/bin/env python3
"""Example: Partial failures during reference cleanup

One document refuses the update. The group is still deleted, the other
references are removed, and the failure shows up as a warn diagnostic
and in the cascade report.

Usage:
    python examples/02_partial_failure.py

Requirements:
    pip install usergroups-cascade
"""
from __future__ import annotations

import asyncio

import usergroups
from usergroups.diagnostics import DiagnosticLevel, RecordingDiagnosticSink
from usergroups.host import ModuleDirectory
from usergroups.schema import SchemaCatalog
from usergroups.store import load_fixture

FIXTURE = """
groups:
  - {_id: g1, displayName: Editors}
collections:
  - name: users
    schemaName: user
    documents:
      - {_id: u1, userGroups: [g1]}
      - {_id: u2, userGroups: [g1, g3]}
  - name: courses
    schemaName: course
    failUpdatesFor: [c2]
    documents:
      - {_id: c1, userGroups: [g1]}
      - {_id: c2, userGroups: [g1]}
"""


async def main() -> None:
    fixture = load_fixture(FIXTURE)
    app = ModuleDirectory()
    app.add("jsonschema", SchemaCatalog.with_defaults())
    app.add("users", fixture.collection("users"))

    sink = RecordingDiagnosticSink()
    module = usergroups.create_module(app, base_delete=fixture.groups.delete, sink=sink)
    await module.init()
    await module.register_module(fixture.collection("courses"))

    report = await module.delete_with_report({"_id": "g1"})
    print(report)
    for outcome in report.failures:
        print(f"  failed: {outcome.registrant}/{outcome.document_id}: {outcome.error}")

    print("Diagnostics:")
    for diagnostic in sink.at_level(DiagnosticLevel.WARN):
        print(f"  {diagnostic}")


if __name__ == "__main__":
    asyncio.run(main())
