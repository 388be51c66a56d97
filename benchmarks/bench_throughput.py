"""Benchmark: cascade cleanup throughput.

Measures how many document references per second the cascade deleter
removes when fanning out over several in-memory collections.
"""
from __future__ import annotations

import asyncio
import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from usergroups.diagnostics import RecordingDiagnosticSink
from usergroups.host import ModuleDirectory
from usergroups.module import UserGroupsModule
from usergroups.schema import SchemaCatalog
from usergroups.store import InMemoryCollection, InMemoryGroupStore

_COLLECTIONS: int = 10
_DOCUMENTS_PER_COLLECTION: int = 500


async def _cascade_once(collections: int, documents: int) -> int:
    app = ModuleDirectory()
    app.add("jsonschema", SchemaCatalog.with_defaults())
    stores = [
        InMemoryCollection(
            f"coll{c}",
            f"schema{c}",
            [{"_id": f"c{c}-d{d}", "userGroups": ["g1", "g2"]} for d in range(documents)],
        )
        for c in range(collections)
    ]
    app.add("users", stores[0])
    groups = InMemoryGroupStore([{"_id": "g1"}])
    module = UserGroupsModule(app, base_delete=groups.delete, sink=RecordingDiagnosticSink())
    await module.init()
    for store in stores[1:]:
        await module.register_module(store)

    report = await module.delete_with_report({"_id": "g1"})
    return report.successful


def bench_cascade_throughput(
    collections: int = _COLLECTIONS, documents: int = _DOCUMENTS_PER_COLLECTION
) -> dict[str, object]:
    """Benchmark one cascade over ``collections`` x ``documents`` references.

    Returns
    -------
    dict with keys: operation, references, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    removed = asyncio.run(_cascade_once(collections, documents))
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": "usergroups_cascade_throughput",
        "references": removed,
        "total_seconds": round(total, 4),
        "ops_per_second": round(removed / total, 1) if total > 0 else 0.0,
        "avg_latency_ms": round(total / max(removed, 1) * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} refs/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    result = bench_cascade_throughput()
    output_path = results_dir / "cascade_throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
