"""Benchmark: group deletion latency (p50/p95/mean).

Measures the per-call latency of ``UserGroupsModule.delete`` for a small
world of three collections with a handful of referencing documents each.
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

_WARMUP: int = 20
_ITERATIONS: int = 500


async def _measure(iterations: int, warmup: int) -> list[float]:
    total = iterations + warmup
    app = ModuleDirectory()
    app.add("jsonschema", SchemaCatalog.with_defaults())
    collections = [
        InMemoryCollection(
            name,
            name.rstrip("s"),
            [{"_id": f"{name}-{n}", "userGroups": [f"g{n % total}"]} for n in range(total)],
        )
        for name in ("users", "courses", "assets")
    ]
    app.add("users", collections[0])
    groups = InMemoryGroupStore([{"_id": f"g{n}"} for n in range(total)])
    module = UserGroupsModule(app, base_delete=groups.delete, sink=RecordingDiagnosticSink())
    await module.init()
    for collection in collections[1:]:
        await module.register_module(collection)

    latencies_ms: list[float] = []
    for n in range(total):
        t0 = time.perf_counter()
        await module.delete({"_id": f"g{n}"})
        if n >= warmup:
            latencies_ms.append((time.perf_counter() - t0) * 1000)
    return latencies_ms


def bench_delete_latency(
    iterations: int = _ITERATIONS, warmup: int = _WARMUP
) -> dict[str, object]:
    """Benchmark ``delete`` latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    latencies_ms = asyncio.run(_measure(iterations, warmup))

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "usergroups_delete_latency",
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1) if total > 0 else 0.0,
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(sorted_lats[int(n * 0.50)], 4),
        "p95_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


if __name__ == "__main__":
    result = bench_delete_latency()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
