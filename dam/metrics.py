"""Prometheus metrics used across the application."""

from __future__ import annotations

import contextlib
import os
import time
from pathlib import Path
from typing import Iterator

from prometheus_client import Counter, Gauge, Histogram

store_operations_total = Counter(
    "dam_store_operations_total",
    "Record store operations by outcome.",
    ["operation", "outcome"],
)
store_operation_seconds = Histogram(
    "dam_store_operation_seconds",
    "Time spent in record store operations (including the remote sheet).",
    ["operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30, float("inf")),
)
storage_requests_total = Counter(
    "dam_storage_requests_total",
    "Calls to the object storage provider by outcome.",
    ["operation", "outcome"],
)
assets_registered = Gauge(
    "dam_assets_registered",
    "Number of asset rows seen on the last full read of the sheet.",
    multiprocess_mode="livemax",
)


@contextlib.contextmanager
def track_store_operation(operation: str) -> Iterator[None]:
    started = time.perf_counter()
    try:
        yield
    except Exception:
        store_operations_total.labels(operation=operation, outcome="error").inc()
        raise
    else:
        store_operations_total.labels(operation=operation, outcome="ok").inc()
    finally:
        store_operation_seconds.labels(operation=operation).observe(time.perf_counter() - started)


def cleanup_multiprocess_directory() -> None:
    """Remove leftover metric shard files when using multiprocess mode."""

    prom_dir = os.getenv("PROMETHEUS_MULTIPROC_DIR")
    if not prom_dir:
        return
    prom_path = Path(prom_dir)
    if not prom_path.exists():  # pragma: no cover - defensive guard
        return

    for child in prom_path.iterdir():
        if not child.is_file():
            continue
        try:
            child.unlink()
        except FileNotFoundError:  # pragma: no cover - benign race condition
            continue


__all__ = [
    "store_operations_total",
    "store_operation_seconds",
    "storage_requests_total",
    "assets_registered",
    "track_store_operation",
    "cleanup_multiprocess_directory",
]
