from __future__ import annotations

import threading

import pandas as pd

from ..pull import PullResult

RESULT_COLUMNS = [
    "image",
    "registry",
    "success",
    "pull_time_ms",
    "start_time",
    "end_time",
    "error",
    "bytes_downloaded",
    "layers",
]


class BenchmarkResultCollector:
    """Thread-safe sink for results published by benchmark workers."""

    def __init__(self) -> None:
        self._records_lock = threading.Lock()
        self._results: list[PullResult] = []

    def publish(self, result: PullResult) -> None:
        with self._records_lock:
            self._results.append(result)

    def results(self) -> list[PullResult]:
        with self._records_lock:
            return list(self._results)

    def __len__(self) -> int:
        with self._records_lock:
            return len(self._results)


def build_dataframe(results: list[PullResult]) -> pd.DataFrame:
    """Tabulate results; the raw command output is left out."""
    if not results:
        return pd.DataFrame(columns=RESULT_COLUMNS)
    rows = [
        {
            "image": result.image,
            "registry": result.registry,
            "success": result.success,
            "pull_time_ms": result.pull_time_ms,
            "start_time": result.start_time,
            "end_time": result.end_time,
            "error": result.error,
            "bytes_downloaded": result.bytes_downloaded,
            "layers": result.layer_count,
        }
        for result in results
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)
