from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from ..pull import PullResult
from .collector import build_dataframe


@dataclass(frozen=True)
class BenchmarkSummary:
    total: int
    succeeded: int
    min_ms: int | None
    max_ms: int | None
    avg_ms: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "min_ms": self.min_ms,
            "max_ms": self.max_ms,
            "avg_ms": self.avg_ms,
        }

    def format_line(self) -> str:
        def _ms(value: float | None, fmt: str) -> str:
            return "n/a" if value is None else f"{value:{fmt}}ms"

        return (
            f"Summary: {self.succeeded}/{self.total} succeeded"
            f" | min: {_ms(self.min_ms, 'd')}"
            f" | max: {_ms(self.max_ms, 'd')}"
            f" | avg: {_ms(self.avg_ms, '.2f')}"
        )


def summarize(results: Sequence[PullResult]) -> BenchmarkSummary:
    """Aggregate timings of the successful pulls.

    With no successful pull the min/max/avg fields are ``None``.
    """
    frame = build_dataframe(list(results))
    succeeded = frame[frame["success"] == True]  # noqa: E712
    if succeeded.empty:
        return BenchmarkSummary(
            total=len(frame), succeeded=0, min_ms=None, max_ms=None, avg_ms=None
        )
    timings = succeeded["pull_time_ms"].astype("int64")
    return BenchmarkSummary(
        total=len(frame),
        succeeded=len(succeeded),
        min_ms=int(timings.min()),
        max_ms=int(timings.max()),
        avg_ms=float(timings.mean()),
    )
