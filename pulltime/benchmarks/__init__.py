"""
Concurrent pull benchmark.

Fans image pulls out over a bounded pool of worker threads, gathers their
results and aggregates timing statistics.
"""

from .config import BenchmarkConfig
from .runner import BenchmarkRunner
from .summary import BenchmarkSummary, summarize

__all__ = ["BenchmarkConfig", "BenchmarkRunner", "BenchmarkSummary", "summarize"]
