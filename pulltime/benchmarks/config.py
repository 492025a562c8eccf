from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

from ..errors import ConfigurationError

DEFAULT_CONCURRENCY = 2
DEFAULT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class BenchmarkConfig:
    """Settings for a single concurrent benchmark run."""

    concurrency: int = DEFAULT_CONCURRENCY
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    summary: bool = False
    csv_path: Path | None = None

    def __post_init__(self) -> None:
        if self.concurrency <= 0:
            raise ConfigurationError(
                f"concurrency must be a positive integer, got {self.concurrency}"
            )
        if not math.isfinite(self.timeout_seconds) or self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout must be a positive number of seconds, got {self.timeout_seconds}"
            )
