from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from .pull import ImagePuller, PullResult, timestamp

LOGGER = logging.getLogger("pulltime.modes")

COLD = "cold"
WARM = "warm"


@dataclass(frozen=True)
class CompareRecord:
    image: str
    registry: str
    pull_time_ms: int
    success: bool
    error: str | None = None

    @classmethod
    def from_result(cls, result: PullResult) -> "CompareRecord":
        return cls(
            image=result.image,
            registry=result.registry,
            pull_time_ms=result.pull_time_ms,
            success=result.success,
            error=result.error,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "image": self.image,
            "registry": self.registry,
            "pull_time_ms": self.pull_time_ms,
            "success": self.success,
        }
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True)
class CIRecord:
    image: str
    registry: str
    success: bool
    pull_time_ms: int
    timestamp: str
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "image": self.image,
            "registry": self.registry,
            "success": self.success,
            "pull_time_ms": self.pull_time_ms,
        }
        if self.error:
            payload["error"] = self.error
        payload["timestamp"] = self.timestamp
        return payload


@dataclass(frozen=True)
class WarmupIteration:
    iteration: int
    pull_time_ms: int
    cache_state: str
    success: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "iteration": self.iteration,
            "pull_time_ms": self.pull_time_ms,
            "cache_state": self.cache_state,
            "success": self.success,
        }
        if self.error:
            payload["error"] = self.error
        return payload


def compare(puller: ImagePuller, mirror: str, remote: str) -> list[CompareRecord]:
    """Pull a mirror reference and a remote reference one after the other."""
    return [CompareRecord.from_result(puller.pull(image)) for image in (mirror, remote)]


def ci(puller: ImagePuller, image: str) -> CIRecord:
    result = puller.pull(image)
    return CIRecord(
        image=result.image,
        registry=result.registry,
        success=result.success,
        pull_time_ms=result.pull_time_ms,
        timestamp=timestamp(),
        error=result.error,
    )


def warmup(
    puller: ImagePuller,
    image: str,
    iterations: int = 3,
    delay_ms: int = 1000,
    sleep: Callable[[float], None] = time.sleep,
) -> list[WarmupIteration]:
    """Measure cold and warm pulls of ``image``.

    The local copy is removed before the first pull and between iterations,
    never after the last one. Only the first iteration is labelled cold.
    Removal failures are ignored, so a leftover image can skew the numbers.
    """
    results: list[WarmupIteration] = []
    for iteration in range(1, iterations + 1):
        if iteration == 1:
            puller.remove(image)
        result = puller.pull(image)
        results.append(
            WarmupIteration(
                iteration=iteration,
                pull_time_ms=result.pull_time_ms,
                cache_state=COLD if iteration == 1 else WARM,
                success=result.success,
                error=result.error,
            )
        )
        LOGGER.info(
            "warmup iteration %d/%d for %s: %dms",
            iteration,
            iterations,
            image,
            result.pull_time_ms,
        )
        if iteration < iterations:
            puller.remove(image)
            sleep(delay_ms / 1000.0)
    return results
