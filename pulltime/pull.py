from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .registry import classify
from .runtime import ProcessRunner, RuntimeCommands, run_process
from .scraper import scrape

LOGGER = logging.getLogger("pulltime.pull")


def timestamp(moment: datetime | None = None) -> str:
    """RFC 3339 timestamp in local time, second precision."""
    moment = moment or datetime.now()
    return moment.astimezone().isoformat(timespec="seconds")


@dataclass(frozen=True)
class PullResult:
    """One measured pull attempt."""

    image: str
    registry: str
    success: bool
    pull_time_ms: int
    start_time: str
    end_time: str
    error: str | None = None
    bytes_downloaded: int | None = None
    layer_count: int | None = None
    cmd_output: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "image": self.image,
            "registry": self.registry,
            "success": self.success,
            "pull_time_ms": self.pull_time_ms,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }
        if self.error:
            payload["error"] = self.error
        if self.bytes_downloaded is not None:
            payload["bytes_downloaded"] = self.bytes_downloaded
        if self.layer_count is not None:
            payload["layers"] = self.layer_count
        if self.cmd_output:
            payload["cmd_output"] = self.cmd_output
        return payload

    @classmethod
    def failed(cls, image: str, error: str, started: datetime, elapsed_ms: int = 0) -> "PullResult":
        return cls(
            image=image,
            registry=classify(image),
            success=False,
            pull_time_ms=max(elapsed_ms, 0),
            start_time=timestamp(started),
            end_time=timestamp(),
            error=error,
        )


class ImagePuller:
    """Times ``<runtime> pull`` invocations and cleans up with ``<runtime> rmi``."""

    def __init__(
        self,
        commands: RuntimeCommands | None = None,
        process_runner: ProcessRunner = run_process,
    ) -> None:
        self._commands = commands or RuntimeCommands()
        self._run = process_runner

    @property
    def runtime(self) -> str:
        return self._commands.executable

    def pull(self, image: str, timeout: float | None = None) -> PullResult:
        started = datetime.now()
        start = time.monotonic()
        LOGGER.info("pulling %s", image)
        outcome = self._run(self._commands.pull(image), timeout)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        finished = datetime.now()

        stats = scrape(outcome.output)
        result = PullResult(
            image=image,
            registry=classify(image),
            success=outcome.ok,
            pull_time_ms=max(elapsed_ms, 0),
            start_time=timestamp(started),
            end_time=timestamp(finished),
            error=None if outcome.ok else (outcome.error or "pull failed"),
            bytes_downloaded=stats.bytes_downloaded,
            layer_count=stats.layer_count,
            cmd_output=outcome.output,
        )
        if result.success:
            LOGGER.info("pulled %s in %dms", image, result.pull_time_ms)
        else:
            LOGGER.warning("pull of %s failed after %dms: %s", image, result.pull_time_ms, result.error)
        return result

    def remove(self, image: str) -> None:
        """Drop the local copy of ``image``; failures are only logged."""
        outcome = self._run(self._commands.remove(image), None)
        if not outcome.ok:
            LOGGER.info("removing %s failed (ignored): %s", image, outcome.error)
