from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Protocol, Sequence

from ..pull import PullResult
from .collector import BenchmarkResultCollector
from .config import BenchmarkConfig

LOGGER = logging.getLogger("pulltime.benchmark")


class Puller(Protocol):
    def pull(self, image: str, timeout: float | None = None) -> PullResult: ...


class BenchmarkRunner:
    """Pull a set of images in parallel, at most ``concurrency`` at a time.

    Every image gets its own worker thread. Workers wait on a shared gate
    before pulling, publish exactly one result each and never affect their
    siblings. ``run`` returns once all workers have finished; result order is
    completion order, not input order.
    """

    def __init__(self, puller: Puller, config: BenchmarkConfig) -> None:
        self._puller = puller
        self._config = config

    def run(self, images: Sequence[str]) -> list[PullResult]:
        collector = BenchmarkResultCollector()
        if not images:
            return collector.results()

        gate = threading.BoundedSemaphore(self._config.concurrency)
        LOGGER.info(
            "benchmarking %d image(s) with concurrency=%d timeout=%gs",
            len(images),
            self._config.concurrency,
            self._config.timeout_seconds,
        )

        workers = [
            threading.Thread(
                target=self._worker,
                args=(image, gate, collector),
                name=f"pull-{index}",
                daemon=True,
            )
            for index, image in enumerate(images)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        return collector.results()

    def _worker(
        self,
        image: str,
        gate: threading.BoundedSemaphore,
        collector: BenchmarkResultCollector,
    ) -> None:
        with gate:
            started = datetime.now()
            try:
                result = self._puller.pull(image, timeout=self._config.timeout_seconds)
            except Exception as exc:  # noqa: BLE001
                LOGGER.exception("worker for %s failed", image)
                result = PullResult.failed(image, str(exc) or exc.__class__.__name__, started)
            collector.publish(result)
