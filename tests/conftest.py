"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from pulltime.pull import ImagePuller
from pulltime.runtime import RuntimeCommands
from tests.fakes import FakeProcessRunner


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def puller(fake_runner: FakeProcessRunner) -> ImagePuller:
    return ImagePuller(RuntimeCommands("docker"), process_runner=fake_runner)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PULLTIME_RUNTIME",
        "PULLTIME_LOG_LEVEL",
        "PULLTIME_CONCURRENCY",
        "PULLTIME_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
