from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence

LOGGER = logging.getLogger("pulltime.runtime")

DEFAULT_RUNTIME = "docker"
KILL_GRACE_SECONDS = 5.0


@dataclass(frozen=True)
class ProcessOutcome:
    output: str
    error: str | None = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.timed_out


ProcessRunner = Callable[..., ProcessOutcome]


def _kill_group(process: subprocess.Popen) -> None:
    """Kill the child together with anything it spawned in its session."""
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except (AttributeError, OSError):
        process.kill()


def run_process(args: Sequence[str], timeout: float | None = None) -> ProcessOutcome:
    """Run ``args`` to completion and return its combined stdout/stderr.

    The child runs in its own session and the whole process group is killed
    once ``timeout`` seconds elapse. A non-zero exit or a missing executable is reported through
    ``error`` instead of raising.
    """
    try:
        process = subprocess.Popen(
            list(args),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
            start_new_session=True,
        )
    except OSError as exc:
        return ProcessOutcome(output="", error=str(exc))

    try:
        output, _ = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_group(process)
        try:
            output, _ = process.communicate(timeout=KILL_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            output = ""
        LOGGER.warning("%s killed after %.1fs", " ".join(args), timeout)
        return ProcessOutcome(
            output=output or "",
            error=f"timed out after {timeout:g}s",
            timed_out=True,
        )
    except BaseException:
        _kill_group(process)
        process.wait()
        raise

    if process.returncode != 0:
        return ProcessOutcome(output=output or "", error=f"exit status {process.returncode}")
    return ProcessOutcome(output=output or "")


@dataclass(frozen=True)
class RuntimeCommands:
    """Argument vectors for a docker-compatible container CLI."""

    executable: str = DEFAULT_RUNTIME

    def pull(self, image: str) -> list[str]:
        return [self.executable, "pull", image]

    def remove(self, image: str) -> list[str]:
        return [self.executable, "rmi", "-f", image]
