from __future__ import annotations

import re
from dataclasses import dataclass

NEWER_IMAGE_PATTERN = re.compile(r"^(?:Status:\s*)?Downloaded newer image for \S+")
BYTES_PATTERN = re.compile(r"^\s*(\d+)B")
LAYER_MARKER = "Pulling fs layer"


@dataclass(frozen=True)
class OutputStats:
    bytes_downloaded: int | None = None
    layer_count: int | None = None


def scrape(output: str) -> OutputStats:
    """Best-effort extraction of size and layer counts from pull progress text.

    Depends on the legacy docker progress format; anything else simply yields
    empty stats.
    """
    bytes_downloaded: int | None = None
    layers = 0
    for line in output.splitlines():
        if NEWER_IMAGE_PATTERN.match(line):
            continue
        match = BYTES_PATTERN.match(line)
        if match:
            bytes_downloaded = int(match.group(1))
        stripped = line.strip()
        if stripped == LAYER_MARKER or stripped.endswith(f": {LAYER_MARKER}"):
            layers += 1
    return OutputStats(
        bytes_downloaded=bytes_downloaded,
        layer_count=layers if layers > 0 else None,
    )
