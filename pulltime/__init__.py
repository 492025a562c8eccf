"""
Container image pull latency measurement.

Times ``<runtime> pull`` for single images, concurrent benchmarks,
mirror/remote comparisons, CI exports and cold/warm cache runs.
"""

from .main import main

__all__ = ["main"]
