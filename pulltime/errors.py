from __future__ import annotations


class PullTimeError(Exception):
    """Base class for failures of the tool itself (not of individual pulls)."""


class ConfigurationError(PullTimeError, ValueError):
    """Raised when a run is configured with values that cannot be executed."""


class OutputError(PullTimeError):
    """Raised when results cannot be encoded or written out."""
