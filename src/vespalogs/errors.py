"""Exceptions raised by vespalogs."""

from __future__ import annotations

from vespalogs.models.logs import Diagnosis


class VespaLogsError(Exception):
    """Base class for errors reported to the user as ``Error: <message>``."""


class ConfigError(VespaLogsError):
    """Raised when configuration values are missing or malformed."""


class InvalidPeriodError(VespaLogsError):
    """Raised when the requested time window cannot be resolved."""


class FetchError(VespaLogsError):
    """Raised when the logs endpoint cannot be read."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProbeError(VespaLogsError):
    """Raised when a target's version cannot be determined."""


class LogRetrievalError(VespaLogsError):
    """Raised when a fetch failed, carrying the diagnosis for it."""

    def __init__(self, diagnosis: Diagnosis) -> None:
        super().__init__(f"could not retrieve logs: {diagnosis}")
        self.diagnosis = diagnosis
