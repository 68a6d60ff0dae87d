"""Frozen dataclass models for log retrieval."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

_QUERY_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True, slots=True)
class LogRecord:
    """A single log entry as served by the logs API."""

    timestamp: float  # seconds since epoch, microsecond precision
    host: str
    process: str  # "pid/tid"
    service: str
    component: str
    level: str
    message: str


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """A resolved query range. Both bounds are timezone-aware UTC."""

    start: datetime
    end: datetime

    def query_params(self) -> dict[str, str]:
        return {
            "from": self.start.astimezone(timezone.utc).strftime(_QUERY_TIME_FORMAT),
            "to": self.end.astimezone(timezone.utc).strftime(_QUERY_TIME_FORMAT),
        }


@dataclass(frozen=True, slots=True)
class Diagnosis:
    """A retrieval failure, optionally explained by a version mismatch."""

    error: str
    hint: str | None = None

    def __str__(self) -> str:
        if self.hint:
            return f"{self.error}\nHint: {self.hint}"
        return self.error
