"""vespalogs data models."""

from vespalogs.models.enums import FetchState, LogLevel, TargetType
from vespalogs.models.logs import Diagnosis, LogRecord, TimeWindow
from vespalogs.models.version import Version, VersionRequirement

__all__ = [
    "TargetType",
    "LogLevel",
    "FetchState",
    "LogRecord",
    "TimeWindow",
    "Diagnosis",
    "Version",
    "VersionRequirement",
]
