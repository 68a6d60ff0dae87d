"""Enumerations for vespalogs models."""

from enum import Enum


class TargetType(str, Enum):
    """Where a command is sent."""

    LOCAL = "local"
    CLOUD = "cloud"


class LogLevel(str, Enum):
    """Log levels written by Vespa services.

    Records carry their level as a plain string, so levels missing here
    still parse and render.
    """

    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    CONFIG = "config"
    INFO = "info"
    EVENT = "event"
    DEBUG = "debug"
    SPAM = "spam"


class FetchState(str, Enum):
    """Stages of a single log retrieval."""

    RESOLVING_WINDOW = "resolving_window"
    FETCHING = "fetching"
    RENDERING = "rendering"
    DIAGNOSING = "diagnosing"
    DONE = "done"
