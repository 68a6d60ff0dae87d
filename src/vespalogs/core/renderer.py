"""Terminal rendering of log records."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, tzinfo
from typing import TextIO

from vespalogs.models.enums import LogLevel
from vespalogs.models.logs import LogRecord

# Wide enough for every known level, so columns line up.
LEVEL_WIDTH = max(len(level.value) for level in LogLevel)


def _format_time(timestamp: float, tz: tzinfo | None) -> str:
    dt = datetime.fromtimestamp(timestamp, tz)
    return f"{dt:%Y-%m-%d %H:%M:%S}.{dt.microsecond:06d}"


def _dequote(message: str) -> str:
    return message.replace("\\n", "\n").replace("\\t", "\t")


def format_record(
    record: LogRecord,
    tz: tzinfo | None = None,
    dequote_newlines: bool = False,
) -> str:
    """Format one record as a terminal line, including the trailing newline.

    Timestamps are shown in local time unless ``tz`` is given.
    """
    message = _dequote(record.message) if dequote_newlines else record.message
    level = f"{record.level:<{LEVEL_WIDTH}.{LEVEL_WIDTH}}"
    return (
        f"[{_format_time(record.timestamp, tz)}] {record.host} {level} "
        f"{record.service} {record.component}\t{message}\n"
    )


def render(
    records: Iterable[LogRecord],
    out: TextIO,
    tz: tzinfo | None = None,
    dequote_newlines: bool = False,
) -> int:
    """Write one line per record to ``out``. Returns the number written."""
    count = 0
    for record in records:
        out.write(format_record(record, tz=tz, dequote_newlines=dequote_newlines))
        count += 1
    return count
