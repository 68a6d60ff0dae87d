"""Parsing of the tab-separated log format served by the logs API.

Each line holds seven fields::

    1632738690.905535	host1a	806/53	logserver-container	Component	info	Message

The message is the last field and may itself contain tabs.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone

from vespalogs.models.logs import LogRecord

logger = logging.getLogger("vespalogs.parser")

_FIELD_COUNT = 7
# A day of headroom on both ends so any local offset still renders.
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc) + timedelta(days=1)
_LATEST = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=1)


def parse_line(line: str) -> LogRecord | None:
    """Parse one wire line. Returns None for lines that are not log records."""
    line = line.rstrip("\r")
    if not line:
        return None

    fields = line.split("\t", _FIELD_COUNT - 1)
    if len(fields) < _FIELD_COUNT:
        return None

    try:
        timestamp = float(fields[0])
    except ValueError:
        return None
    if not math.isfinite(timestamp):
        return None
    try:
        moment = datetime.fromtimestamp(timestamp, timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    if not _EARLIEST < moment < _LATEST:
        return None

    host, process, service, component, level, message = fields[1:]
    return LogRecord(
        timestamp=timestamp,
        host=host,
        process=process,
        service=service,
        component=component,
        level=level,
        message=message,
    )


def parse_records(body: bytes | str) -> list[LogRecord]:
    """Parse a full response body, skipping malformed lines."""
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body

    records: list[LogRecord] = []
    skipped = 0
    for line in text.split("\n"):
        record = parse_line(line)
        if record is None:
            if line.strip():
                skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug("Skipped %d malformed log line(s)", skipped)
    return records
