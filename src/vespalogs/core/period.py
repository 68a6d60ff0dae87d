"""Resolution of --from/--to flags and relative durations into a query window."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from vespalogs.errors import InvalidPeriodError
from vespalogs.models.logs import TimeWindow

# 1h, 30m, 1h30m, 1.5h, 250ms
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h|d)")

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
}

# RFC 3339 date-time: an explicit offset is required.
_DATE_TIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_duration(token: str) -> timedelta:
    """Parse a positive duration such as ``1h`` or ``1h30m``."""
    text = token.strip()
    if not text:
        raise InvalidPeriodError(f"invalid period: empty duration: {token!r}")

    seconds = 0.0
    pos = 0
    while pos < len(text):
        m = _DURATION_PART_RE.match(text, pos)
        if not m:
            raise InvalidPeriodError(f"invalid period: invalid duration: {token}")
        seconds += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        pos = m.end()

    try:
        total = timedelta(seconds=seconds)
    except OverflowError:
        raise InvalidPeriodError(f"invalid period: duration too large: {token}") from None
    if total <= timedelta():
        raise InvalidPeriodError(f"invalid period: duration must be positive: {token}")
    return total


def parse_timestamp(value: str, flag: str) -> datetime:
    """Parse an RFC 3339 timestamp given for ``flag`` and convert it to UTC."""
    if not _DATE_TIME_RE.match(value.strip()):
        raise InvalidPeriodError(
            f"invalid period: could not parse {flag} value: {value} "
            "(expected a date-time such as 2021-09-27T10:00:00Z)"
        )
    text = value.strip()
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).astimezone(timezone.utc)
    except (ValueError, OverflowError):
        raise InvalidPeriodError(
            f"invalid period: could not parse {flag} value: {value}"
        ) from None


def _before(end: datetime, duration: timedelta, token: str) -> datetime:
    try:
        return end - duration
    except OverflowError:
        raise InvalidPeriodError(
            f"invalid period: {token} before {end.isoformat()} is out of range"
        ) from None


def resolve_period(
    from_arg: str | None,
    to_arg: str | None,
    relative: str | None,
    *,
    now: datetime | None = None,
    default_lookback: str = "1h",
) -> TimeWindow:
    """Resolve user time flags into a concrete window.

    A relative duration excludes --from/--to. Without any flags the window
    is the default lookback ending now.
    """
    if relative and (from_arg or to_arg):
        raise InvalidPeriodError(
            f"invalid period: cannot combine --from/--to with relative value: {relative}"
        )

    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)

    if relative:
        return TimeWindow(start=_before(now, parse_duration(relative), relative), end=now)

    if not from_arg and not to_arg:
        return TimeWindow(
            start=_before(now, parse_duration(default_lookback), default_lookback),
            end=now,
        )

    end = parse_timestamp(to_arg, "--to") if to_arg else now
    start = (
        parse_timestamp(from_arg, "--from")
        if from_arg
        else _before(end, parse_duration(default_lookback), default_lookback)
    )
    if start > end:
        raise InvalidPeriodError(
            f"invalid period: --from {start.isoformat()} is after --to {end.isoformat()}"
        )
    return TimeWindow(start=start, end=end)
