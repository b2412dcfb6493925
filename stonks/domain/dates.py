"""Timezone helpers for trade timestamps and as-of cutoffs."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


_DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def dates_utc_now() -> datetime:
    """Return the current moment as an offset-aware UTC datetime."""

    return datetime.now(timezone.utc)


def dates_resolve_timezone(timezone_name: str) -> tzinfo:
    """Resolve an IANA zone name.

    Args:
        timezone_name: Zone name such as `UTC` or `Europe/Madrid`.

    Returns:
        tzinfo: Resolved zone.

    Raises:
        ValueError: Raised when the zone is unknown.
    """

    try:
        return ZoneInfo(timezone_name.strip())
    except (ZoneInfoNotFoundError, ValueError) as error:
        raise ValueError(f"unknown timezone={timezone_name}") from error


def dates_parse_trade_timestamp(value: str, local_timezone: tzinfo) -> datetime:
    """Parse a trade date; date-only values mean the start of that local day.

    Args:
        value: ISO-8601 date or datetime text.
        local_timezone: Zone applied to values without an offset.

    Returns:
        datetime: Offset-aware timestamp in UTC.

    Raises:
        ValueError: Raised when the value is blank or malformed.
    """

    return _dates_parse(value, local_timezone, day_boundary=time.min)


def dates_parse_cutoff(value: str, local_timezone: tzinfo) -> datetime:
    """Parse an inclusive as-of cutoff; date-only values mean the end of that local day.

    Args:
        value: ISO-8601 date or datetime text.
        local_timezone: Zone applied to values without an offset.

    Returns:
        datetime: Offset-aware cutoff in UTC.

    Raises:
        ValueError: Raised when the value is blank or malformed.
    """

    return _dates_parse(value, local_timezone, day_boundary=time.max)


def dates_ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC, reading naive values as UTC."""

    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _dates_parse(value: str, local_timezone: tzinfo, day_boundary: time) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("date must be a non-empty string")

    normalized_value = value.strip()
    if _DATE_ONLY_PATTERN.match(normalized_value):
        try:
            parsed_date = date.fromisoformat(normalized_value)
        except ValueError as error:
            raise ValueError(f"invalid date={value}") from error
        return datetime.combine(parsed_date, day_boundary, tzinfo=local_timezone).astimezone(timezone.utc)

    try:
        parsed_timestamp = datetime.fromisoformat(normalized_value)
    except ValueError as error:
        raise ValueError(f"invalid date={value}, expected ISO-8601 such as 2024-01-31 or 2024-01-31T15:30") from error

    if parsed_timestamp.tzinfo is None or parsed_timestamp.utcoffset() is None:
        parsed_timestamp = parsed_timestamp.replace(tzinfo=local_timezone)
    return parsed_timestamp.astimezone(timezone.utc)


__all__ = [
    "dates_ensure_utc",
    "dates_parse_cutoff",
    "dates_parse_trade_timestamp",
    "dates_resolve_timezone",
    "dates_utc_now",
]
