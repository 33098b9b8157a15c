"""
Timestamp normalization to epoch milliseconds.

Accepts the timestamp shapes found in user exports: a bare calendar year,
an epoch-millisecond number, or a date string. Every accepted value maps
to an integer count of milliseconds since 1970-01-01T00:00:00Z.
"""

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from dateutil import parser as date_parser

from timeslider.errors import InvalidTimestampError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MIN_YEAR = 1000
MAX_YEAR = 9999

# Range of a JavaScript Date, +-100,000,000 days around the epoch
MAX_EPOCH_MS = 8_640_000_000_000_000

# Two anchors differing in year and month; a parse that depends on which
# one is used took those parts from the anchor, not from the text
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 1))

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_year(value: float) -> bool:
    return MIN_YEAR <= value <= MAX_YEAR


def year_to_epoch_ms(year: int) -> int:
    """
    Epoch milliseconds of Jan 1 00:00:00 UTC of a calendar year.

    Args:
        year: Calendar year in [1000, 9999].

    Returns:
        Epoch milliseconds (negative before 1970).
    """
    return datetime_to_epoch_ms(datetime(int(year), 1, 1, tzinfo=timezone.utc))


def datetime_to_epoch_ms(dt: datetime) -> int:
    """Epoch milliseconds of a datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // timedelta(milliseconds=1)


def epoch_ms_to_datetime(ms: int) -> datetime:
    """UTC datetime for an epoch-millisecond value."""
    return EPOCH + timedelta(milliseconds=ms)


def _parse_date_string(text: str) -> int | None:
    """
    Parse a date string to epoch ms, or None if unparseable.

    ISO-8601 goes through datetime.fromisoformat (any year); other layouts
    such as "05/03/1990" or "March 5, 1990" go through dateutil. A missing
    day defaults to the 1st; a string without a year or month ("10:30",
    "March 5") is rejected rather than completed from the current date.
    """
    # "now"/"today" would make the result depend on the clock
    if not any(ch.isdigit() for ch in text):
        return None

    try:
        return datetime_to_epoch_ms(datetime.fromisoformat(text))
    except ValueError:
        pass

    try:
        parsed = [date_parser.parse(text, default=default) for default in _PARSE_DEFAULTS]
    except (ValueError, OverflowError):
        return None
    if parsed[0] != parsed[1]:
        return None
    return datetime_to_epoch_ms(parsed[0])


def _checked_epoch_ms(ms: int, value: Any) -> int:
    if abs(ms) > MAX_EPOCH_MS:
        msg = f"Timestamp out of range: {value!r}"
        raise InvalidTimestampError(msg)
    return ms


def normalize_timestamp(value: str | int | float) -> int:
    """
    Convert a heterogeneous timestamp to epoch milliseconds.

    Rules, tried in order:
        1. A number in [1000, 9999] is a calendar year (Jan 1, UTC).
        2. Any other finite number is already epoch milliseconds.
        3. A string is parsed as a date (naive values are UTC).
        4. A string holding an integer in [1000, 9999] is a year.

    A 4-digit numeric string is therefore always a year, never a small
    millisecond offset. Other integer strings are read as compact ISO
    dates (YYYYMMDD) when they form one, else as epoch milliseconds.

    Args:
        value: Year, epoch milliseconds, or date string.

    Returns:
        Epoch milliseconds.

    Raises:
        InvalidTimestampError: If no rule applies, or the result lies
            outside +-8.64e15 ms.
    """
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            msg = f"Invalid timestamp format: {value}"
            raise InvalidTimestampError(msg)
        if _is_year(value):
            return year_to_epoch_ms(int(value))
        return _checked_epoch_ms(int(value), value)

    if isinstance(value, str):
        text = value.strip()

        if _INTEGER_PATTERN.match(text):
            # Longer digit runs cannot be in range, and int() refuses huge ones
            if len(text.lstrip("+-")) > len(str(MAX_EPOCH_MS)):
                msg = f"Timestamp out of range: {text[:24]}..."
                raise InvalidTimestampError(msg)
            number = int(text)
            if _is_year(number):
                return year_to_epoch_ms(number)
            # Compact ISO dates such as 19900101
            try:
                return datetime_to_epoch_ms(datetime.fromisoformat(text))
            except ValueError:
                return _checked_epoch_ms(number, value)

        parsed = _parse_date_string(text)
        if parsed is not None:
            return parsed

        # "1990.0" and similar: integer-valued year strings
        try:
            number = float(text)
        except ValueError:
            number = math.nan
        if math.isfinite(number) and number.is_integer() and _is_year(number):
            return year_to_epoch_ms(int(number))

    msg = f"Invalid timestamp format: {value!r}"
    raise InvalidTimestampError(msg)


def coerce_epoch_ms(value: Any) -> int | None:
    """
    Read an already-converted feature timestamp.

    Numbers are taken as epoch milliseconds as-is (a converted feature
    never carries a bare year). Strings are normalized. Anything else,
    or an unparseable or out-of-range value, yields None.

    Args:
        value: The feature's properties.timestamp.

    Returns:
        Epoch milliseconds, or None.
    """
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        ms = int(value)
        return ms if abs(ms) <= MAX_EPOCH_MS else None
    if isinstance(value, str):
        try:
            return normalize_timestamp(value)
        except InvalidTimestampError:
            return None
    return None
