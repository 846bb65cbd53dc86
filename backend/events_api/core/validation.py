"""
Validation and normalization primitives for untrusted JSON field values.

Pure functions: no I/O, no shared state, safe to call from any task.

NORMALIZATION
=============

normalize_string() distinguishes four inputs a JSON payload can carry for a
field:

  - the key is missing          -> ABSENT      (leave the field untouched)
  - the key is present and null -> None        (caller decides: clear or reject)
  - the value is not a string   -> TYPE_ERROR
  - the value is a string       -> the string with surrounding whitespace removed

Length is deliberately not checked here so that "empty after trim" and
"too long" stay distinct rejections.

Lengths are counted in Unicode code points (len() of a Python str).

DATES
=====

is_valid_datetime() applies two gates:
  1. the literal text must match ISO_8601_RE exactly, which rejects
     parseable-but-foreign formats such as 27/01/2026;
  2. the captured components must build a real datetime, which rejects
     2026-13-40 or 2026-02-30. datetime() raises instead of clamping.
"""

import enum
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union


class Marker(enum.Enum):
    ABSENT = "absent"
    TYPE_ERROR = "type_error"

    def __repr__(self) -> str:
        return self.name


ABSENT = Marker.ABSENT
TYPE_ERROR = Marker.TYPE_ERROR

NormalizedString = Union[str, None, Marker]

MAX_TITLE = 200
MAX_LOCATION = 200
MAX_DESCRIPTION = 2000

ISO_8601_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,3}))?)?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?)?",
    re.ASCII,
)


def normalize_string(value: Any = ABSENT) -> NormalizedString:
    if value is ABSENT:
        return ABSENT
    if value is None:
        return None
    if not isinstance(value, str):
        return TYPE_ERROR
    return value.strip()


def validate_max_len(value: str, max_len: int) -> bool:
    return len(value) <= max_len


def _offset(tz: Optional[str]) -> Optional[timezone]:
    if tz is None:
        return None
    if tz == "Z":
        return timezone.utc
    sign = -1 if tz[0] == "-" else 1
    hours, minutes = int(tz[1:3]), int(tz[4:6])
    if minutes > 59:
        raise ValueError(f"invalid offset minutes: {tz}")
    # timezone() raises for offsets of 24 hours or more
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_datetime(value: str) -> Optional[datetime]:
    """Parse an accepted ISO 8601 string, or return None."""
    match = ISO_8601_RE.fullmatch(value)
    if not match:
        return None

    parts = match.groupdict()
    fraction = parts["fraction"] or "0"
    try:
        return datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            int(fraction.ljust(3, "0")) * 1000,
            tzinfo=_offset(parts["tz"]),
        )
    except ValueError:
        return None


def is_valid_datetime(value: str) -> bool:
    return parse_datetime(value) is not None
