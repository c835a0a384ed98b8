"""Calendar-date normalization.

Every date handled by the holiday subsystem is reduced to a fixed-width
``YYYY-MM-DD`` string built from local calendar components. Timestamps are
never shifted through UTC, so ``"2026-01-20T00:00:00.000Z"`` stays on the
20th whatever the host timezone is. Because the format is fixed-width,
string equality is date equality and string ordering is date ordering.
"""

from __future__ import annotations

import re
from datetime import date, datetime

# Leading year-month-day; anything after it (time, zone suffix) is ignored.
_DATE_PREFIX = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})(?=$|[T\s])")

CalendarDate = str


def normalize_date(value: object) -> CalendarDate:
    """Return ``value`` as a ``YYYY-MM-DD`` string.

    Accepts ``date``, ``datetime`` (naive or aware; its own wall-clock date is
    kept) and strings such as ``"2026-01-20"``, ``"2026-1-5"`` or
    ``"2026-01-20T00:00:00.000Z"``. Raises ``ValueError`` otherwise.
    """
    if isinstance(value, datetime):
        return _format(value.year, value.month, value.day)
    if isinstance(value, date):
        return _format(value.year, value.month, value.day)
    if isinstance(value, str):
        match = _DATE_PREFIX.match(value)
        if match is None:
            msg = f"Unrecognized date: {value!r}"
            raise ValueError(msg)
        year, month, day = (int(part) for part in match.groups())
        return _format(year, month, day)
    msg = f"Unsupported date value of type {type(value).__name__}"
    raise ValueError(msg)


def try_normalize_date(value: object) -> CalendarDate | None:
    """Like :func:`normalize_date` but returns ``None`` for invalid input."""
    try:
        return normalize_date(value)
    except ValueError:
        return None


def to_date(value: object) -> date:
    """Return the normalized calendar date of ``value`` as a ``date``."""
    return date.fromisoformat(normalize_date(value))


def _format(year: int, month: int, day: int) -> CalendarDate:
    # Round-trip through date() so impossible days like 2025-02-30 are rejected.
    return date(year, month, day).isoformat()
