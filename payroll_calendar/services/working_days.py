"""Working-day calculator.

Pure functions: no I/O, no shared state. Holidays may be ORM rows, response
models or plain mappings; entries without a usable date or with a company id
that is not a UUID are ignored so a bad holiday list only ever means "no
holidays".
"""

from __future__ import annotations

import uuid
from calendar import monthrange
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from payroll_calendar.schemas.working_days import PeriodHoliday, WorkingDayPeriod
from payroll_calendar.services.dates import try_normalize_date

DEFAULT_CUTOFF_DAY = 20

_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class RestDayPattern:
    """Weekdays excluded from working-day counts (``date.weekday()``: Monday=0)."""

    days: frozenset[int] = frozenset({5, 6})

    def __post_init__(self) -> None:
        if any(not 0 <= day <= 6 for day in self.days):
            msg = "Rest days must be between 0 (Monday) and 6 (Sunday)"
            raise ValueError(msg)
        if len(self.days) == 7:
            msg = "A rest-day pattern cannot cover the whole week"
            raise ValueError(msg)

    @classmethod
    def of(cls, days: Iterable[int]) -> RestDayPattern:
        return cls(frozenset(days))

    @classmethod
    def from_working_days(cls, working_days: Iterable[int]) -> RestDayPattern:
        """Build the pattern from the weekdays that *are* worked."""
        return cls(frozenset(range(7)) - frozenset(working_days))

    def is_rest_day(self, day: date) -> bool:
        return day.weekday() in self.days

    def as_list(self) -> list[int]:
        return sorted(self.days)


DEFAULT_REST_DAYS = RestDayPattern()


@dataclass(frozen=True)
class _DatedHoliday:
    date: str
    name: str
    id: uuid.UUID | None
    type: str | None
    company_id: uuid.UUID | None

    @property
    def sort_key(self) -> tuple[str, str, str, str, str]:
        return (self.date, self.name, str(self.id or ""), self.type or "", str(self.company_id or ""))


def _read(holiday: Any, key: str, default: Any = None) -> Any:
    if isinstance(holiday, Mapping):
        return holiday.get(key, default)
    return getattr(holiday, key, default)


def _as_uuid(value: Any) -> uuid.UUID | None:
    """``None`` stays ``None``; anything else must parse as a UUID (``ValueError`` otherwise)."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def _as_optional_uuid(value: Any) -> uuid.UUID | None:
    try:
        return _as_uuid(value)
    except ValueError:
        return None


def _as_list(holidays: Any) -> list[Any]:
    if holidays is None or isinstance(holidays, (str, bytes, Mapping)) or not isinstance(holidays, Iterable):
        return []
    return list(holidays)


def _collect_holidays(
    holidays: Iterable[Any] | None,
    start: str,
    end: str,
    company_id: uuid.UUID | None,
) -> list[_DatedHoliday]:
    """Active, in-scope holidays whose date lies in ``[start, end]``, sorted."""
    selected: list[_DatedHoliday] = []
    for holiday in _as_list(holidays):
        if holiday is None or _read(holiday, "is_active", True) is False:
            continue
        normalized = try_normalize_date(_read(holiday, "date"))
        if normalized is None or not start <= normalized <= end:
            continue
        try:
            scope = _as_uuid(_read(holiday, "company_id"))
        except ValueError:
            continue
        holiday_type = _read(holiday, "type")
        if company_id is not None and scope is not None and scope != company_id:
            continue
        selected.append(
            _DatedHoliday(
                date=normalized,
                name=str(_read(holiday, "name", "") or ""),
                id=_as_optional_uuid(_read(holiday, "id")),
                type=None if holiday_type is None else str(holiday_type),
                company_id=scope,
            )
        )
    selected.sort(key=lambda h: h.sort_key)
    return selected


def _build_period(
    year: int,
    month: int,
    start: date,
    end: date,
    holidays: Iterable[Any] | None,
    rest_days: RestDayPattern,
    company_id: uuid.UUID | None,
) -> WorkingDayPeriod:
    start_str = start.isoformat()
    end_str = end.isoformat()
    matched = _collect_holidays(holidays, start_str, end_str, company_id)
    holiday_dates = {h.date for h in matched}

    total_days = 0
    working_days = 0
    actual_working_days = 0
    current = start
    while current <= end:
        total_days += 1
        if not rest_days.is_rest_day(current):
            working_days += 1
            if current.isoformat() not in holiday_dates:
                actual_working_days += 1
        current += _ONE_DAY

    return WorkingDayPeriod(
        year=year,
        month=month,
        month_label=f"{_MONTH_NAMES[month - 1]} {year}",
        period_start=start_str,
        period_end=end_str,
        total_days=total_days,
        working_days=working_days,
        holiday_count=len(matched),
        actual_working_days=actual_working_days,
        holidays=[
            PeriodHoliday(id=h.id, name=h.name, date=h.date, type=h.type, company_id=h.company_id) for h in matched
        ],
    )


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        msg = f"Month must be between 1 and 12, got {month}"
        raise ValueError(msg)


def _check_cutoff(cutoff_day: int) -> None:
    if not 1 <= cutoff_day <= 31:
        msg = f"Cutoff day must be between 1 and 31, got {cutoff_day}"
        raise ValueError(msg)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    _check_month(month)
    _, days_in_month = monthrange(year, month)
    return date(year, month, 1), date(year, month, days_in_month)


def payroll_period_bounds(year: int, month: int, cutoff_day: int = DEFAULT_CUTOFF_DAY) -> tuple[date, date]:
    """Window ``[previous month's cutoff + 1 .. this month's cutoff]``.

    Days are added to the first of the month, so a cutoff past the end of a
    short month carries into the next one (cutoff 31 in April ends on May 1).
    """
    _check_month(month)
    _check_cutoff(cutoff_day)
    first_of_month = date(year, month, 1)
    first_of_previous = date(year - 1, 12, 1) if month == 1 else date(year, month - 1, 1)
    start = first_of_previous + timedelta(days=cutoff_day)
    end = first_of_month + timedelta(days=cutoff_day - 1)
    return start, end


def calculate_month(
    year: int,
    month: int,
    holidays: Iterable[Any] | None,
    rest_days: RestDayPattern = DEFAULT_REST_DAYS,
    company_id: uuid.UUID | None = None,
) -> WorkingDayPeriod:
    """Working-day counts for a calendar month."""
    start, end = month_bounds(year, month)
    return _build_period(year, month, start, end, holidays, rest_days, company_id)


def calculate_payroll_period(
    year: int,
    month: int,
    holidays: Iterable[Any] | None,
    cutoff_day: int = DEFAULT_CUTOFF_DAY,
    rest_days: RestDayPattern = DEFAULT_REST_DAYS,
    company_id: uuid.UUID | None = None,
) -> WorkingDayPeriod:
    """Working-day counts for the payroll period ending in ``month``."""
    start, end = payroll_period_bounds(year, month, cutoff_day)
    return _build_period(year, month, start, end, holidays, rest_days, company_id)


def calculate_year(
    year: int,
    holidays: Iterable[Any] | None,
    rest_days: RestDayPattern = DEFAULT_REST_DAYS,
    cutoff_day: int | None = None,
    company_id: uuid.UUID | None = None,
) -> list[WorkingDayPeriod]:
    """Twelve periods: payroll periods when ``cutoff_day`` is set, else calendar months."""
    # Materialize once; a generator would be exhausted after the first month.
    holiday_list = _as_list(holidays)
    if cutoff_day is None:
        return [calculate_month(year, month, holiday_list, rest_days, company_id) for month in range(1, 13)]
    return [
        calculate_payroll_period(year, month, holiday_list, cutoff_day, rest_days, company_id)
        for month in range(1, 13)
    ]
