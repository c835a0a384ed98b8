from sqlmodel import SQLModel

from payroll_calendar.models.audit import AuditLog
from payroll_calendar.models.base import TimestampMixin, UUIDBase
from payroll_calendar.models.calendar_settings import CompanyCalendarSettings
from payroll_calendar.models.enums import (
    AuditAction,
    AuditEntityType,
    FeedOrigin,
    HolidaySource,
    HolidayType,
)
from payroll_calendar.models.holiday import Holiday

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "CompanyCalendarSettings",
    "FeedOrigin",
    "Holiday",
    "HolidaySource",
    "HolidayType",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
