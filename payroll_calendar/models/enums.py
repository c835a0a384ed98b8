from __future__ import annotations

import enum


class HolidayType(enum.StrEnum):
    """Kind of holiday."""

    NATIONAL = "national"
    RELIGIOUS = "religious"
    COMPANY = "company"
    SHARED_LEAVE = "shared-leave"


class HolidaySource(enum.StrEnum):
    """Provenance of a holiday record."""

    MANUAL = "manual"
    IMPORTED = "imported"


class FeedOrigin(enum.StrEnum):
    """Where the holidays of a feed fetch came from."""

    LIVE = "live"
    FALLBACK = "fallback"
    UNAVAILABLE = "unavailable"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    HOLIDAY = "HOLIDAY"
    CALENDAR_SETTINGS = "CALENDAR_SETTINGS"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    IMPORT = "IMPORT"
