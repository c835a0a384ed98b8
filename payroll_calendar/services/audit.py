from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from payroll_calendar.models.audit import AuditLog
from payroll_calendar.models.calendar_settings import CompanyCalendarSettings
from payroll_calendar.models.enums import AuditEntityType
from payroll_calendar.models.holiday import Holiday

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from payroll_calendar.models.enums import AuditAction

# Actor recorded for writes made by the sync worker.
SYSTEM_ACTOR_ID = uuid.UUID(int=0)

AuditedEntity = Holiday | CompanyCalendarSettings

_ENTITY_TYPES: dict[type, AuditEntityType] = {
    Holiday: AuditEntityType.HOLIDAY,
    CompanyCalendarSettings: AuditEntityType.CALENDAR_SETTINGS,
}


def snapshot(entity: AuditedEntity) -> dict[str, Any]:
    """JSON-safe copy of an entity's current column values."""
    return entity.model_dump(mode="json")


def record_audit(
    session: AsyncSession,
    *,
    actor_id: uuid.UUID,
    action: AuditAction,
    entity: AuditedEntity,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
) -> AuditLog:
    """Add an audit entry for ``entity`` to the caller's transaction.

    The entity type, id and company are taken from ``entity`` itself; the
    entry is flushed and committed together with the change it describes.
    """
    entry = AuditLog(
        company_id=entity.company_id,
        actor_id=actor_id,
        entity_type=_ENTITY_TYPES[type(entity)].value,
        entity_id=entity.id,
        action=action.value,
        before_json=before,
        after_json=after,
    )
    session.add(entry)
    return entry
