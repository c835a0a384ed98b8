"""Integration tests for the holiday API, authorization, and audit."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from payroll_calendar.models.audit import AuditLog

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from payroll_calendar.services.holiday_feed import StaticHolidayFeedClient

COMPANY_ID = uuid.uuid4()
USER_ID = uuid.uuid4()
AUTH_HEADERS = {
    "X-User-Id": str(USER_ID),
    "X-Role": "admin",
}
EMPLOYEE_HEADERS = {
    "X-User-Id": str(USER_ID),
    "X-Role": "employee",
}
BASE_URL = "/holidays"


def _holiday_payload(day: str = "2025-08-17", name: str = "Hari Kemerdekaan RI", **extra: object) -> dict:
    return {"date": day, "name": name, **extra}


async def _create(client: AsyncClient, **kwargs: object) -> dict:
    resp = await client.post(BASE_URL, json=_holiday_payload(**kwargs), headers=AUTH_HEADERS)  # type: ignore[arg-type]
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Create holiday tests
# ---------------------------------------------------------------------------


async def test_create_holiday(async_client: AsyncClient) -> None:
    data = await _create(async_client, company_id=str(COMPANY_ID), type="company")
    assert data["date"] == "2025-08-17"
    assert data["name"] == "Hari Kemerdekaan RI"
    assert data["type"] == "company"
    assert data["source"] == "manual"
    assert data["company_id"] == str(COMPANY_ID)
    assert data["is_active"] is True
    assert "id" in data


async def test_create_holiday_normalizes_timestamp_date(async_client: AsyncClient) -> None:
    data = await _create(async_client, day="2026-01-20T00:00:00.000Z")
    assert data["date"] == "2026-01-20"


async def test_create_holiday_missing_name_returns_422(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json={"date": "2025-08-17"}, headers=AUTH_HEADERS)
    assert resp.status_code == 422
    assert resp.json()["error"] == "ValidationError"


async def test_create_holiday_invalid_date_returns_422(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload("2025-02-30"), headers=AUTH_HEADERS)
    assert resp.status_code == 422


async def test_manual_holidays_on_same_date_are_allowed(async_client: AsyncClient) -> None:
    await _create(async_client)
    await _create(async_client, name="Upacara Bendera")

    resp = await async_client.get(f"{BASE_URL}?year=2025", headers=AUTH_HEADERS)
    assert resp.json()["total"] == 2


# ---------------------------------------------------------------------------
# Read holiday tests
# ---------------------------------------------------------------------------


async def test_get_holiday(async_client: AsyncClient) -> None:
    created = await _create(async_client)
    resp = await async_client.get(f"{BASE_URL}/{created['id']}", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]
    assert resp.json()["name"] == created["name"]


async def test_get_missing_holiday_returns_404(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"{BASE_URL}/{uuid.uuid4()}", headers=AUTH_HEADERS)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Holiday not found"


async def test_list_holidays_empty(async_client: AsyncClient) -> None:
    resp = await async_client.get(BASE_URL, headers=AUTH_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"items": [], "total": 0}


async def test_list_holidays_year_and_month_filter(async_client: AsyncClient) -> None:
    await _create(async_client, day="2025-12-25", name="Natal 2025")
    await _create(async_client, day="2026-01-01", name="Tahun Baru 2026")
    await _create(async_client, day="2026-03-20", name="Idul Fitri")

    data_2025 = (await async_client.get(f"{BASE_URL}?year=2025", headers=AUTH_HEADERS)).json()
    assert data_2025["total"] == 1
    assert data_2025["items"][0]["date"] == "2025-12-25"

    march = (await async_client.get(f"{BASE_URL}?year=2026&month=3", headers=AUTH_HEADERS)).json()
    assert [h["name"] for h in march["items"]] == ["Idul Fitri"]


async def test_list_holidays_month_without_year_returns_400(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"{BASE_URL}?month=3", headers=AUTH_HEADERS)
    assert resp.status_code == 400


async def test_list_holidays_pagination(async_client: AsyncClient) -> None:
    for i in range(3):
        await _create(async_client, day=f"2025-0{i + 1}-01", name=f"Holiday {i}")

    data = (await async_client.get(f"{BASE_URL}?offset=0&limit=2", headers=AUTH_HEADERS)).json()
    assert data["total"] == 3
    assert len(data["items"]) == 2

    data2 = (await async_client.get(f"{BASE_URL}?offset=2&limit=2", headers=AUTH_HEADERS)).json()
    assert len(data2["items"]) == 1


async def test_list_holidays_company_scope(async_client: AsyncClient) -> None:
    await _create(async_client, name="Global")
    await _create(async_client, name="Ours", company_id=str(COMPANY_ID))
    await _create(async_client, name="Theirs", company_id=str(uuid.uuid4()))

    own = (await async_client.get(f"{BASE_URL}?company_id={COMPANY_ID}", headers=AUTH_HEADERS)).json()
    assert [h["name"] for h in own["items"]] == ["Ours"]

    with_global = (
        await async_client.get(f"{BASE_URL}?company_id={COMPANY_ID}&include_global=true", headers=AUTH_HEADERS)
    ).json()
    assert [h["name"] for h in with_global["items"]] == ["Global", "Ours"]


async def test_list_holidays_search_and_sort(async_client: AsyncClient) -> None:
    await _create(async_client, day="2025-03-31", name="Hari Raya Idul Fitri", type="religious")
    await _create(async_client, day="2025-08-17", name="Hari Kemerdekaan RI")
    await _create(async_client, day="2025-05-01", name="Buruh")

    resp = await async_client.get(f"{BASE_URL}?search=hari&sort_by=name&sort_order=desc", headers=AUTH_HEADERS)
    assert [h["name"] for h in resp.json()["items"]] == ["Hari Raya Idul Fitri", "Hari Kemerdekaan RI"]

    religious = (await async_client.get(f"{BASE_URL}?type=religious", headers=AUTH_HEADERS)).json()
    assert religious["total"] == 1

    bad_sort = await async_client.get(f"{BASE_URL}?sort_by=id", headers=AUTH_HEADERS)
    assert bad_sort.status_code == 422


async def test_calendar_endpoint(async_client: AsyncClient) -> None:
    await _create(async_client, day="2026-03-19", name="Nyepi")
    await _create(async_client, day="2026-03-20", name="Ours", company_id=str(COMPANY_ID))
    await _create(async_client, day="2026-04-03", name="Wafat Isa Almasih")

    global_march = await async_client.get(f"{BASE_URL}/calendar?year=2026&month=3", headers=EMPLOYEE_HEADERS)
    assert [h["name"] for h in global_march.json()] == ["Nyepi"]

    company_year = await async_client.get(
        f"{BASE_URL}/calendar?year=2026&company_id={COMPANY_ID}", headers=EMPLOYEE_HEADERS
    )
    assert [h["name"] for h in company_year.json()] == ["Nyepi", "Ours", "Wafat Isa Almasih"]


async def test_upcoming_endpoint(async_client: AsyncClient) -> None:
    today = date.today()
    await _create(async_client, day=today.isoformat(), name="Today")
    await _create(async_client, day=f"{today.year - 1}-01-01", name="Last year")

    resp = await async_client.get(f"{BASE_URL}/upcoming?days=0", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200
    assert [h["name"] for h in resp.json()] == ["Today"]


# ---------------------------------------------------------------------------
# Update / delete holiday tests
# ---------------------------------------------------------------------------


async def test_update_holiday(async_client: AsyncClient) -> None:
    created = await _create(async_client)

    resp = await async_client.put(
        f"{BASE_URL}/{created['id']}",
        json={"description": "Proklamasi", "is_active": False},
        headers=AUTH_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["description"] == "Proklamasi"
    assert data["is_active"] is False
    assert data["name"] == created["name"]
    assert data["date"] == created["date"]


async def test_update_holiday_cannot_clear_name(async_client: AsyncClient) -> None:
    created = await _create(async_client)
    resp = await async_client.put(f"{BASE_URL}/{created['id']}", json={"name": None}, headers=AUTH_HEADERS)
    assert resp.status_code == 422


async def test_update_imported_holiday_onto_taken_date_returns_409(async_client: AsyncClient) -> None:
    await async_client.post(
        f"{BASE_URL}/bulk",
        json={"holidays": [_holiday_payload("2025-08-17"), _holiday_payload("2025-12-25", "Natal")]},
        headers=AUTH_HEADERS,
    )
    listing = (await async_client.get(f"{BASE_URL}?year=2025", headers=AUTH_HEADERS)).json()
    natal = next(h for h in listing["items"] if h["name"] == "Natal")

    resp = await async_client.put(f"{BASE_URL}/{natal['id']}", json={"date": "2025-08-17"}, headers=AUTH_HEADERS)
    assert resp.status_code == 409


async def test_delete_holiday(async_client: AsyncClient) -> None:
    created = await _create(async_client)

    del_resp = await async_client.delete(f"{BASE_URL}/{created['id']}", headers=AUTH_HEADERS)
    assert del_resp.status_code == 204

    list_resp = await async_client.get(BASE_URL, headers=AUTH_HEADERS)
    assert list_resp.json() == {"items": [], "total": 0}

    again = await async_client.delete(f"{BASE_URL}/{created['id']}", headers=AUTH_HEADERS)
    assert again.status_code == 404


# ---------------------------------------------------------------------------
# Bulk, seed and sync tests
# ---------------------------------------------------------------------------


async def test_bulk_create(async_client: AsyncClient) -> None:
    body = {
        "holidays": [
            _holiday_payload("2026-06-01", "Hari Lahir Pancasila"),
            _holiday_payload("2026-06-01", "Hari Raya Waisak", type="religious"),
            _holiday_payload("2026-08-17"),
        ],
        "company_id": str(COMPANY_ID),
    }
    resp = await async_client.post(f"{BASE_URL}/bulk", json=body, headers=AUTH_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"created": 2, "skipped": 1, "errors": []}

    again = await async_client.post(
        f"{BASE_URL}/bulk", json={**body, "skip_duplicates": False}, headers=AUTH_HEADERS
    )
    assert again.json()["created"] == 0
    assert len(again.json()["errors"]) == 3


async def test_seed_endpoint(async_client: AsyncClient) -> None:
    resp = await async_client.post(f"{BASE_URL}/seed/2026", headers=AUTH_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"created": 14, "skipped": 0, "errors": []}

    calendar = await async_client.get(f"{BASE_URL}/calendar?year=2026&month=3", headers=AUTH_HEADERS)
    assert [h["date"] for h in calendar.json()] == ["2026-03-19", "2026-03-20", "2026-03-21"]


async def test_sync_endpoint(async_client: AsyncClient, feed_client: StaticHolidayFeedClient) -> None:
    feed_client.seed(
        2025,
        [
            {"holiday_date": "2025-03-31", "holiday_name": "Hari Raya Idul Fitri", "is_national_holiday": True},
            {"holiday_date": "2025-04-02", "holiday_name": "Cuti Bersama Idul Fitri", "is_national_holiday": False},
        ],
    )

    resp = await async_client.post(f"{BASE_URL}/sync/2025", headers=AUTH_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["feed_origin"] == "live"
    assert (data["created"], data["skipped"]) == (1, 0)

    again = (await async_client.post(f"{BASE_URL}/sync/2025", headers=AUTH_HEADERS)).json()
    assert (again["created"], again["skipped"]) == (0, 1)

    listing = (await async_client.get(f"{BASE_URL}?year=2025", headers=AUTH_HEADERS)).json()
    assert listing["items"][0]["type"] == "religious"
    assert listing["items"][0]["source"] == "imported"


async def test_sync_endpoint_rejects_out_of_range_year(async_client: AsyncClient) -> None:
    resp = await async_client.post(f"{BASE_URL}/sync/123", headers=AUTH_HEADERS)
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Authorization tests
# ---------------------------------------------------------------------------


async def test_non_admin_cannot_create(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


async def test_non_admin_cannot_update_or_delete(async_client: AsyncClient) -> None:
    created = await _create(async_client)

    put_resp = await async_client.put(f"{BASE_URL}/{created['id']}", json={"name": "X"}, headers=EMPLOYEE_HEADERS)
    assert put_resp.status_code == 403
    del_resp = await async_client.delete(f"{BASE_URL}/{created['id']}", headers=EMPLOYEE_HEADERS)
    assert del_resp.status_code == 403


async def test_non_admin_cannot_import(async_client: AsyncClient) -> None:
    for url in (f"{BASE_URL}/seed/2026", f"{BASE_URL}/sync/2026"):
        resp = await async_client.post(url, headers=EMPLOYEE_HEADERS)
        assert resp.status_code == 403
    bulk = await async_client.post(f"{BASE_URL}/bulk", json={"holidays": []}, headers=EMPLOYEE_HEADERS)
    assert bulk.status_code == 403


async def test_missing_user_header_is_rejected(async_client: AsyncClient) -> None:
    resp = await async_client.get(BASE_URL)
    assert resp.status_code == 422


async def test_employee_can_list(async_client: AsyncClient) -> None:
    resp = await async_client.get(BASE_URL, headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200


# ---------------------------------------------------------------------------
# Audit tests
# ---------------------------------------------------------------------------


async def test_create_holiday_writes_audit(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    created = await _create(async_client, company_id=str(COMPANY_ID))

    result = await db_session.execute(
        select(AuditLog).where(
            col(AuditLog.entity_type) == "HOLIDAY",
            col(AuditLog.action) == "CREATE",
            col(AuditLog.company_id) == COMPANY_ID,
        )
    )
    audit = result.scalar_one()
    assert str(audit.actor_id) == str(USER_ID)
    assert str(audit.entity_id) == created["id"]
    assert audit.before_json is None
    assert audit.after_json is not None
    assert audit.after_json["name"] == "Hari Kemerdekaan RI"


async def test_update_and_delete_write_audit(
    async_client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    created = await _create(async_client)
    await async_client.put(f"{BASE_URL}/{created['id']}", json={"name": "Proklamasi"}, headers=AUTH_HEADERS)
    await async_client.delete(f"{BASE_URL}/{created['id']}", headers=AUTH_HEADERS)

    result = await db_session.execute(select(AuditLog).where(col(AuditLog.entity_id) == uuid.UUID(created["id"])))
    entries = {e.action: e for e in result.scalars().all()}
    assert set(entries) == {"CREATE", "UPDATE", "DELETE"}
    update, delete = entries["UPDATE"], entries["DELETE"]
    assert update.before_json is not None and update.before_json["name"] == "Hari Kemerdekaan RI"
    assert update.after_json is not None and update.after_json["name"] == "Proklamasi"
    assert delete.before_json is not None and delete.before_json["name"] == "Proklamasi"
    assert delete.after_json is None
