from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient

UNKNOWN_ID = "0b7c5f0e-9a53-4a49-9d0e-1f0f7e0d9a11"


async def _create(client: AsyncClient, **overrides) -> str:
    payload = {"title": "Overflowing bin", "description": "Bin near the park is full"}
    payload.update(overrides)
    r = await client.post("/reports", json=payload)
    assert r.status_code == 201, r.text
    return r.json()["id"]


@pytest.mark.asyncio
async def test_create_then_get_returns_submitted_report(app_client: AsyncClient):
    before = datetime.now(UTC) - timedelta(seconds=1)
    r = await app_client.post(
        "/reports",
        json={"title": "Overflowing bin", "description": "Bin near the park is full"},
    )
    after = datetime.now(UTC) + timedelta(seconds=1)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert isinstance(body["id"], str)

    r2 = await app_client.get(f"/reports/{body['id']}")
    assert r2.status_code == 200
    item = r2.json()
    assert item["status"] == "Submitted"
    assert item["reporter"] == "Anonymous"
    assert item["contact"] == "Not provided"
    assert item["gps"] is None
    assert item["photoUrl"] is None
    created = datetime.fromisoformat(item["createdAt"])
    assert before <= created <= after


@pytest.mark.asyncio
async def test_create_normalizes_gps_and_optional_fields(app_client: AsyncClient):
    rid = await _create(
        app_client,
        gps="12.9716, 77.5946",
        locationDetails={"area": "Indiranagar", "formattedAddress": "100 Feet Rd"},
        photoUrl="/uploads/report_1.png",
        reporter="asha",
        contact="asha@example.com",
    )
    item = (await app_client.get(f"/reports/{rid}")).json()
    assert item["gps"] == {"latitude": 12.9716, "longitude": 77.5946}
    assert item["locationDetails"]["area"] == "Indiranagar"
    assert item["photoUrl"] == "/uploads/report_1.png"
    assert item["reporter"] == "asha"
    assert item["contact"] == "asha@example.com"


@pytest.mark.asyncio
async def test_create_with_unparseable_gps_stores_null(app_client: AsyncClient):
    rid = await _create(app_client, gps="not, a-number")
    item = (await app_client.get(f"/reports/{rid}")).json()
    assert item["gps"] is None


@pytest.mark.asyncio
async def test_create_reads_leading_numbers_from_gps_text(app_client: AsyncClient):
    rid = await _create(app_client, gps="12.9 N, 77.6 E")
    item = (await app_client.get(f"/reports/{rid}")).json()
    assert item["gps"] == {"latitude": 12.9, "longitude": 77.6}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"description": "no title"},
        {"title": "no description"},
        {"title": "", "description": "blank title"},
        {"title": "   ", "description": "whitespace title"},
        {},
    ],
)
async def test_create_requires_title_and_description(app_client: AsyncClient, payload):
    r = await app_client.post("/reports", json=payload)
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Title and description are required"}
    listing = await app_client.get("/reports")
    assert listing.json() == []


@pytest.mark.asyncio
async def test_list_is_newest_first(app_client: AsyncClient, add_report):
    now = datetime.now(UTC)
    old = await add_report("old", created_at=now - timedelta(days=2))
    new = await add_report("new", created_at=now)
    mid = await add_report("mid", created_at=now - timedelta(days=1))

    r = await app_client.get("/reports")
    assert r.status_code == 200
    assert [it["id"] for it in r.json()] == [new, mid, old]


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["abc", "123", "zzzzzzzz-zzzz-zzzz-zzzz-zzzzzzzzzzzz"])
async def test_malformed_id_is_rejected_on_every_id_route(app_client: AsyncClient, bad_id):
    r1 = await app_client.get(f"/reports/{bad_id}")
    r2 = await app_client.patch(f"/reports/{bad_id}", json={"status": "Resolved"})
    r3 = await app_client.delete(f"/reports/{bad_id}")
    for r in (r1, r2, r3):
        assert r.status_code == 400
        assert r.json() == {"success": False, "error": "Invalid report ID format"}


@pytest.mark.asyncio
async def test_unknown_id_is_not_found(app_client: AsyncClient):
    r1 = await app_client.get(f"/reports/{UNKNOWN_ID}")
    r2 = await app_client.patch(f"/reports/{UNKNOWN_ID}", json={"status": "Resolved"})
    r3 = await app_client.delete(f"/reports/{UNKNOWN_ID}")
    for r in (r1, r2, r3):
        assert r.status_code == 404
        assert r.json() == {"success": False, "error": "Report not found"}


@pytest.mark.asyncio
async def test_status_update_is_idempotent(app_client: AsyncClient):
    rid = await _create(app_client)

    for _ in range(2):
        r = await app_client.patch(f"/reports/{rid}", json={"status": "In Progress"})
        assert r.status_code == 200
        assert r.json() == {"success": True, "message": "Report status updated successfully"}

    item = (await app_client.get(f"/reports/{rid}")).json()
    assert item["status"] == "In Progress"
    assert item["updatedAt"] is not None
    assert item["resolvedAt"] is None


@pytest.mark.asyncio
async def test_resolving_stamps_resolved_at_once(app_client: AsyncClient):
    rid = await _create(app_client)

    await app_client.patch(f"/reports/{rid}", json={"status": "Resolved"})
    first = (await app_client.get(f"/reports/{rid}")).json()
    assert first["status"] == "Resolved"
    assert first["resolvedAt"] is not None

    await app_client.patch(f"/reports/{rid}", json={"status": "Resolved"})
    second = (await app_client.get(f"/reports/{rid}")).json()
    assert second["resolvedAt"] == first["resolvedAt"]

    await app_client.patch(f"/reports/{rid}", json={"status": "In Progress"})
    reopened = (await app_client.get(f"/reports/{rid}")).json()
    assert reopened["resolvedAt"] is None


@pytest.mark.asyncio
async def test_status_update_validates_status(app_client: AsyncClient):
    rid = await _create(app_client)

    missing = await app_client.patch(f"/reports/{rid}", json={})
    assert missing.status_code == 400
    assert missing.json()["error"] == "Status is required"

    empty = await app_client.patch(f"/reports/{rid}", json={"status": ""})
    assert empty.status_code == 400

    unknown = await app_client.patch(f"/reports/{rid}", json={"status": "Archived"})
    assert unknown.status_code == 400
    assert unknown.json()["error"] == "Invalid status"

    item = (await app_client.get(f"/reports/{rid}")).json()
    assert item["status"] == "Submitted"


@pytest.mark.asyncio
async def test_delete_then_not_found(app_client: AsyncClient):
    rid = await _create(app_client)

    r = await app_client.delete(f"/reports/{rid}")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Report deleted successfully"}

    assert (await app_client.get(f"/reports/{rid}")).status_code == 404
    assert (await app_client.delete(f"/reports/{rid}")).status_code == 404


@pytest.mark.asyncio
async def test_stats_counts_statuses(app_client: AsyncClient, add_report):
    empty = await app_client.get("/reports/stats")
    assert empty.json() == {"totalReports": 0, "inProgress": 0, "resolved": 0, "successRate": 0}

    await add_report("a", status="Resolved")
    await add_report("b", status="In Progress")
    await add_report("c")

    r = await app_client.get("/reports/stats")
    assert r.status_code == 200
    assert r.json() == {"totalReports": 3, "inProgress": 1, "resolved": 1, "successRate": 33}


@pytest.mark.asyncio
async def test_unsupported_methods_return_405(app_client: AsyncClient):
    rid = await _create(app_client)

    for r in (
        await app_client.put("/reports", json={}),
        await app_client.delete("/reports"),
        await app_client.patch("/reports", json={}),
        await app_client.put(f"/reports/{rid}", json={}),
        await app_client.post(f"/reports/{rid}", json={}),
    ):
        assert r.status_code == 405
        assert r.json()["success"] is False
