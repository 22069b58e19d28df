"""Tests for the HTTP API."""

import httpx
import pytest
import pytest_asyncio

from callcal.api.app import create_app
from callcal.config.constants import (
    MSG_ALREADY_CHECKED_IN,
    MSG_NOBODY_CHECKED_IN,
    MSG_NOTHING_TO_UNDO,
    MSG_REPORT_FAILED,
    MSG_UNDONE,
)
from callcal.core.exceptions import StorageError
from callcal.core.security import create_access_token, hash_password, verify_password
from callcal.db.models import Base


UIN = 123456


@pytest_asyncio.fixture
async def client(service):
    app = create_app(service)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def member_id(add_member):
    return await add_member("alice", uin=UIN, credential=hash_password("secret"))


@pytest.fixture
def auth_headers(member_id):
    return {"Authorization": f"Bearer {create_access_token(member_id)}"}


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_login(client, member_id):
    response = await client.post("/api/v1/auth/login", json={"uin": UIN, "password": "secret"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["token_type"] == "bearer"
    assert "auth_token" in response.cookies


@pytest.mark.asyncio
async def test_login_rejects_bad_password(client, member_id):
    response = await client.post("/api/v1/auth/login", json={"uin": UIN, "password": "nope"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_rejects_unknown_member(client):
    response = await client.post("/api/v1/auth/login", json={"uin": 1, "password": "secret"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_rejects_member_without_credential(client, add_member):
    await add_member("bob", uin=777)
    response = await client.post("/api/v1/auth/login", json={"uin": 777, "password": ""})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_records_require_token(client):
    response = await client.get("/api/v1/attendance/records")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_records_reject_bad_token(client):
    response = await client.get(
        "/api/v1/attendance/records", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_records(client, auth_headers):
    response = await client.get("/api/v1/attendance/records", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["report"] == MSG_NOBODY_CHECKED_IN
    assert body["entries"] == [{"name": "alice", "checked_in_at": None}]


@pytest.mark.asyncio
async def test_records_for_day(client, auth_headers):
    response = await client.get(
        "/api/v1/attendance/records", params={"day": "2026-10-01"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["day"] == "2026-10-01"


@pytest.mark.asyncio
async def test_records_reject_bad_day(client, auth_headers):
    response = await client.get(
        "/api/v1/attendance/records", params={"day": "someday"}, headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["ok"] is False


@pytest.mark.asyncio
async def test_check_in_and_undo(client, auth_headers):
    payload = {"qq_uin": UIN}

    first = await client.post("/api/v1/attendance/check-in", json=payload, headers=auth_headers)
    assert first.status_code == 200
    assert first.json()["outcome"] == "recorded"
    assert "alice ✅" in first.json()["message"]

    second = await client.post("/api/v1/attendance/check-in", json=payload, headers=auth_headers)
    assert second.json()["outcome"] == "already_present"
    assert second.json()["message"] == MSG_ALREADY_CHECKED_IN

    records = await client.get("/api/v1/attendance/records", headers=auth_headers)
    assert records.json()["entries"][0]["checked_in_at"] is not None

    undo = await client.request(
        "DELETE", "/api/v1/attendance/check-in", json=payload, headers=auth_headers
    )
    assert undo.json() == {"ok": True, "outcome": "removed", "message": MSG_UNDONE}

    again = await client.request(
        "DELETE", "/api/v1/attendance/check-in", json=payload, headers=auth_headers
    )
    assert again.json()["outcome"] == "nothing_to_undo"
    assert again.json()["message"] == MSG_NOTHING_TO_UNDO


@pytest.mark.asyncio
async def test_check_in_unknown_member(client, auth_headers):
    response = await client.post(
        "/api/v1/attendance/check-in", json={"qq_uin": 42}, headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["ok"] is False


@pytest.mark.asyncio
async def test_absences(client, auth_headers):
    response = await client.get("/api/v1/attendance/absences", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["missed"] == ["alice"]
    assert body["warning"] == []
    assert "alice" in body["message"]


@pytest.mark.asyncio
async def test_reset_password(client, auth_headers, service, member_id):
    response = await client.post(
        "/api/v1/auth/reset-password",
        json={"old_password": "secret", "new_password": "hunter2"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert verify_password("hunter2", await service.get_credential(member_id))


@pytest.mark.asyncio
async def test_reset_password_checks_old_password(client, auth_headers):
    response = await client.post(
        "/api/v1/auth/reset-password",
        json={"old_password": "wrong", "new_password": "hunter2"},
        headers=auth_headers,
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_storage_failure_maps_to_503(client, auth_headers, db_engine):
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    response = await client.get("/api/v1/attendance/absences", headers=auth_headers)

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_check_in_recorded_when_report_fails(client, auth_headers, service, count_events):
    async def failing_report(*args, **kwargs):
        raise StorageError("build report failed")

    service.build_report = failing_report

    response = await client.post(
        "/api/v1/attendance/check-in", json={"qq_uin": UIN}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True, "outcome": "recorded", "message": MSG_REPORT_FAILED}
    assert await count_events() == 1


@pytest.mark.asyncio
async def test_records_report_matches_entries(client, auth_headers, service, member_id):
    await service.check_in(member_id)

    response = await client.get("/api/v1/attendance/records", headers=auth_headers)

    body = response.json()
    assert body["report"].splitlines()[1] == "alice ✅"
    assert body["entries"][0]["name"] == "alice"
    assert body["entries"][0]["checked_in_at"] is not None
