import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from httpx import ASGITransport, AsyncClient

from app.db.session import Database
from app.main import create_app


def _client(tmp_path: Path):
    database = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'test_staff_attendance.db'}")
    app = create_app(database)

    @asynccontextmanager
    async def _manager():
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client

    return _manager


async def _register(api_client: AsyncClient, name: str, token: str, **extra) -> dict:
    response = await api_client.post("/staff", json={"name": name, "role": "Cast", "punch_token": token, **extra})
    assert response.status_code == 201
    return response.json()


def test_staff_roster(tmp_path: Path):
    client_manager = _client(tmp_path)

    async def _scenario():
        async with client_manager() as api_client:
            ayaka = await _register(api_client, "佐藤 あやか", "cast-ayaka", email="ayaka@example.com")
            generated = await api_client.post("/staff", json={"name": "山田 太郎"})
            assert generated.status_code == 201
            assert generated.json()["punch_token"]

            duplicate = await api_client.post("/staff", json={"name": "Clone", "punch_token": "cast-ayaka"})
            assert duplicate.status_code == 409

            by_token = await api_client.get("/staff/by-token/cast-ayaka")
            assert by_token.json()["id"] == ayaka["id"]

            roster = await api_client.get("/staff")
            assert [member["name"] for member in roster.json()] == ["佐藤 あやか", "山田 太郎"]

            missing = await api_client.get("/staff/999")
            assert missing.status_code == 404

            bad_email = await api_client.post("/staff", json={"name": "X", "email": "not-an-email"})
            assert bad_email.status_code == 422

    asyncio.run(_scenario())


def test_punch_clock_flow(tmp_path: Path):
    client_manager = _client(tmp_path)

    async def _scenario():
        async with client_manager() as api_client:
            staff = await _register(api_client, "鈴木 まりあ", "cast-maria")
            await _register(api_client, "退職者", "gone-1234", active=False)

            unknown = await api_client.post("/staff-attendance/check-in", json={"token": "nope"})
            assert unknown.status_code == 404
            inactive = await api_client.post("/staff-attendance/check-in", json={"token": "gone-1234"})
            assert inactive.status_code == 404

            no_record = await api_client.post("/staff-attendance/check-out", json={"token": "cast-maria"})
            assert no_record.status_code == 409

            opened = await api_client.post(
                "/staff-attendance/check-in", json={"token": "cast-maria", "reason": "dohan"}
            )
            assert opened.status_code == 201
            record = opened.json()
            assert record["staff_id"] == staff["id"]
            assert record["status"] == "open"
            assert record["reason"] == "dohan"
            assert record["audit"][0]["action"] == "check_in"

            twice = await api_client.post("/staff-attendance/check-in", json={"token": "cast-maria"})
            assert twice.status_code == 409

            approve_open = await api_client.post(
                f"/staff-attendance/records/{record['id']}/approve", json={"approver_user_id": "manager"}
            )
            assert approve_open.status_code == 409

            today = await api_client.get("/staff-attendance/today")
            assert [item["id"] for item in today.json()] == [record["id"]]

            closed = await api_client.post("/staff-attendance/check-out", json={"token": "cast-maria"})
            assert closed.status_code == 200
            assert closed.json()["status"] == "closed"
            assert closed.json()["check_out_at"] is not None
            assert [entry["action"] for entry in closed.json()["audit"]] == ["check_in", "check_out"]

            approved = await api_client.post(
                f"/staff-attendance/records/{record['id']}/approve", json={"approver_user_id": "manager"}
            )
            assert approved.status_code == 200
            assert approved.json()["status"] == "approved"
            assert approved.json()["audit"][-1]["user_id"] == "manager"

    asyncio.run(_scenario())


def test_edit_request_applies_changes_and_stats(tmp_path: Path):
    client_manager = _client(tmp_path)

    async def _scenario():
        async with client_manager() as api_client:
            staff = await _register(api_client, "田中 ゆい", "cast-yui")
            other = await _register(api_client, "高橋 次郎", "bar-jiro")

            await api_client.post("/staff-attendance/check-in", json={"token": "cast-yui"})
            record = (await api_client.post("/staff-attendance/check-out", json={"token": "cast-yui"})).json()

            foreign = await api_client.post(
                "/staff-attendance/requests",
                json={"record_id": record["id"], "staff_id": other["id"], "payload": {"note": "x"}},
            )
            assert foreign.status_code == 409

            backwards = await api_client.post(
                "/staff-attendance/requests",
                json={
                    "record_id": record["id"],
                    "staff_id": staff["id"],
                    "payload": {
                        "check_in_at": "2024-02-01T17:00:00Z",
                        "check_out_at": "2024-02-01T11:00:00Z",
                    },
                },
            )
            assert backwards.status_code == 422

            created = await api_client.post(
                "/staff-attendance/requests",
                json={
                    "record_id": record["id"],
                    "staff_id": staff["id"],
                    # 20:00 to 02:00 JST
                    "payload": {
                        "check_in_at": "2024-02-01T11:00:00Z",
                        "check_out_at": "2024-02-01T17:00:00Z",
                        "reason": "late",
                    },
                },
            )
            assert created.status_code == 201
            request = created.json()
            assert request["status"] == "pending"
            assert request["type"] == "edit"

            pending = await api_client.get("/staff-attendance/requests", params={"status": "pending"})
            assert [item["id"] for item in pending.json()] == [request["id"]]

            decided = await api_client.post(
                f"/staff-attendance/requests/{request['id']}/approve",
                json={"approver_user_id": "manager", "comment": "ok"},
            )
            assert decided.status_code == 200
            assert decided.json()["status"] == "approved"
            assert decided.json()["decided_by"] == "manager"

            again = await api_client.post(
                f"/staff-attendance/requests/{request['id']}/reject",
                json={"approver_user_id": "manager"},
            )
            assert again.status_code == 409

            month = await api_client.get("/staff-attendance", params={"month": "2024-02"})
            records = month.json()
            assert len(records) == 1
            edited = records[0]
            assert edited["business_date"] == "2024-02-01"
            assert edited["reason"] == "late"
            assert edited["work_minutes"] == 360
            last_audit = edited["audit"][-1]
            assert last_audit["action"] == "edited"
            assert last_audit["user_id"] == "manager"
            assert set(last_audit["diff"]) == {"check_in_at", "check_out_at", "reason"}
            assert last_audit["diff"]["reason"] == {"from": "normal", "to": "late"}

            stats = await api_client.get(
                f"/staff-attendance/staff/{staff['id']}/stats", params={"month": "2024-02"}
            )
            assert stats.json() == {
                "staff_id": staff["id"],
                "month": "2024-02",
                "total_minutes": 360,
                "work_days": 1,
            }

            rejected = await api_client.post(
                f"/staff-attendance/records/{record['id']}/reject", json={"approver_user_id": "manager"}
            )
            assert rejected.json()["status"] == "rejected"

            stats = await api_client.get(
                f"/staff-attendance/staff/{staff['id']}/stats", params={"month": "2024-02"}
            )
            assert stats.json()["total_minutes"] == 0

            listing = await api_client.get(
                f"/staff-attendance/staff/{staff['id']}", params={"month": "2024-02"}
            )
            assert [item["status"] for item in listing.json()] == ["rejected"]

            bad_month = await api_client.get("/staff-attendance", params={"month": "2024-13"})
            assert bad_month.status_code == 422

    asyncio.run(_scenario())


def test_edit_request_payload_rejects_nulls_and_compares_offsets(tmp_path: Path):
    client_manager = _client(tmp_path)

    async def _scenario():
        async with client_manager() as api_client:
            staff = await _register(api_client, "中村 さくら", "cast-sakura")
            await api_client.post("/staff-attendance/check-in", json={"token": "cast-sakura"})
            record = (await api_client.post("/staff-attendance/check-out", json={"token": "cast-sakura"})).json()

            async def _request(payload: dict):
                return await api_client.post(
                    "/staff-attendance/requests",
                    json={"record_id": record["id"], "staff_id": staff["id"], "payload": payload},
                )

            for field in ("reason", "check_in_at", "check_out_at"):
                response = await _request({field: None})
                assert response.status_code == 422
                assert response.json()["detail"]["kind"] == "invalid_input"
                assert response.json()["detail"]["fields"] == [f"payload.{field}"]

            # 20:00 naive (UTC) vs 23:00+09:00 == 14:00 UTC
            mixed = await _request(
                {"check_in_at": "2025-01-01T20:00:00", "check_out_at": "2025-01-01T23:00:00+09:00"}
            )
            assert mixed.status_code == 422
            assert mixed.json()["detail"]["fields"] == ["payload"]

            accepted = await _request(
                {"check_in_at": "2025-01-01T11:00:00", "check_out_at": "2025-01-02T02:00:00+09:00", "note": None}
            )
            assert accepted.status_code == 201

            approved = await api_client.post(
                f"/staff-attendance/requests/{accepted.json()['id']}/approve",
                json={"approver_user_id": "manager"},
            )
            assert approved.status_code == 200

            month = (await api_client.get("/staff-attendance", params={"month": "2025-01"})).json()
            assert len(month) == 1
            assert month[0]["reason"] == "normal"
            assert month[0]["work_minutes"] == 360
            assert month[0]["note"] is None

    asyncio.run(_scenario())
