import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from httpx import ASGITransport, AsyncClient

from app.db.session import Database
from app.main import create_app


def _client(tmp_path: Path):
    database = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'test_shifts.db'}")
    app = create_app(database)

    @asynccontextmanager
    async def _manager():
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client

    return _manager


def test_wishes_upsert_per_staff_and_month(tmp_path: Path):
    client_manager = _client(tmp_path)

    async def _scenario():
        async with client_manager() as api_client:
            staff = (await api_client.post("/staff", json={"name": "佐藤 あやか"})).json()

            first = await api_client.put(
                "/shifts/wishes",
                json={
                    "staff_id": staff["id"],
                    "month": "2025-09",
                    "wishes": [
                        {"date": "2025-09-05", "available": True},
                        {"date": "2025-09-06", "available": False, "memo": "学校"},
                    ],
                },
            )
            assert first.status_code == 200

            second = await api_client.put(
                "/shifts/wishes",
                json={
                    "staff_id": staff["id"],
                    "month": "2025-09",
                    "wishes": [{"date": "2025-09-12", "available": True}],
                },
            )
            assert second.json()["id"] == first.json()["id"]

            listing = await api_client.get("/shifts/wishes", params={"month": "2025-09"})
            wishes = listing.json()
            assert len(wishes) == 1
            assert wishes[0]["wishes"] == [{"date": "2025-09-12", "available": True, "memo": None}]

            other_month = await api_client.get("/shifts/wishes", params={"month": "2025-10"})
            assert other_month.json() == []

            outside = await api_client.put(
                "/shifts/wishes",
                json={
                    "staff_id": staff["id"],
                    "month": "2025-09",
                    "wishes": [{"date": "2025-10-01", "available": True}],
                },
            )
            assert outside.status_code == 422

            unknown_staff = await api_client.put(
                "/shifts/wishes", json={"staff_id": 999, "month": "2025-09", "wishes": []}
            )
            assert unknown_staff.status_code == 404

    asyncio.run(_scenario())


def test_shift_plan_roundtrip(tmp_path: Path):
    client_manager = _client(tmp_path)

    async def _scenario():
        async with client_manager() as api_client:
            staff = (await api_client.post("/staff", json={"name": "鈴木 まりあ"})).json()

            missing = await api_client.get("/shifts/plans/2025-09")
            assert missing.status_code == 404

            saved = await api_client.put(
                "/shifts/plans/2025-09",
                json={
                    "assignments": [
                        {"date": "2025-09-05", "staff_id": staff["id"], "start": "20:00", "end": "02:00"},
                    ]
                },
            )
            assert saved.status_code == 200
            assert saved.json()["published"] is False

            published = await api_client.put(
                "/shifts/plans/2025-09",
                json={
                    "assignments": [
                        {"date": "2025-09-05", "staff_id": staff["id"], "start": "21:00", "end": "03:00"},
                    ],
                    "published": True,
                },
            )
            assert published.json()["id"] == saved.json()["id"]

            fetched = (await api_client.get("/shifts/plans/2025-09")).json()
            assert fetched["published"] is True
            assert fetched["assignments"][0]["start"] == "21:00"

            outside = await api_client.put(
                "/shifts/plans/2025-09",
                json={"assignments": [{"date": "2025-08-31", "staff_id": staff["id"]}]},
            )
            assert outside.status_code == 422
            assert outside.json()["detail"]["fields"] == ["assignments.0.date"]

            bad_time = await api_client.put(
                "/shifts/plans/2025-09",
                json={"assignments": [{"date": "2025-09-05", "staff_id": staff["id"], "start": "25:00"}]},
            )
            assert bad_time.status_code == 422

    asyncio.run(_scenario())
