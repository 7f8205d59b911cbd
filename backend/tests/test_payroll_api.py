import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, time, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from app.db.session import Database
from app.main import create_app
from app.services import payroll as payroll_service
from nightclub import business_date

TOKYO = ZoneInfo("Asia/Tokyo")


def _client(tmp_path: Path):
    database = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'test_payroll.db'}")
    app = create_app(database)

    @asynccontextmanager
    async def _manager():
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client

    return _manager


def _current_business_day():
    return business_date(datetime.now(timezone.utc), "Asia/Tokyo", 6)


async def _receipt(api_client: AsyncClient, items: list[dict]) -> dict:
    response = await api_client.post(
        "/receipts",
        json={
            "items": items,
            "payment_method": "Cash",
            "service_charge_rate_percent": 10,
            "charge_enabled": True,
            "charge_fixed": 1000,
        },
    )
    assert response.status_code == 201
    return response.json()


async def _work_shift(api_client: AsyncClient, staff: dict, token: str, hours: int) -> None:
    await api_client.post("/staff-attendance/check-in", json={"token": token})
    record = (await api_client.post("/staff-attendance/check-out", json={"token": token})).json()

    start = datetime.combine(_current_business_day(), time(20, 0), tzinfo=TOKYO)
    request = await api_client.post(
        "/staff-attendance/requests",
        json={
            "record_id": record["id"],
            "staff_id": staff["id"],
            "payload": {
                "check_in_at": start.isoformat(),
                "check_out_at": (start + timedelta(hours=hours)).isoformat(),
            },
        },
    )
    approved = await api_client.post(
        f"/staff-attendance/requests/{request.json()['id']}/approve",
        json={"approver_user_id": "manager"},
    )
    assert approved.status_code == 200


def test_salary_upsert(tmp_path: Path):
    client_manager = _client(tmp_path)

    async def _scenario():
        async with client_manager() as api_client:
            staff = (await api_client.post("/staff", json={"name": "佐藤 あやか"})).json()

            missing = await api_client.get(f"/payroll/salaries/{staff['id']}")
            assert missing.status_code == 404

            created = await api_client.put(
                f"/payroll/salaries/{staff['id']}", json={"hourly_wage": 1500, "drink_back_rate": 10}
            )
            assert created.status_code == 200
            assert created.json()["hourly_wage"] == 1500

            updated = await api_client.put(f"/payroll/salaries/{staff['id']}", json={"hourly_wage": 1800})
            assert updated.json()["id"] == created.json()["id"]
            assert updated.json()["drink_back_rate"] == 0

            listing = await api_client.get("/payroll/salaries")
            assert [item["hourly_wage"] for item in listing.json()] == [1800]

            unknown_staff = await api_client.put("/payroll/salaries/999", json={"hourly_wage": 1000})
            assert unknown_staff.status_code == 404

    asyncio.run(_scenario())


def test_payroll_calculation_and_lifecycle(tmp_path: Path):
    client_manager = _client(tmp_path)
    year_month = _current_business_day().strftime("%Y-%m")

    async def _scenario():
        async with client_manager() as api_client:
            staff = (await api_client.post("/staff", json={"name": "鈴木 まりあ", "punch_token": "cast-maria"})).json()
            unpaid = (await api_client.post("/staff", json={"name": "山田 太郎"})).json()
            await api_client.put(
                f"/payroll/salaries/{staff['id']}",
                json={
                    "hourly_wage": 1500,
                    "transportation_allowance": 1000,
                    "drink_back_rate": 10,
                    "receipt_back_rate": 5,
                },
            )
            await _work_shift(api_client, staff, "cast-maria", hours=6)

            bottle_receipt = await _receipt(
                api_client,
                [
                    {"name": "シャンパン（モエ）", "category": "bottle", "unit_price": 35000, "qty": 1},
                    {"name": "60分セット", "category": "set", "unit_price": 8000, "qty": 1},
                ],
            )
            set_receipt = await _receipt(api_client, [{"name": "60分セット", "category": "set", "unit_price": 3000, "qty": 1}])
            voided = await _receipt(api_client, [{"name": "90分セット", "category": "set", "unit_price": 12000, "qty": 1}])

            for receipt, kind in ((bottle_receipt, "drink_back"), (set_receipt, "receipt_back"), (voided, "receipt_back")):
                assigned = await api_client.post(
                    f"/receipts/{receipt['id']}/assignments", json={"staff_id": staff["id"], "type": kind}
                )
                assert assigned.status_code == 201
            duplicate = await api_client.post(
                f"/receipts/{set_receipt['id']}/assignments", json={"staff_id": staff["id"], "type": "receipt_back"}
            )
            assert duplicate.status_code == 409
            await api_client.post(f"/receipts/{voided['id']}/cancel")

            no_salary = await api_client.post(f"/payroll/{year_month}/calculate/{unpaid['id']}")
            assert no_salary.status_code == 404

            batch = await api_client.post(f"/payroll/{year_month}/calculate")
            assert batch.status_code == 200
            assert [item["staff_id"] for item in batch.json()] == [staff["id"]]

            response = await api_client.post(f"/payroll/{year_month}/calculate/{staff['id']}")
            assert response.status_code == 200
            record = response.json()
            assert record["work_minutes"] == 360
            assert record["work_days"] == 1
            assert record["base_pay"] == 9000
            assert record["transportation"] == 1000
            assert record["drink_back"] == 3500
            # set receipt total: 3000 * 1.1 + 1000 = 4300
            assert record["receipt_back"] == 215
            assert record["total_pay"] == 13715
            assert record["deduction"] == 1400
            assert record["net_pay"] == 12315
            assert record["status"] == "draft"

            adjusted = await api_client.patch(f"/payroll/records/{record['id']}", json={"adjustment": 2000})
            assert adjusted.status_code == 200
            assert adjusted.json()["total_pay"] == 15715
            assert adjusted.json()["deduction"] == 1605
            assert adjusted.json()["net_pay"] == 14110

            recalculated = await api_client.post(f"/payroll/{year_month}/calculate/{staff['id']}")
            assert recalculated.json()["adjustment"] == 2000
            assert recalculated.json()["total_pay"] == 15715

            confirmed = await api_client.patch(f"/payroll/records/{record['id']}", json={"status": "confirmed"})
            assert confirmed.json()["status"] == "confirmed"
            assert confirmed.json()["confirmed_at"] is not None

            locked = await api_client.post(f"/payroll/{year_month}/calculate/{staff['id']}")
            assert locked.status_code == 409
            frozen = await api_client.patch(f"/payroll/records/{record['id']}", json={"adjustment": 0})
            assert frozen.status_code == 409

            paid = await api_client.patch(f"/payroll/records/{record['id']}", json={"status": "paid"})
            assert paid.json()["status"] == "paid"
            assert paid.json()["paid_at"] is not None

            reopen = await api_client.patch(f"/payroll/records/{record['id']}", json={"status": "draft"})
            assert reopen.status_code == 409

            summary = await api_client.get(f"/payroll/{year_month}/summary")
            assert summary.json() == {
                "year_month": year_month,
                "total_staff": 1,
                "total_base_pay": 9000,
                "total_transportation": 1000,
                "total_incentive": 3715,
                "total_adjustment": 2000,
                "total_payroll": 15715,
                "total_deduction": 1605,
                "total_net_pay": 14110,
            }

            listing = await api_client.get(f"/payroll/{year_month}")
            assert [item["id"] for item in listing.json()] == [record["id"]]

            bad_month = await api_client.get("/payroll/2025-13")
            assert bad_month.status_code == 422

    asyncio.run(_scenario())


def test_confirmed_payroll_can_return_to_draft(tmp_path: Path):
    client_manager = _client(tmp_path)
    year_month = _current_business_day().strftime("%Y-%m")

    async def _scenario():
        async with client_manager() as api_client:
            staff = (await api_client.post("/staff", json={"name": "田中 ゆい"})).json()
            await api_client.put(f"/payroll/salaries/{staff['id']}", json={"hourly_wage": 1200})
            record = (await api_client.post(f"/payroll/{year_month}/calculate/{staff['id']}")).json()
            assert record["total_pay"] == 0

            skip_confirm = await api_client.patch(f"/payroll/records/{record['id']}", json={"status": "paid"})
            assert skip_confirm.status_code == 409

            await api_client.patch(f"/payroll/records/{record['id']}", json={"status": "confirmed"})
            reverted = await api_client.patch(
                f"/payroll/records/{record['id']}", json={"status": "draft", "note": "fix hours"}
            )
            assert reverted.status_code == 200
            assert reverted.json()["status"] == "draft"
            assert reverted.json()["confirmed_at"] is None
            assert reverted.json()["note"] == "fix hours"

            missing = await api_client.patch("/payroll/records/999", json={"status": "confirmed"})
            assert missing.status_code == 404

    asyncio.run(_scenario())


def test_reopening_confirmed_payroll_accepts_adjustment(tmp_path: Path):
    client_manager = _client(tmp_path)
    year_month = _current_business_day().strftime("%Y-%m")

    async def _scenario():
        async with client_manager() as api_client:
            staff = (await api_client.post("/staff", json={"name": "小林 りな"})).json()
            await api_client.put(
                f"/payroll/salaries/{staff['id']}", json={"hourly_wage": 1200, "transportation_allowance": 1000}
            )
            record = (await api_client.post(f"/payroll/{year_month}/calculate/{staff['id']}")).json()
            assert record["total_pay"] == 0
            await api_client.patch(f"/payroll/records/{record['id']}", json={"status": "confirmed"})

            reopened = await api_client.patch(
                f"/payroll/records/{record['id']}", json={"status": "draft", "adjustment": 500}
            )
            assert reopened.status_code == 200
            assert reopened.json()["status"] == "draft"
            assert reopened.json()["adjustment"] == 500
            assert reopened.json()["total_pay"] == 500
            assert reopened.json()["deduction"] == 51
            assert reopened.json()["net_pay"] == 449

            confirmed = await api_client.patch(
                f"/payroll/records/{record['id']}", json={"status": "confirmed", "adjustment": 0}
            )
            assert confirmed.status_code == 200
            assert confirmed.json()["status"] == "confirmed"
            assert confirmed.json()["total_pay"] == 0

            paid_and_adjusted = await api_client.patch(
                f"/payroll/records/{record['id']}", json={"status": "paid", "adjustment": 100}
            )
            assert paid_and_adjusted.status_code == 409
            unchanged = (await api_client.get(f"/payroll/{year_month}")).json()[0]
            assert unchanged["status"] == "confirmed"
            assert unchanged["adjustment"] == 0

    asyncio.run(_scenario())


def test_calculate_all_skips_database_failures(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    client_manager = _client(tmp_path)
    year_month = _current_business_day().strftime("%Y-%m")

    async def _scenario():
        async with client_manager() as api_client:
            members = []
            for name in ("伊藤 みく", "渡辺 えり", "加藤 なな"):
                member = (await api_client.post("/staff", json={"name": name})).json()
                await api_client.put(
                    f"/payroll/salaries/{member['id']}",
                    json={"hourly_wage": 1200, "transportation_allowance": 1000},
                )
                members.append(member)
            broken_id = members[1]["id"]

            original = payroll_service.calculate_payroll

            async def _calculate(session, staff_id, month):
                if staff_id == broken_id:
                    raise SQLAlchemyError("duplicate payroll row")
                return await original(session, staff_id, month)

            monkeypatch.setattr(payroll_service, "calculate_payroll", _calculate)

            response = await api_client.post(f"/payroll/{year_month}/calculate")
            assert response.status_code == 200
            assert [item["staff_id"] for item in response.json()] == [members[0]["id"], members[2]["id"]]
            assert all(item["status"] == "draft" for item in response.json())

            listing = await api_client.get(f"/payroll/{year_month}")
            assert [item["staff_id"] for item in listing.json()] == [members[0]["id"], members[2]["id"]]

    asyncio.run(_scenario())
