"""Load the nightclub_seed.json fixture (menu and staff roster) into the database."""

from __future__ import annotations

import argparse
import asyncio
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from sqlalchemy import select

from app.db.init import init_database
from app.db.session import Database
from app.models import MenuCategory, MenuItem, Staff
from app.services.store import get_store_settings
from nightclub import generate_menu_id

DEFAULT_SEED = Path(__file__).with_name("nightclub_seed.json")


async def _run(seed: dict[str, Any], database_url: str | None) -> None:
    database = Database(database_url)
    await init_database(database)
    async with database.session() as session:
        await get_store_settings(session)

        existing_menu = set((await session.execute(select(MenuItem.name))).scalars().all())
        added_menu = 0
        for entry in seed.get("menu", []):
            if entry["name"] in existing_menu:
                continue
            session.add(
                MenuItem(
                    id=generate_menu_id(),
                    name=entry["name"],
                    category=MenuCategory(entry["category"]),
                    price=Decimal(str(entry["price"])),
                    active=entry.get("active", True),
                )
            )
            added_menu += 1

        existing_tokens = set((await session.execute(select(Staff.punch_token))).scalars().all())
        added_staff = 0
        for entry in seed.get("staff", []):
            if entry["punch_token"] in existing_tokens:
                continue
            session.add(Staff(name=entry["name"], role=entry.get("role", "Staff"), punch_token=entry["punch_token"]))
            added_staff += 1

        await session.commit()
    await database.dispose()
    print(f"Added {added_menu} menu items and {added_staff} staff members")


def main() -> None:
    parser = argparse.ArgumentParser(description="Load seed data into the nightclub POS database")
    parser.add_argument("seed_file", nargs="?", default=str(DEFAULT_SEED))
    parser.add_argument("--database-url", default=None, help="Override AppSettings.database_url")
    args = parser.parse_args()
    seed_path = Path(args.seed_file)
    if not seed_path.exists():
        raise SystemExit(f"Seed file not found: {seed_path}")
    asyncio.run(_run(json.loads(seed_path.read_text(encoding="utf-8")), args.database_url))


if __name__ == "__main__":
    main()
