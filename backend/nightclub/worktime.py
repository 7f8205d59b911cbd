"""Work time and business-day helpers for staff attendance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Protocol
from zoneinfo import ZoneInfo


class TimedRecord(Protocol):
    check_in_at: datetime | None
    check_out_at: datetime | None


@dataclass
class MonthlyStats:
    total_minutes: int
    work_days: int


def calculate_work_minutes(check_in: datetime | None, check_out: datetime | None) -> int:
    """Whole minutes worked, 0 when either end of the shift is missing."""

    if check_in is None or check_out is None:
        return 0
    return int((as_utc(check_out) - as_utc(check_in)).total_seconds() // 60)


def business_date(moment: datetime, tz: str, day_start_hour: int) -> date:
    """Local business day for ``moment``; early-morning hours count toward the previous night."""

    local = as_utc(moment).astimezone(ZoneInfo(tz))
    if local.hour < day_start_hour:
        return (local - timedelta(days=1)).date()
    return local.date()


def month_bounds(year_month: str) -> tuple[date, date]:
    """Return ``(first_day, first_day_of_next_month)`` for ``YYYY-MM``."""

    try:
        year_str, month_str = year_month.split("-")
        start = date(int(year_str), int(month_str), 1)
    except ValueError as exc:
        raise ValueError(f"Invalid month: {year_month!r}, expected YYYY-MM") from exc
    if len(year_str) != 4 or len(month_str) != 2:
        raise ValueError(f"Invalid month: {year_month!r}, expected YYYY-MM")
    if start.month == 12:
        return start, date(start.year + 1, 1, 1)
    return start, date(start.year, start.month + 1, 1)


def summarize_month(records: Iterable[TimedRecord]) -> MonthlyStats:
    total = 0
    days = 0
    for record in records:
        if record.check_in_at is None or record.check_out_at is None:
            continue
        total += calculate_work_minutes(record.check_in_at, record.check_out_at)
        days += 1
    return MonthlyStats(total_minutes=total, work_days=days)


def business_day_window(start: date, end: date, tz: str, day_start_hour: int) -> tuple[datetime, datetime]:
    """UTC instants spanning business days ``start`` through ``end`` inclusive."""

    zone = ZoneInfo(tz)
    opening = time(hour=day_start_hour)
    lower = datetime.combine(start, opening, tzinfo=zone).astimezone(timezone.utc)
    upper = datetime.combine(end + timedelta(days=1), opening, tzinfo=zone).astimezone(timezone.utc)
    return lower, upper


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC; SQLite hands them back without an offset."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


__all__ = [
    "MonthlyStats",
    "as_utc",
    "business_date",
    "business_day_window",
    "calculate_work_minutes",
    "month_bounds",
    "summarize_month",
]
