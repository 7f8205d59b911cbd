"""Sales and customer KPIs bucketed by business day, week or month."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models import GuestVisit, Receipt, ReceiptStatus
from app.schemas import DashboardKPIResponse, KPIDataSchema, KPITotalsSchema, TodaySummarySchema
from app.schemas.dashboard import KPIGranularity
from app.services.store import get_store_settings
from nightclub import business_date, round_to_yen
from nightclub.worktime import business_day_window


def bucket_start(day: date, granularity: KPIGranularity) -> date:
    if granularity == "week":
        return day - timedelta(days=day.weekday())
    if granularity == "month":
        return day.replace(day=1)
    return day


def _next_bucket(start: date, granularity: KPIGranularity) -> date:
    if granularity == "week":
        return start + timedelta(days=7)
    if granularity == "month":
        if start.month == 12:
            return date(start.year + 1, 1, 1)
        return date(start.year, start.month + 1, 1)
    return start + timedelta(days=1)


def average_spend(sales: int, customers: int) -> int:
    if customers <= 0:
        return 0
    return round_to_yen(Decimal(sales) / customers)


async def _collect(
    session: AsyncSession, start: date, end: date
) -> tuple[list[tuple[date, int]], list[tuple[date, int, bool]]]:
    """Return ``(business_date, total)`` for receipts and ``(business_date, guests, in_house)`` for visits."""

    store = await get_store_settings(session)
    day_start_hour = get_settings().business_day_start_hour
    lower, upper = business_day_window(start, end, store.timezone, day_start_hour)

    receipt_rows = await session.execute(
        select(Receipt.issued_at, Receipt.total).where(
            Receipt.status != ReceiptStatus.CANCELLED,
            Receipt.issued_at >= lower,
            Receipt.issued_at < upper,
        )
    )
    receipts = [
        (business_date(issued_at, store.timezone, day_start_hour), total)
        for issued_at, total in receipt_rows.all()
    ]

    visit_rows = await session.execute(
        select(GuestVisit.checked_in_at, GuestVisit.guest_count, GuestVisit.checked_out_at).where(
            GuestVisit.checked_in_at >= lower,
            GuestVisit.checked_in_at < upper,
        )
    )
    visits = [
        (business_date(checked_in_at, store.timezone, day_start_hour), guests, checked_out_at is None)
        for checked_in_at, guests, checked_out_at in visit_rows.all()
    ]
    return receipts, visits


async def kpi(
    session: AsyncSession, granularity: KPIGranularity, start: date, end: date
) -> DashboardKPIResponse:
    receipts, visits = await _collect(session, start, end)

    sales: dict[date, int] = defaultdict(int)
    customers: dict[date, int] = defaultdict(int)
    for day, total in receipts:
        sales[bucket_start(day, granularity)] += total
    for day, guests, _ in visits:
        customers[bucket_start(day, granularity)] += guests

    data: list[KPIDataSchema] = []
    cursor = bucket_start(start, granularity)
    while cursor <= end:
        data.append(
            KPIDataSchema(
                date=cursor,
                sales=sales[cursor],
                customer_count=customers[cursor],
                avg_spend=average_spend(sales[cursor], customers[cursor]),
            )
        )
        cursor = _next_bucket(cursor, granularity)

    total_sales = sum(point.sales for point in data)
    total_customers = sum(point.customer_count for point in data)
    return DashboardKPIResponse(
        granularity=granularity,
        from_date=start,
        to_date=end,
        data=data,
        totals=KPITotalsSchema(
            total_sales=total_sales,
            total_customers=total_customers,
            avg_spend_overall=average_spend(total_sales, total_customers),
        ),
    )


async def today_summary(session: AsyncSession, now: datetime | None = None) -> TodaySummarySchema:
    store = await get_store_settings(session)
    today = business_date(now or datetime.now(timezone.utc), store.timezone, get_settings().business_day_start_hour)
    receipts, visits = await _collect(session, today, today)

    sales = sum(total for _, total in receipts)
    customers = sum(guests for _, guests, _ in visits)
    return TodaySummarySchema(
        business_date=today,
        sales=sales,
        receipt_count=len(receipts),
        customer_count=customers,
        avg_spend=average_spend(sales, customers),
        guests_in_house=sum(guests for _, guests, in_house in visits if in_house),
    )


__all__ = ["average_spend", "bucket_start", "kpi", "today_summary"]
