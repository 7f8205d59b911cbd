"""Salary settings and monthly payroll calculation."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models import (
    AssignmentType,
    PayrollRecord,
    PayrollStatus,
    Receipt,
    ReceiptAssignment,
    ReceiptStatus,
    Staff,
    StaffSalary,
)
from app.schemas import (
    PayrollRecordSchema,
    PayrollRecordUpdateRequest,
    PayrollSummarySchema,
    SalarySchema,
    SalaryUpsertRequest,
)
from app.services.staff_attendance import get_staff_or_404, list_month
from app.services.store import get_store_settings
from nightclub import PayrollInputs, compute_payroll, month_bounds, round_to_yen, summarize_month, summarize_payroll
from nightclub.payroll import DRINK_CATEGORIES
from nightclub.worktime import business_day_window

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[PayrollStatus, tuple[PayrollStatus, ...]] = {
    PayrollStatus.DRAFT: (PayrollStatus.CONFIRMED,),
    PayrollStatus.CONFIRMED: (PayrollStatus.DRAFT, PayrollStatus.PAID),
    PayrollStatus.PAID: (),
}


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def _now() -> datetime:
    return datetime.now(timezone.utc)


def serialize_salary(salary: StaffSalary) -> SalarySchema:
    return SalarySchema(
        id=salary.id,
        staff_id=salary.staff_id,
        hourly_wage=float(salary.hourly_wage),
        transportation_allowance=float(salary.transportation_allowance),
        drink_back_rate=float(salary.drink_back_rate),
        receipt_back_rate=float(salary.receipt_back_rate),
        active=salary.active,
        effective_from=salary.effective_from,
        effective_until=salary.effective_until,
    )


def serialize_payroll(record: PayrollRecord) -> PayrollRecordSchema:
    return PayrollRecordSchema.model_validate(record, from_attributes=True)


async def list_salaries(session: AsyncSession) -> list[StaffSalary]:
    result = await session.execute(select(StaffSalary).order_by(StaffSalary.staff_id))
    return list(result.scalars().all())


async def _find_salary(session: AsyncSession, staff_id: int) -> StaffSalary | None:
    stmt = select(StaffSalary).where(StaffSalary.staff_id == staff_id)
    return (await session.execute(stmt)).scalar_one_or_none()


async def get_salary_or_404(session: AsyncSession, staff_id: int) -> StaffSalary:
    salary = await _find_salary(session, staff_id)
    if salary is None or not salary.active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Salary settings not found for staff {staff_id}",
        )
    return salary


async def upsert_salary(session: AsyncSession, staff_id: int, payload: SalaryUpsertRequest) -> StaffSalary:
    await get_staff_or_404(session, staff_id)
    salary = await _find_salary(session, staff_id)
    if salary is None:
        salary = StaffSalary(staff_id=staff_id)
        session.add(salary)
    salary.hourly_wage = _dec(payload.hourly_wage)
    salary.transportation_allowance = _dec(payload.transportation_allowance)
    salary.drink_back_rate = _dec(payload.drink_back_rate)
    salary.receipt_back_rate = _dec(payload.receipt_back_rate)
    salary.active = payload.active
    salary.effective_from = payload.effective_from or salary.effective_from or date.today()
    salary.effective_until = payload.effective_until
    await session.commit()
    return salary


async def _assigned_receipts(
    session: AsyncSession, staff_id: int, kind: AssignmentType, lower: datetime, upper: datetime
) -> list[Receipt]:
    stmt = (
        select(Receipt)
        .join(ReceiptAssignment, ReceiptAssignment.receipt_id == Receipt.id)
        .where(
            ReceiptAssignment.staff_id == staff_id,
            ReceiptAssignment.type == kind,
            Receipt.status != ReceiptStatus.CANCELLED,
            Receipt.issued_at >= lower,
            Receipt.issued_at < upper,
        )
    )
    return list((await session.execute(stmt)).scalars().unique().all())


async def _sales_for(session: AsyncSession, staff_id: int, year_month: str) -> tuple[Decimal, Decimal]:
    """Drink sales and receipt sales credited to ``staff_id`` during the month."""

    store = await get_store_settings(session)
    start, end = month_bounds(year_month)
    lower, upper = business_day_window(
        start, end - timedelta(days=1), store.timezone, get_settings().business_day_start_hour
    )

    drink_sales = Decimal(0)
    for receipt in await _assigned_receipts(session, staff_id, AssignmentType.DRINK_BACK, lower, upper):
        for item in receipt.items:
            if item.category.value in DRINK_CATEGORIES:
                drink_sales += Decimal(str(item.unit_price)) * item.qty

    receipt_sales = Decimal(0)
    for receipt in await _assigned_receipts(session, staff_id, AssignmentType.RECEIPT_BACK, lower, upper):
        receipt_sales += receipt.total
    return drink_sales, receipt_sales


async def _get_record(session: AsyncSession, staff_id: int, year_month: str) -> PayrollRecord | None:
    stmt = select(PayrollRecord).where(
        PayrollRecord.staff_id == staff_id, PayrollRecord.year_month == year_month
    )
    return (await session.execute(stmt)).scalar_one_or_none()


def _check_month(year_month: str) -> None:
    try:
        month_bounds(year_month)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


async def calculate_payroll(session: AsyncSession, staff_id: int, year_month: str) -> PayrollRecord:
    """Create or refresh the draft payroll record for one staff member and month."""

    _check_month(year_month)
    await get_staff_or_404(session, staff_id)
    salary = await get_salary_or_404(session, staff_id)

    record = await _get_record(session, staff_id, year_month)
    if record is not None and record.status != PayrollStatus.DRAFT:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Payroll {year_month} for staff {staff_id} is already {record.status.value}",
        )

    attendance = await list_month(session, year_month, staff_id=staff_id, counted_only=True)
    stats = summarize_month(attendance)
    drink_sales, receipt_sales = await _sales_for(session, staff_id, year_month)

    figures = compute_payroll(
        PayrollInputs(
            hourly_wage=salary.hourly_wage,
            transportation_allowance=salary.transportation_allowance,
            work_minutes=stats.total_minutes,
            work_days=stats.work_days,
            drink_back_rate=salary.drink_back_rate,
            receipt_back_rate=salary.receipt_back_rate,
            drink_sales=drink_sales,
            receipt_sales=receipt_sales,
            adjustment=record.adjustment if record is not None else 0,
            withholding_rate_percent=get_settings().payroll_withholding_rate_percent,
        )
    )

    if record is None:
        record = PayrollRecord(staff_id=staff_id, year_month=year_month, status=PayrollStatus.DRAFT)
        session.add(record)
    record.work_days = stats.work_days
    record.work_minutes = stats.total_minutes
    record.base_pay = figures.base_pay
    record.transportation = figures.transportation
    record.drink_back = figures.drink_back
    record.receipt_back = figures.receipt_back
    record.adjustment = figures.adjustment
    record.total_pay = figures.total_pay
    record.deduction = figures.deduction
    record.net_pay = figures.net_pay
    await session.commit()
    logger.info(
        "Calculated payroll %s for staff %s: total=%s net=%s",
        year_month,
        staff_id,
        record.total_pay,
        record.net_pay,
    )
    return record


async def calculate_all(session: AsyncSession, year_month: str) -> list[PayrollRecord]:
    _check_month(year_month)
    result = await session.execute(select(Staff.id).where(Staff.active.is_(True)).order_by(Staff.id))
    records: list[PayrollRecord] = []
    for staff_id in result.scalars().all():
        try:
            records.append(await calculate_payroll(session, staff_id, year_month))
        except HTTPException as exc:
            # Raised before anything is written, so earlier records stay valid.
            logger.warning("Skipped payroll %s for staff %s: %s", year_month, staff_id, exc.detail)
        except SQLAlchemyError:
            logger.exception("Failed to calculate payroll %s for staff %s", year_month, staff_id)
            await session.rollback()
            # Rollback expires everything loaded so far; reload the committed records.
            for record in records:
                await session.refresh(record)
    return records


async def list_payroll(session: AsyncSession, year_month: str) -> list[PayrollRecord]:
    _check_month(year_month)
    stmt = (
        select(PayrollRecord)
        .where(PayrollRecord.year_month == year_month)
        .order_by(PayrollRecord.staff_id)
    )
    return list((await session.execute(stmt)).scalars().all())


async def payroll_summary(session: AsyncSession, year_month: str) -> PayrollSummarySchema:
    summary = summarize_payroll(year_month, await list_payroll(session, year_month))
    return PayrollSummarySchema(**vars(summary))


async def update_payroll_record(
    session: AsyncSession, record_id: int, payload: PayrollRecordUpdateRequest
) -> PayrollRecord:
    """Apply a status transition, adjustment and note in one request.

    The adjustment is allowed when the record is a draft before or after the
    transition, so ``{"status": "draft", "adjustment": ...}`` reopens and
    adjusts a confirmed record in one call.
    """

    record = await session.get(PayrollRecord, record_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Payroll record not found: {record_id}"
        )

    target = payload.status if payload.status is not None else record.status
    if target != record.status and target not in _TRANSITIONS[record.status]:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot move payroll record from {record.status.value} to {target.value}",
        )

    if payload.adjustment is not None and payload.adjustment != record.adjustment:
        if PayrollStatus.DRAFT not in (record.status, target):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Payroll record {record_id} is {record.status.value}; only drafts can be adjusted",
            )
        # Every other component is unchanged, so the total moves by the adjustment delta.
        record.total_pay = record.total_pay - record.adjustment + payload.adjustment
        record.adjustment = payload.adjustment
        record.deduction = round_to_yen(
            Decimal(max(record.total_pay, 0))
            * _dec(get_settings().payroll_withholding_rate_percent)
            / Decimal(100)
        )
        record.net_pay = record.total_pay - record.deduction

    if target != record.status:
        record.status = target
        if target == PayrollStatus.CONFIRMED:
            record.confirmed_at = _now()
        elif target == PayrollStatus.PAID:
            record.paid_at = _now()
        elif target == PayrollStatus.DRAFT:
            record.confirmed_at = None

    if "note" in payload.model_fields_set:
        record.note = payload.note
    await session.commit()
    return record


__all__ = [
    "calculate_all",
    "calculate_payroll",
    "get_salary_or_404",
    "list_payroll",
    "list_salaries",
    "payroll_summary",
    "serialize_payroll",
    "serialize_salary",
    "update_payroll_record",
    "upsert_salary",
]
