"""Endpoints for staff salaries and monthly payroll."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas import (
    PayrollRecordSchema,
    PayrollRecordUpdateRequest,
    PayrollSummarySchema,
    SalarySchema,
    SalaryUpsertRequest,
)
from app.services import payroll as payroll_service

router = APIRouter()

_YEAR_MONTH = r"^\d{4}-(0[1-9]|1[0-2])$"


@router.get("/salaries", response_model=list[SalarySchema])
async def list_salaries(session: AsyncSession = Depends(get_db)) -> list[SalarySchema]:
    salaries = await payroll_service.list_salaries(session)
    return [payroll_service.serialize_salary(salary) for salary in salaries]


@router.get("/salaries/{staff_id}", response_model=SalarySchema)
async def get_salary(staff_id: int, session: AsyncSession = Depends(get_db)) -> SalarySchema:
    return payroll_service.serialize_salary(await payroll_service.get_salary_or_404(session, staff_id))


@router.put("/salaries/{staff_id}", response_model=SalarySchema)
async def put_salary(
    staff_id: int, payload: SalaryUpsertRequest, session: AsyncSession = Depends(get_db)
) -> SalarySchema:
    salary = await payroll_service.upsert_salary(session, staff_id, payload)
    return payroll_service.serialize_salary(salary)


@router.patch("/records/{record_id}", response_model=PayrollRecordSchema)
async def update_record(
    record_id: int, payload: PayrollRecordUpdateRequest, session: AsyncSession = Depends(get_db)
) -> PayrollRecordSchema:
    record = await payroll_service.update_payroll_record(session, record_id, payload)
    return payroll_service.serialize_payroll(record)


@router.post("/{year_month}/calculate", response_model=list[PayrollRecordSchema])
async def calculate_all(
    year_month: str = Path(..., pattern=_YEAR_MONTH), session: AsyncSession = Depends(get_db)
) -> list[PayrollRecordSchema]:
    records = await payroll_service.calculate_all(session, year_month)
    return [payroll_service.serialize_payroll(record) for record in records]


@router.post("/{year_month}/calculate/{staff_id}", response_model=PayrollRecordSchema)
async def calculate_for_staff(
    staff_id: int,
    year_month: str = Path(..., pattern=_YEAR_MONTH),
    session: AsyncSession = Depends(get_db),
) -> PayrollRecordSchema:
    record = await payroll_service.calculate_payroll(session, staff_id, year_month)
    return payroll_service.serialize_payroll(record)


@router.get("/{year_month}", response_model=list[PayrollRecordSchema])
async def list_payroll(
    year_month: str = Path(..., pattern=_YEAR_MONTH), session: AsyncSession = Depends(get_db)
) -> list[PayrollRecordSchema]:
    records = await payroll_service.list_payroll(session, year_month)
    return [payroll_service.serialize_payroll(record) for record in records]


@router.get("/{year_month}/summary", response_model=PayrollSummarySchema)
async def payroll_summary(
    year_month: str = Path(..., pattern=_YEAR_MONTH), session: AsyncSession = Depends(get_db)
) -> PayrollSummarySchema:
    return await payroll_service.payroll_summary(session, year_month)


__all__ = ["router"]
