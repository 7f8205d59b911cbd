"""Pydantic schemas for salaries and payroll records."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from app.models.payroll import PayrollStatus


class SalaryUpsertRequest(BaseModel):
    hourly_wage: float = Field(..., ge=0, examples=[1500])
    transportation_allowance: float = Field(default=0, ge=0, description="Per work day")
    drink_back_rate: float = Field(default=0, ge=0, le=100)
    receipt_back_rate: float = Field(default=0, ge=0, le=100)
    active: bool = True
    effective_from: date | None = None
    effective_until: date | None = None


class SalarySchema(BaseModel):
    id: int
    staff_id: int
    hourly_wage: float
    transportation_allowance: float
    drink_back_rate: float
    receipt_back_rate: float
    active: bool
    effective_from: date
    effective_until: date | None = None


class PayrollRecordSchema(BaseModel):
    id: int
    staff_id: int
    year_month: str
    work_days: int
    work_minutes: int
    base_pay: int
    transportation: int
    drink_back: int
    receipt_back: int
    adjustment: int
    total_pay: int
    deduction: int
    net_pay: int
    status: PayrollStatus
    note: str | None = None
    created_at: datetime
    confirmed_at: datetime | None = None
    paid_at: datetime | None = None


class PayrollRecordUpdateRequest(BaseModel):
    status: PayrollStatus | None = None
    adjustment: int | None = None
    note: str | None = Field(default=None, max_length=512)


class PayrollSummarySchema(BaseModel):
    year_month: str
    total_staff: int
    total_base_pay: int
    total_transportation: int
    total_incentive: int
    total_adjustment: int
    total_payroll: int
    total_deduction: int
    total_net_pay: int


__all__ = [
    "PayrollRecordSchema",
    "PayrollRecordUpdateRequest",
    "PayrollSummarySchema",
    "SalarySchema",
    "SalaryUpsertRequest",
]
