"""Salary settings and monthly payroll records."""

from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.menu import _enum_values


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PayrollStatus(str, enum.Enum):
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    PAID = "paid"


class StaffSalary(Base):
    __tablename__ = "staff_salary"

    id: Mapped[int] = mapped_column(primary_key=True)
    staff_id: Mapped[int] = mapped_column(ForeignKey("staff.id", ondelete="CASCADE"), unique=True)
    hourly_wage: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    transportation_allowance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    drink_back_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), default=0)
    receipt_back_rate: Mapped[Decimal] = mapped_column(Numeric(6, 3), default=0)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    effective_from: Mapped[date] = mapped_column(Date)
    effective_until: Mapped[date | None] = mapped_column(Date, nullable=True)


class PayrollRecord(Base):
    __tablename__ = "payroll_record"
    __table_args__ = (UniqueConstraint("staff_id", "year_month", name="uq_payroll_staff_month"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    staff_id: Mapped[int] = mapped_column(ForeignKey("staff.id", ondelete="CASCADE"))
    year_month: Mapped[str] = mapped_column(String(7), index=True)
    work_days: Mapped[int] = mapped_column(Integer, default=0)
    work_minutes: Mapped[int] = mapped_column(Integer, default=0)
    base_pay: Mapped[int] = mapped_column(Integer, default=0)
    transportation: Mapped[int] = mapped_column(Integer, default=0)
    drink_back: Mapped[int] = mapped_column(Integer, default=0)
    receipt_back: Mapped[int] = mapped_column(Integer, default=0)
    adjustment: Mapped[int] = mapped_column(Integer, default=0)
    total_pay: Mapped[int] = mapped_column(Integer, default=0)
    deduction: Mapped[int] = mapped_column(Integer, default=0)
    net_pay: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[PayrollStatus] = mapped_column(
        Enum(PayrollStatus, name="payroll_status", values_callable=_enum_values),
        default=PayrollStatus.DRAFT,
    )
    note: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


__all__ = ["PayrollRecord", "PayrollStatus", "StaffSalary"]
