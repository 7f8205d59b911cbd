"""Staff, punch-clock record and attendance edit-request models."""

from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.menu import _enum_values


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttendanceStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttendanceReason(str, enum.Enum):
    NORMAL = "normal"
    EARLY = "early"
    LATE = "late"
    DOHAN = "dohan"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128))
    role: Mapped[str] = mapped_column(String(64), default="Staff")
    punch_token: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    records: Mapped[list["StaffAttendanceRecord"]] = relationship(back_populates="staff")


class StaffAttendanceRecord(Base):
    __tablename__ = "staff_attendance_record"
    __table_args__ = (Index("ix_staff_attendance_staff_date", "staff_id", "business_date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    staff_id: Mapped[int] = mapped_column(ForeignKey("staff.id", ondelete="CASCADE"))
    business_date: Mapped[date] = mapped_column(Date, index=True)
    check_in_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    check_out_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[AttendanceStatus] = mapped_column(
        Enum(AttendanceStatus, name="attendance_status", values_callable=_enum_values),
        default=AttendanceStatus.OPEN,
    )
    reason: Mapped[AttendanceReason] = mapped_column(
        Enum(AttendanceReason, name="attendance_reason", values_callable=_enum_values),
        default=AttendanceReason.NORMAL,
    )
    note: Mapped[str | None] = mapped_column(String(512), nullable=True)
    audit: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    staff: Mapped[Optional[Staff]] = relationship(back_populates="records")


class AttendanceRequest(Base):
    __tablename__ = "attendance_request"

    id: Mapped[int] = mapped_column(primary_key=True)
    record_id: Mapped[int] = mapped_column(
        ForeignKey("staff_attendance_record.id", ondelete="CASCADE"), index=True
    )
    staff_id: Mapped[int] = mapped_column(ForeignKey("staff.id", ondelete="CASCADE"))
    payload: Mapped[dict[str, Any]] = mapped_column(JSON)
    status: Mapped[RequestStatus] = mapped_column(
        Enum(RequestStatus, name="request_status", values_callable=_enum_values),
        default=RequestStatus.PENDING,
        index=True,
    )
    comment: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    decided_by: Mapped[str | None] = mapped_column(String(64), nullable=True)


__all__ = [
    "AttendanceReason",
    "AttendanceRequest",
    "AttendanceStatus",
    "RequestStatus",
    "Staff",
    "StaffAttendanceRecord",
]
