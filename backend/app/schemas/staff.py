"""Pydantic schemas for staff, punch clock and attendance edit requests."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from app.models.staff import AttendanceReason, AttendanceStatus, RequestStatus
from nightclub.worktime import as_utc


class StaffCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    role: str = Field(default="Staff", max_length=64, examples=["Cast"])
    punch_token: str | None = Field(default=None, min_length=4, max_length=64)
    email: EmailStr | None = None
    active: bool = True


class StaffSchema(BaseModel):
    id: int
    name: str
    role: str
    punch_token: str | None = None
    active: bool
    email: str | None = None


class PunchInRequest(BaseModel):
    token: str = Field(..., min_length=1)
    reason: AttendanceReason = AttendanceReason.NORMAL
    note: str | None = Field(default=None, max_length=512)


class PunchOutRequest(BaseModel):
    token: str = Field(..., min_length=1)
    note: str | None = Field(default=None, max_length=512)


class AuditEntrySchema(BaseModel):
    at: datetime
    user_id: str
    action: str
    diff: dict[str, Any] | None = None


class AttendanceRecordSchema(BaseModel):
    id: int
    staff_id: int
    business_date: date
    check_in_at: datetime | None = None
    check_out_at: datetime | None = None
    status: AttendanceStatus
    reason: AttendanceReason
    note: str | None = None
    work_minutes: int
    audit: list[AuditEntrySchema] = Field(default_factory=list)


class RecordDecisionRequest(BaseModel):
    approver_user_id: str = Field(..., min_length=1, max_length=64)


class AttendanceEditPayload(BaseModel):
    check_in_at: datetime | None = None
    check_out_at: datetime | None = None
    reason: AttendanceReason | None = None
    note: str | None = Field(default=None, max_length=512)

    @field_validator("check_in_at", "check_out_at", "reason")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        # Omit the field to leave it unchanged; the record columns cannot be cleared.
        if value is None:
            raise ValueError("must not be null")
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "AttendanceEditPayload":
        if self.check_in_at and self.check_out_at and as_utc(self.check_out_at) < as_utc(self.check_in_at):
            raise ValueError("check_out_at must not be earlier than check_in_at")
        return self


class EditRequestCreate(BaseModel):
    record_id: int
    staff_id: int
    payload: AttendanceEditPayload


class RequestDecisionRequest(BaseModel):
    approver_user_id: str = Field(..., min_length=1, max_length=64)
    comment: str | None = Field(default=None, max_length=512)


class EditRequestSchema(BaseModel):
    id: int
    record_id: int
    staff_id: int
    type: str = "edit"
    payload: dict[str, Any]
    status: RequestStatus
    comment: str | None = None
    created_at: datetime
    decided_at: datetime | None = None
    decided_by: str | None = None


class MonthlyStatsSchema(BaseModel):
    staff_id: int
    month: str
    total_minutes: int
    work_days: int


__all__ = [
    "AttendanceEditPayload",
    "AttendanceRecordSchema",
    "AuditEntrySchema",
    "EditRequestCreate",
    "EditRequestSchema",
    "MonthlyStatsSchema",
    "PunchInRequest",
    "PunchOutRequest",
    "RecordDecisionRequest",
    "RequestDecisionRequest",
    "StaffCreateRequest",
    "StaffSchema",
]
