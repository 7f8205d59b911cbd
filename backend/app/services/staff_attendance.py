"""Punch clock, monthly attendance views and edit-request review."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models import (
    AttendanceRequest,
    AttendanceStatus,
    RequestStatus,
    Staff,
    StaffAttendanceRecord,
)
from app.schemas import (
    AttendanceRecordSchema,
    EditRequestCreate,
    EditRequestSchema,
    MonthlyStatsSchema,
    PunchInRequest,
    PunchOutRequest,
)
from app.schemas.staff import AttendanceEditPayload, AuditEntrySchema
from app.services.store import get_store_settings
from nightclub import business_date, calculate_work_minutes, month_bounds, summarize_month
from nightclub.worktime import as_utc

logger = logging.getLogger(__name__)

# Records that count toward worked time; open and rejected shifts do not.
COUNTED_STATUSES = (AttendanceStatus.CLOSED, AttendanceStatus.APPROVED)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value is not None else None


def _append_audit(
    record: StaffAttendanceRecord, user_id: str, action: str, diff: dict[str, Any] | None = None
) -> None:
    entry: dict[str, Any] = {"at": _now().isoformat(), "user_id": user_id, "action": action}
    if diff:
        entry["diff"] = diff
    # Reassign so the JSON column is flagged dirty.
    record.audit = [*(record.audit or []), entry]


def serialize_record(record: StaffAttendanceRecord) -> AttendanceRecordSchema:
    return AttendanceRecordSchema(
        id=record.id,
        staff_id=record.staff_id,
        business_date=record.business_date,
        check_in_at=as_utc(record.check_in_at) if record.check_in_at else None,
        check_out_at=as_utc(record.check_out_at) if record.check_out_at else None,
        status=record.status,
        reason=record.reason,
        note=record.note,
        work_minutes=calculate_work_minutes(record.check_in_at, record.check_out_at),
        audit=[AuditEntrySchema.model_validate(entry) for entry in record.audit or []],
    )


def serialize_request(request: AttendanceRequest) -> EditRequestSchema:
    return EditRequestSchema(
        id=request.id,
        record_id=request.record_id,
        staff_id=request.staff_id,
        payload=request.payload,
        status=request.status,
        comment=request.comment,
        created_at=as_utc(request.created_at),
        decided_at=as_utc(request.decided_at) if request.decided_at else None,
        decided_by=request.decided_by,
    )


async def get_staff_or_404(session: AsyncSession, staff_id: int) -> Staff:
    staff = await session.get(Staff, staff_id)
    if staff is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Staff not found: {staff_id}")
    return staff


async def get_staff_by_token(session: AsyncSession, token: str) -> Staff:
    stmt = select(Staff).where(Staff.punch_token == token, Staff.active.is_(True))
    staff = (await session.execute(stmt)).scalar_one_or_none()
    if staff is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown or inactive punch token")
    return staff


async def _open_record(session: AsyncSession, staff_id: int) -> StaffAttendanceRecord | None:
    stmt = (
        select(StaffAttendanceRecord)
        .where(
            StaffAttendanceRecord.staff_id == staff_id,
            StaffAttendanceRecord.status == AttendanceStatus.OPEN,
        )
        .order_by(StaffAttendanceRecord.check_in_at.desc())
        .limit(1)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def punch_in(
    session: AsyncSession, payload: PunchInRequest, now: datetime | None = None
) -> StaffAttendanceRecord:
    staff = await get_staff_by_token(session, payload.token)
    if await _open_record(session, staff.id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Staff {staff.id} is already checked in",
        )

    store = await get_store_settings(session)
    moment = as_utc(now) if now else _now()
    record = StaffAttendanceRecord(
        staff_id=staff.id,
        business_date=business_date(moment, store.timezone, get_settings().business_day_start_hour),
        check_in_at=moment,
        status=AttendanceStatus.OPEN,
        reason=payload.reason,
        note=payload.note,
        audit=[],
    )
    _append_audit(record, f"staff:{staff.id}", "check_in")
    session.add(record)
    await session.commit()
    logger.info("Staff %s checked in for %s", staff.id, record.business_date)
    return record


async def punch_out(
    session: AsyncSession, payload: PunchOutRequest, now: datetime | None = None
) -> StaffAttendanceRecord:
    staff = await get_staff_by_token(session, payload.token)
    record = await _open_record(session, staff.id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Staff {staff.id} has no open attendance record",
        )

    moment = as_utc(now) if now else _now()
    if record.check_in_at is not None and moment < as_utc(record.check_in_at):
        moment = as_utc(record.check_in_at)
    record.check_out_at = moment
    record.status = AttendanceStatus.CLOSED
    if payload.note:
        record.note = payload.note
    _append_audit(record, f"staff:{staff.id}", "check_out")
    await session.commit()
    logger.info("Staff %s checked out after %d minutes", staff.id, calculate_work_minutes(record.check_in_at, moment))
    return record


async def list_today(session: AsyncSession) -> list[StaffAttendanceRecord]:
    store = await get_store_settings(session)
    today = business_date(_now(), store.timezone, get_settings().business_day_start_hour)
    stmt = (
        select(StaffAttendanceRecord)
        .where(StaffAttendanceRecord.business_date == today)
        .order_by(StaffAttendanceRecord.check_in_at)
    )
    return list((await session.execute(stmt)).scalars().all())


def _parse_month(month: str) -> tuple[date, date]:
    try:
        return month_bounds(month)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


async def list_month(
    session: AsyncSession,
    month: str,
    *,
    staff_id: int | None = None,
    counted_only: bool = False,
) -> list[StaffAttendanceRecord]:
    start, end = _parse_month(month)
    stmt: Select = select(StaffAttendanceRecord).where(
        StaffAttendanceRecord.business_date >= start,
        StaffAttendanceRecord.business_date < end,
    )
    if staff_id is not None:
        stmt = stmt.where(StaffAttendanceRecord.staff_id == staff_id)
    if counted_only:
        stmt = stmt.where(StaffAttendanceRecord.status.in_(COUNTED_STATUSES))
    stmt = stmt.order_by(StaffAttendanceRecord.business_date, StaffAttendanceRecord.check_in_at)
    return list((await session.execute(stmt)).scalars().all())


async def monthly_stats(session: AsyncSession, staff_id: int, month: str) -> MonthlyStatsSchema:
    await get_staff_or_404(session, staff_id)
    records = await list_month(session, month, staff_id=staff_id, counted_only=True)
    stats = summarize_month(records)
    return MonthlyStatsSchema(
        staff_id=staff_id,
        month=month,
        total_minutes=stats.total_minutes,
        work_days=stats.work_days,
    )


async def _get_record_or_404(session: AsyncSession, record_id: int) -> StaffAttendanceRecord:
    record = await session.get(StaffAttendanceRecord, record_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Attendance record not found: {record_id}"
        )
    return record


async def decide_record(
    session: AsyncSession, record_id: int, approver_user_id: str, *, approve: bool
) -> StaffAttendanceRecord:
    record = await _get_record_or_404(session, record_id)
    if record.status == AttendanceStatus.OPEN:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Attendance record {record_id} is still open",
        )
    record.status = AttendanceStatus.APPROVED if approve else AttendanceStatus.REJECTED
    _append_audit(record, approver_user_id, "approve" if approve else "reject")
    await session.commit()
    return record


async def create_edit_request(session: AsyncSession, payload: EditRequestCreate) -> AttendanceRequest:
    record = await _get_record_or_404(session, payload.record_id)
    if record.staff_id != payload.staff_id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Attendance record {record.id} does not belong to staff {payload.staff_id}",
        )
    request = AttendanceRequest(
        record_id=record.id,
        staff_id=payload.staff_id,
        payload=payload.payload.model_dump(mode="json", exclude_unset=True),
        status=RequestStatus.PENDING,
    )
    session.add(request)
    await session.commit()
    return request


async def list_requests(
    session: AsyncSession, status_filter: RequestStatus | None = None
) -> list[AttendanceRequest]:
    stmt: Select = select(AttendanceRequest)
    if status_filter is not None:
        stmt = stmt.where(AttendanceRequest.status == status_filter)
    stmt = stmt.order_by(AttendanceRequest.created_at.desc(), AttendanceRequest.id.desc())
    return list((await session.execute(stmt)).scalars().all())


def _apply_edit(
    record: StaffAttendanceRecord, edit: AttendanceEditPayload, approver_user_id: str, tz: str
) -> None:
    diff: dict[str, Any] = {}
    for field in edit.model_fields_set:
        new_value = getattr(edit, field)
        old_value = getattr(record, field)
        if isinstance(new_value, datetime):
            new_value = as_utc(new_value)
            if old_value is not None and as_utc(old_value) == new_value:
                continue
            diff[field] = {"from": _iso(old_value), "to": _iso(new_value)}
        else:
            if old_value == new_value:
                continue
            diff[field] = {
                "from": getattr(old_value, "value", old_value),
                "to": getattr(new_value, "value", new_value),
            }
        setattr(record, field, new_value)

    check_in, check_out = record.check_in_at, record.check_out_at
    if check_in is not None and check_out is not None and as_utc(check_out) < as_utc(check_in):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Edit would place check-out before check-in",
        )
    if "check_in_at" in diff and check_in is not None:
        record.business_date = business_date(check_in, tz, get_settings().business_day_start_hour)
    if check_out is not None and record.status == AttendanceStatus.OPEN:
        record.status = AttendanceStatus.CLOSED
    _append_audit(record, approver_user_id, "edited", diff)


async def decide_request(
    session: AsyncSession,
    request_id: int,
    approver_user_id: str,
    *,
    approve: bool,
    comment: str | None = None,
) -> AttendanceRequest:
    """Approve (applying the requested edit) or reject a pending edit request."""

    request = await session.get(AttendanceRequest, request_id)
    if request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Request not found: {request_id}")
    if request.status != RequestStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Request {request_id} has already been {request.status.value}",
        )

    if approve:
        record = await _get_record_or_404(session, request.record_id)
        store = await get_store_settings(session)
        edit = AttendanceEditPayload.model_validate(request.payload)
        _apply_edit(record, edit, approver_user_id, store.timezone)

    request.status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
    request.comment = comment
    request.decided_at = _now()
    request.decided_by = approver_user_id
    await session.commit()
    logger.info("Edit request %s %s by %s", request_id, request.status.value, approver_user_id)
    return request


__all__ = [
    "COUNTED_STATUSES",
    "create_edit_request",
    "decide_record",
    "decide_request",
    "get_staff_by_token",
    "get_staff_or_404",
    "list_month",
    "list_requests",
    "list_today",
    "monthly_stats",
    "punch_in",
    "punch_out",
    "serialize_record",
    "serialize_request",
]
