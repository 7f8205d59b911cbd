"""Endpoints for the staff punch clock and attendance review."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models import RequestStatus
from app.schemas import (
    AttendanceRecordSchema,
    EditRequestCreate,
    EditRequestSchema,
    MonthlyStatsSchema,
    PunchInRequest,
    PunchOutRequest,
    RecordDecisionRequest,
    RequestDecisionRequest,
)
from app.services import staff_attendance as attendance_service

router = APIRouter()

_MONTH = r"^\d{4}-(0[1-9]|1[0-2])$"


@router.post("/check-in", response_model=AttendanceRecordSchema, status_code=status.HTTP_201_CREATED)
async def check_in(payload: PunchInRequest, session: AsyncSession = Depends(get_db)) -> AttendanceRecordSchema:
    record = await attendance_service.punch_in(session, payload)
    return attendance_service.serialize_record(record)


@router.post("/check-out", response_model=AttendanceRecordSchema)
async def check_out(payload: PunchOutRequest, session: AsyncSession = Depends(get_db)) -> AttendanceRecordSchema:
    record = await attendance_service.punch_out(session, payload)
    return attendance_service.serialize_record(record)


@router.get("/today", response_model=list[AttendanceRecordSchema])
async def list_today(session: AsyncSession = Depends(get_db)) -> list[AttendanceRecordSchema]:
    records = await attendance_service.list_today(session)
    return [attendance_service.serialize_record(record) for record in records]


@router.get("", response_model=list[AttendanceRecordSchema])
async def list_month(
    month: str = Query(..., pattern=_MONTH, examples=["2025-09"]),
    session: AsyncSession = Depends(get_db),
) -> list[AttendanceRecordSchema]:
    records = await attendance_service.list_month(session, month)
    return [attendance_service.serialize_record(record) for record in records]


@router.get("/staff/{staff_id}", response_model=list[AttendanceRecordSchema])
async def list_staff_month(
    staff_id: int,
    month: str = Query(..., pattern=_MONTH),
    session: AsyncSession = Depends(get_db),
) -> list[AttendanceRecordSchema]:
    await attendance_service.get_staff_or_404(session, staff_id)
    records = await attendance_service.list_month(session, month, staff_id=staff_id)
    return [attendance_service.serialize_record(record) for record in records]


@router.get("/staff/{staff_id}/stats", response_model=MonthlyStatsSchema)
async def staff_month_stats(
    staff_id: int,
    month: str = Query(..., pattern=_MONTH),
    session: AsyncSession = Depends(get_db),
) -> MonthlyStatsSchema:
    return await attendance_service.monthly_stats(session, staff_id, month)


@router.post("/records/{record_id}/approve", response_model=AttendanceRecordSchema)
async def approve_record(
    record_id: int, payload: RecordDecisionRequest, session: AsyncSession = Depends(get_db)
) -> AttendanceRecordSchema:
    record = await attendance_service.decide_record(
        session, record_id, payload.approver_user_id, approve=True
    )
    return attendance_service.serialize_record(record)


@router.post("/records/{record_id}/reject", response_model=AttendanceRecordSchema)
async def reject_record(
    record_id: int, payload: RecordDecisionRequest, session: AsyncSession = Depends(get_db)
) -> AttendanceRecordSchema:
    record = await attendance_service.decide_record(
        session, record_id, payload.approver_user_id, approve=False
    )
    return attendance_service.serialize_record(record)


@router.post("/requests", response_model=EditRequestSchema, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: EditRequestCreate, session: AsyncSession = Depends(get_db)
) -> EditRequestSchema:
    request = await attendance_service.create_edit_request(session, payload)
    return attendance_service.serialize_request(request)


@router.get("/requests", response_model=list[EditRequestSchema])
async def list_requests(
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_db),
) -> list[EditRequestSchema]:
    requests = await attendance_service.list_requests(session, status_filter)
    return [attendance_service.serialize_request(request) for request in requests]


@router.post("/requests/{request_id}/approve", response_model=EditRequestSchema)
async def approve_request(
    request_id: int, payload: RequestDecisionRequest, session: AsyncSession = Depends(get_db)
) -> EditRequestSchema:
    request = await attendance_service.decide_request(
        session, request_id, payload.approver_user_id, approve=True, comment=payload.comment
    )
    return attendance_service.serialize_request(request)


@router.post("/requests/{request_id}/reject", response_model=EditRequestSchema)
async def reject_request(
    request_id: int, payload: RequestDecisionRequest, session: AsyncSession = Depends(get_db)
) -> EditRequestSchema:
    request = await attendance_service.decide_request(
        session, request_id, payload.approver_user_id, approve=False, comment=payload.comment
    )
    return attendance_service.serialize_request(request)


__all__ = ["router"]
