"""Endpoints for the staff roster."""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models import Staff
from app.schemas import StaffCreateRequest, StaffSchema
from app.services.staff_attendance import get_staff_by_token, get_staff_or_404

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize(staff: Staff) -> StaffSchema:
    return StaffSchema(
        id=staff.id,
        name=staff.name,
        role=staff.role,
        punch_token=staff.punch_token,
        active=staff.active,
        email=staff.email,
    )


@router.get("", response_model=list[StaffSchema])
async def list_staff(session: AsyncSession = Depends(get_db)) -> list[StaffSchema]:
    result = await session.execute(select(Staff).order_by(Staff.id))
    return [_serialize(staff) for staff in result.scalars().all()]


@router.post("", response_model=StaffSchema, status_code=status.HTTP_201_CREATED)
async def create_staff(payload: StaffCreateRequest, session: AsyncSession = Depends(get_db)) -> StaffSchema:
    token = payload.punch_token or secrets.token_urlsafe(12)
    existing = await session.execute(select(Staff.id).where(Staff.punch_token == token))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Punch token already in use")

    staff = Staff(
        name=payload.name.strip(),
        role=payload.role,
        punch_token=token,
        active=payload.active,
        email=payload.email,
    )
    session.add(staff)
    await session.commit()
    logger.info("Registered staff %s (%s)", staff.id, staff.name)
    return _serialize(staff)


@router.get("/by-token/{token}", response_model=StaffSchema)
async def get_staff_for_token(token: str, session: AsyncSession = Depends(get_db)) -> StaffSchema:
    return _serialize(await get_staff_by_token(session, token))


@router.get("/{staff_id}", response_model=StaffSchema)
async def get_staff(staff_id: int, session: AsyncSession = Depends(get_db)) -> StaffSchema:
    return _serialize(await get_staff_or_404(session, staff_id))


__all__ = ["router"]
