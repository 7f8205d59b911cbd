"""Endpoints for guest check-in and check-out."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models import GuestVisit
from app.schemas import CheckInRequest, CurrentGuestsSchema, GuestVisitSchema
from app.services.store import get_store_settings
from nightclub import calculate_work_minutes, generate_visit_id
from nightclub.worktime import as_utc

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize(visit: GuestVisit, now: datetime | None = None) -> GuestVisitSchema:
    checked_out_at = as_utc(visit.checked_out_at) if visit.checked_out_at else None
    end = checked_out_at or now or datetime.now(timezone.utc)
    return GuestVisitSchema(
        id=visit.id,
        checked_in_at=as_utc(visit.checked_in_at),
        checked_out_at=checked_out_at,
        guest_count=visit.guest_count,
        note=visit.note,
        stay_minutes=max(calculate_work_minutes(visit.checked_in_at, end), 0),
    )


@router.get("", response_model=list[GuestVisitSchema])
async def list_visits(
    active_only: bool = Query(default=False, description="Only guests still in the club"),
    session: AsyncSession = Depends(get_db),
) -> list[GuestVisitSchema]:
    stmt: Select = select(GuestVisit)
    if active_only:
        stmt = stmt.where(GuestVisit.checked_out_at.is_(None))
    stmt = stmt.order_by(GuestVisit.checked_in_at.desc())
    result = await session.execute(stmt)
    now = datetime.now(timezone.utc)
    return [_serialize(visit, now) for visit in result.scalars().all()]


@router.get("/current", response_model=CurrentGuestsSchema)
async def current_guests(session: AsyncSession = Depends(get_db)) -> CurrentGuestsSchema:
    stmt = select(func.coalesce(func.sum(GuestVisit.guest_count), 0), func.count(GuestVisit.id)).where(
        GuestVisit.checked_out_at.is_(None)
    )
    guests, visits = (await session.execute(stmt)).one()
    return CurrentGuestsSchema(guest_count=int(guests), visits=int(visits))


@router.post("/check-in", response_model=GuestVisitSchema, status_code=status.HTTP_201_CREATED)
async def check_in(payload: CheckInRequest, session: AsyncSession = Depends(get_db)) -> GuestVisitSchema:
    store = await get_store_settings(session)
    now = datetime.now(timezone.utc)
    visit = GuestVisit(
        id=generate_visit_id(now.astimezone(ZoneInfo(store.timezone))),
        checked_in_at=now,
        guest_count=payload.guest_count,
        note=payload.note,
    )
    session.add(visit)
    await session.commit()
    logger.info("Checked in visit %s with %d guests", visit.id, visit.guest_count)
    return _serialize(visit, now)


@router.post("/{visit_id}/check-out", response_model=GuestVisitSchema)
async def check_out(visit_id: str, session: AsyncSession = Depends(get_db)) -> GuestVisitSchema:
    visit = await session.get(GuestVisit, visit_id)
    if visit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Visit not found: {visit_id}")
    if visit.checked_out_at is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=f"Visit {visit_id} is already checked out"
        )
    visit.checked_out_at = datetime.now(timezone.utc)
    await session.commit()
    logger.info("Checked out visit %s", visit_id)
    return _serialize(visit)


__all__ = ["router"]
