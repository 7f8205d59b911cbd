"""Endpoints for shift wish sheets and monthly shift plans."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import invalid_input
from app.db.session import get_db
from app.models import ShiftPlan, ShiftWish
from app.schemas import ShiftPlanRequest, ShiftPlanSchema, ShiftWishRequest, ShiftWishSchema
from app.services.staff_attendance import get_staff_or_404
from nightclub import month_bounds

router = APIRouter()

_MONTH = r"^\d{4}-(0[1-9]|1[0-2])$"


def _ensure_in_month(month: str, field: str, dates: Iterable[date]) -> None:
    try:
        start, end = month_bounds(month)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    errors = [
        {"loc": [field, index, "date"], "msg": f"Date {day.isoformat()} is outside {month}", "type": "value_error"}
        for index, day in enumerate(dates)
        if not start <= day < end
    ]
    if errors:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=invalid_input(errors))


def _serialize_wish(wish: ShiftWish) -> ShiftWishSchema:
    return ShiftWishSchema(id=wish.id, staff_id=wish.staff_id, month=wish.month, wishes=wish.wishes)


def _serialize_plan(plan: ShiftPlan) -> ShiftPlanSchema:
    return ShiftPlanSchema(
        id=plan.id, month=plan.month, assignments=plan.assignments, published=plan.published
    )


@router.put("/wishes", response_model=ShiftWishSchema)
async def upsert_wishes(payload: ShiftWishRequest, session: AsyncSession = Depends(get_db)) -> ShiftWishSchema:
    await get_staff_or_404(session, payload.staff_id)
    _ensure_in_month(payload.month, "wishes", (entry.date for entry in payload.wishes))

    stmt = select(ShiftWish).where(ShiftWish.staff_id == payload.staff_id, ShiftWish.month == payload.month)
    wish = (await session.execute(stmt)).scalar_one_or_none()
    if wish is None:
        wish = ShiftWish(staff_id=payload.staff_id, month=payload.month)
        session.add(wish)
    wish.wishes = [entry.model_dump(mode="json") for entry in payload.wishes]
    await session.commit()
    return _serialize_wish(wish)


@router.get("/wishes", response_model=list[ShiftWishSchema])
async def list_wishes(
    month: str = Query(..., pattern=_MONTH),
    session: AsyncSession = Depends(get_db),
) -> list[ShiftWishSchema]:
    stmt = select(ShiftWish).where(ShiftWish.month == month).order_by(ShiftWish.staff_id)
    result = await session.execute(stmt)
    return [_serialize_wish(wish) for wish in result.scalars().all()]


@router.put("/plans/{month}", response_model=ShiftPlanSchema)
async def upsert_plan(
    payload: ShiftPlanRequest,
    month: str = Path(..., pattern=_MONTH),
    session: AsyncSession = Depends(get_db),
) -> ShiftPlanSchema:
    _ensure_in_month(month, "assignments", (assignment.date for assignment in payload.assignments))

    plan = (await session.execute(select(ShiftPlan).where(ShiftPlan.month == month))).scalar_one_or_none()
    if plan is None:
        plan = ShiftPlan(month=month, published=False)
        session.add(plan)
    plan.assignments = [assignment.model_dump(mode="json") for assignment in payload.assignments]
    if payload.published is not None:
        plan.published = payload.published
    await session.commit()
    return _serialize_plan(plan)


@router.get("/plans/{month}", response_model=ShiftPlanSchema)
async def get_plan(
    month: str = Path(..., pattern=_MONTH), session: AsyncSession = Depends(get_db)
) -> ShiftPlanSchema:
    plan = (await session.execute(select(ShiftPlan).where(ShiftPlan.month == month))).scalar_one_or_none()
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Shift plan not found: {month}")
    return _serialize_plan(plan)


__all__ = ["router"]
