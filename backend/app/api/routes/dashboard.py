"""Endpoints for sales and customer KPIs."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.errors import invalid_input
from app.db.session import get_db
from app.schemas import DashboardKPIResponse, TodaySummarySchema
from app.schemas.dashboard import KPIGranularity
from app.services import dashboard as dashboard_service

router = APIRouter()

MIN_KPI_DATE = date(2000, 1, 1)
MAX_KPI_DATE = date(2999, 12, 31)
MAX_KPI_SPAN_DAYS = 3660


def _range_errors(start: date, end: date) -> list[dict[str, Any]]:
    errors: list[dict[str, Any]] = []
    for name, value in (("from", start), ("to", end)):
        if not MIN_KPI_DATE <= value <= MAX_KPI_DATE:
            errors.append(
                {
                    "loc": ["query", name],
                    "msg": f"'{name}' must be between {MIN_KPI_DATE} and {MAX_KPI_DATE}",
                    "type": "value_error",
                }
            )
    if errors:
        return errors
    if start > end:
        errors.append({"loc": ["query", "from"], "msg": "'from' must not be after 'to'", "type": "value_error"})
    elif (end - start).days > MAX_KPI_SPAN_DAYS:
        errors.append(
            {
                "loc": ["query", "to"],
                "msg": f"range must not exceed {MAX_KPI_SPAN_DAYS} days",
                "type": "value_error",
            }
        )
    return errors


@router.get("/kpi", response_model=DashboardKPIResponse)
async def kpi(
    granularity: KPIGranularity = Query(default="day"),
    start: date = Query(..., alias="from"),
    end: date = Query(..., alias="to"),
    session: AsyncSession = Depends(get_db),
) -> DashboardKPIResponse:
    errors = _range_errors(start, end)
    if errors:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=invalid_input(errors))
    return await dashboard_service.kpi(session, granularity, start, end)


@router.get("/today", response_model=TodaySummarySchema)
async def today(session: AsyncSession = Depends(get_db)) -> TodaySummarySchema:
    return await dashboard_service.today_summary(session)


__all__ = ["router"]
