"""Pydantic schemas for dashboard KPIs."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel

KPIGranularity = Literal["day", "week", "month"]


class KPIDataSchema(BaseModel):
    date: date
    sales: int
    customer_count: int
    avg_spend: int


class KPITotalsSchema(BaseModel):
    total_sales: int
    total_customers: int
    avg_spend_overall: int


class DashboardKPIResponse(BaseModel):
    granularity: KPIGranularity
    from_date: date
    to_date: date
    data: list[KPIDataSchema]
    totals: KPITotalsSchema


class TodaySummarySchema(BaseModel):
    business_date: date
    sales: int
    receipt_count: int
    customer_count: int
    avg_spend: int
    guests_in_house: int


__all__ = [
    "DashboardKPIResponse",
    "KPIDataSchema",
    "KPIGranularity",
    "KPITotalsSchema",
    "TodaySummarySchema",
]
