"""Pydantic schemas for shift wishes and shift plans."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

_MONTH = r"^\d{4}-(0[1-9]|1[0-2])$"
_HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"


class ShiftWishEntry(BaseModel):
    date: date
    available: bool
    memo: str | None = Field(default=None, max_length=256)


class ShiftWishRequest(BaseModel):
    staff_id: int
    month: str = Field(..., pattern=_MONTH, examples=["2025-09"])
    wishes: list[ShiftWishEntry]


class ShiftWishSchema(BaseModel):
    id: int
    staff_id: int
    month: str
    wishes: list[ShiftWishEntry]


class ShiftAssignment(BaseModel):
    date: date
    staff_id: int
    start: str | None = Field(default=None, pattern=_HHMM)
    end: str | None = Field(default=None, pattern=_HHMM)
    memo: str | None = Field(default=None, max_length=256)


class ShiftPlanRequest(BaseModel):
    assignments: list[ShiftAssignment]
    published: bool | None = None


class ShiftPlanSchema(BaseModel):
    id: int
    month: str
    assignments: list[ShiftAssignment]
    published: bool


__all__ = [
    "ShiftAssignment",
    "ShiftPlanRequest",
    "ShiftPlanSchema",
    "ShiftWishEntry",
    "ShiftWishRequest",
    "ShiftWishSchema",
]
