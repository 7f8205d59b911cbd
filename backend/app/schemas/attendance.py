"""Pydantic schemas for guest visits."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CheckInRequest(BaseModel):
    guest_count: int = Field(..., ge=1, le=100)
    note: str | None = Field(default=None, max_length=512)


class GuestVisitSchema(BaseModel):
    id: str
    checked_in_at: datetime
    checked_out_at: datetime | None = None
    guest_count: int
    note: str | None = None
    stay_minutes: int


class CurrentGuestsSchema(BaseModel):
    guest_count: int
    visits: int


__all__ = ["CheckInRequest", "CurrentGuestsSchema", "GuestVisitSchema"]
