"""Pydantic schemas for store settings."""

from __future__ import annotations

from pydantic import BaseModel, Field

_HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"


class StoreSettingsSchema(BaseModel):
    organization_name: str
    tax_rate_percent: float
    service_charge_rate_percent: float
    charge_enabled: bool
    charge_fixed: float
    currency: str
    timezone: str
    open_time: str
    close_time: str


class StoreSettingsUpdateRequest(BaseModel):
    organization_name: str | None = Field(default=None, min_length=1, max_length=128)
    tax_rate_percent: float | None = Field(default=None, ge=0, le=100)
    service_charge_rate_percent: float | None = Field(default=None, ge=0, le=100)
    charge_enabled: bool | None = None
    charge_fixed: float | None = Field(default=None, ge=0)
    open_time: str | None = Field(default=None, pattern=_HHMM, examples=["20:00"])
    close_time: str | None = Field(default=None, pattern=_HHMM, examples=["03:00"])


__all__ = ["StoreSettingsSchema", "StoreSettingsUpdateRequest"]
