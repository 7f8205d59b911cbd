"""Store-wide pricing and business-hour settings."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoreSettings(Base):
    __tablename__ = "store_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    organization_name: Mapped[str] = mapped_column(String(128))
    tax_rate_percent: Mapped[Decimal] = mapped_column(Numeric(6, 3))
    service_charge_rate_percent: Mapped[Decimal] = mapped_column(Numeric(6, 3))
    charge_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    charge_fixed: Mapped[Decimal] = mapped_column(Numeric(18, 4))
    currency: Mapped[str] = mapped_column(String(3), default="JPY")
    timezone: Mapped[str] = mapped_column(String(64), default="Asia/Tokyo")
    open_time: Mapped[str] = mapped_column(String(5), default="20:00")
    close_time: Mapped[str] = mapped_column(String(5), default="03:00")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


__all__ = ["StoreSettings"]
