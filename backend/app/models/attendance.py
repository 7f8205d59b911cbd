"""Guest visit (check-in / check-out) model."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class GuestVisit(Base):
    __tablename__ = "guest_visit"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    checked_in_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
    checked_out_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    guest_count: Mapped[int] = mapped_column(Integer)
    note: Mapped[str | None] = mapped_column(String(512), nullable=True)


__all__ = ["GuestVisit"]
