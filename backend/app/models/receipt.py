"""Receipt, receipt line and staff back-assignment models."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.menu import MenuCategory, _enum_values


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaymentMethod(str, enum.Enum):
    CASH = "Cash"
    CARD = "Card"
    QR = "QR"
    OTHER = "Other"


class ReceiptStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    PAID = "paid"


class AssignmentType(str, enum.Enum):
    DRINK_BACK = "drink_back"
    RECEIPT_BACK = "receipt_back"


class Receipt(Base):
    __tablename__ = "receipt"
    __table_args__ = (Index("ix_receipt_status_issued", "status", "issued_at"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, name="payment_method", values_callable=_enum_values)
    )
    discount: Mapped[Decimal] = mapped_column(Numeric(18, 4), default=0)
    service_charge_rate_percent: Mapped[Decimal] = mapped_column(Numeric(6, 3))
    charge_enabled: Mapped[bool] = mapped_column(Boolean)
    charge_fixed: Mapped[Decimal] = mapped_column(Numeric(18, 4))
    tax_rate_percent: Mapped[Decimal] = mapped_column(Numeric(6, 3))
    status: Mapped[ReceiptStatus] = mapped_column(
        Enum(ReceiptStatus, name="receipt_status", values_callable=_enum_values),
        default=ReceiptStatus.ACTIVE,
    )
    note: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # Stored totals, overwritten whenever the receipt is edited.
    subtotal: Mapped[Decimal] = mapped_column(Numeric(18, 6))
    discount_applied: Mapped[Decimal] = mapped_column(Numeric(18, 6))
    service_charge: Mapped[Decimal] = mapped_column(Numeric(18, 6))
    charge_fixed_applied: Mapped[Decimal] = mapped_column(Numeric(18, 6))
    total_raw: Mapped[Decimal] = mapped_column(Numeric(18, 6))
    total: Mapped[int] = mapped_column(Integer)
    tax_included: Mapped[int] = mapped_column(Integer)

    items: Mapped[list["ReceiptItem"]] = relationship(
        back_populates="receipt",
        cascade="all, delete-orphan",
        order_by="ReceiptItem.position",
        lazy="selectin",
    )
    assignments: Mapped[list["ReceiptAssignment"]] = relationship(
        back_populates="receipt",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ReceiptItem(Base):
    __tablename__ = "receipt_item"

    id: Mapped[int] = mapped_column(primary_key=True)
    receipt_id: Mapped[str] = mapped_column(ForeignKey("receipt.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)
    name: Mapped[str] = mapped_column(String(128))
    category: Mapped[MenuCategory] = mapped_column(
        Enum(MenuCategory, name="item_category", values_callable=_enum_values)
    )
    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 4))
    qty: Mapped[int] = mapped_column(Integer)

    receipt: Mapped[Receipt] = relationship(back_populates="items")


class ReceiptAssignment(Base):
    __tablename__ = "receipt_assignment"
    __table_args__ = (Index("ix_receipt_assignment_staff", "staff_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    receipt_id: Mapped[str] = mapped_column(ForeignKey("receipt.id", ondelete="CASCADE"), index=True)
    staff_id: Mapped[int] = mapped_column(ForeignKey("staff.id", ondelete="CASCADE"))
    type: Mapped[AssignmentType] = mapped_column(
        Enum(AssignmentType, name="assignment_type", values_callable=_enum_values)
    )

    receipt: Mapped[Receipt] = relationship(back_populates="assignments")


__all__ = [
    "AssignmentType",
    "PaymentMethod",
    "Receipt",
    "ReceiptAssignment",
    "ReceiptItem",
    "ReceiptStatus",
]
