"""Menu catalogue model."""

from __future__ import annotations

import enum
from decimal import Decimal

from sqlalchemy import Boolean, Enum, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class MenuCategory(str, enum.Enum):
    SET = "set"
    BOTTLE = "bottle"
    NOMINATION = "nomination"
    ITEM = "item"
    OTHER = "other"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class MenuItem(Base):
    __tablename__ = "menu_item"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(128))
    category: Mapped[MenuCategory] = mapped_column(
        Enum(MenuCategory, name="menu_category", values_callable=_enum_values)
    )
    price: Mapped[Decimal] = mapped_column(Numeric(18, 4))
    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)


__all__ = ["MenuCategory", "MenuItem"]
