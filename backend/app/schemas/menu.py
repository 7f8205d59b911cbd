"""Pydantic schemas for menu management."""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.models.menu import MenuCategory


class MenuItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    category: MenuCategory
    price: float = Field(..., ge=0, description="Tax-inclusive price")
    active: bool = True


class MenuItemUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    category: MenuCategory | None = None
    price: float | None = Field(default=None, ge=0)
    active: bool | None = None


class MenuToggleRequest(BaseModel):
    active: bool


class MenuItemSchema(BaseModel):
    id: str
    name: str
    category: MenuCategory
    price: float
    active: bool


class MenuDeleteResponse(BaseModel):
    id: str


__all__ = [
    "MenuDeleteResponse",
    "MenuItemCreateRequest",
    "MenuItemSchema",
    "MenuItemUpdateRequest",
    "MenuToggleRequest",
]
