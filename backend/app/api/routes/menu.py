"""Endpoints for maintaining the menu catalogue."""

from __future__ import annotations

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models import MenuItem
from app.schemas import (
    MenuDeleteResponse,
    MenuItemCreateRequest,
    MenuItemSchema,
    MenuItemUpdateRequest,
    MenuToggleRequest,
)
from nightclub import generate_menu_id

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize(item: MenuItem) -> MenuItemSchema:
    return MenuItemSchema(
        id=item.id,
        name=item.name,
        category=item.category,
        price=float(item.price),
        active=item.active,
    )


async def _get_or_404(session: AsyncSession, item_id: str) -> MenuItem:
    item = await session.get(MenuItem, item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"MenuItem not found: {item_id}")
    return item


@router.get("", response_model=list[MenuItemSchema])
async def list_menu(
    active: bool | None = Query(default=None, description="Only active (true) or inactive (false) entries"),
    session: AsyncSession = Depends(get_db),
) -> list[MenuItemSchema]:
    stmt: Select = select(MenuItem)
    if active is not None:
        stmt = stmt.where(MenuItem.active.is_(active))
    stmt = stmt.order_by(MenuItem.category, MenuItem.name)
    result = await session.execute(stmt)
    return [_serialize(item) for item in result.scalars().all()]


@router.post("", response_model=MenuItemSchema, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    payload: MenuItemCreateRequest, session: AsyncSession = Depends(get_db)
) -> MenuItemSchema:
    item = MenuItem(
        id=generate_menu_id(),
        name=payload.name.strip(),
        category=payload.category,
        price=Decimal(str(payload.price)),
        active=payload.active,
    )
    session.add(item)
    await session.commit()
    logger.info("Added menu item %s (%s)", item.id, item.name)
    return _serialize(item)


@router.patch("/{item_id}", response_model=MenuItemSchema)
async def update_menu_item(
    item_id: str, payload: MenuItemUpdateRequest, session: AsyncSession = Depends(get_db)
) -> MenuItemSchema:
    item = await _get_or_404(session, item_id)
    if payload.name is not None:
        item.name = payload.name.strip()
    if payload.category is not None:
        item.category = payload.category
    if payload.price is not None:
        item.price = Decimal(str(payload.price))
    if payload.active is not None:
        item.active = payload.active
    await session.commit()
    return _serialize(item)


@router.post("/{item_id}/toggle", response_model=MenuItemSchema)
async def toggle_menu_item(
    item_id: str, payload: MenuToggleRequest, session: AsyncSession = Depends(get_db)
) -> MenuItemSchema:
    item = await _get_or_404(session, item_id)
    item.active = payload.active
    await session.commit()
    return _serialize(item)


@router.delete("/{item_id}", response_model=MenuDeleteResponse)
async def delete_menu_item(item_id: str, session: AsyncSession = Depends(get_db)) -> MenuDeleteResponse:
    item = await _get_or_404(session, item_id)
    await session.delete(item)
    await session.commit()
    logger.info("Deleted menu item %s", item_id)
    return MenuDeleteResponse(id=item_id)


__all__ = ["router"]
