"""Endpoints for store-wide pricing and business-hour settings."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas import StoreSettingsSchema, StoreSettingsUpdateRequest
from app.services.store import get_store_settings, serialize_store_settings, update_store_settings

router = APIRouter()


@router.get("", response_model=StoreSettingsSchema)
async def read_settings(session: AsyncSession = Depends(get_db)) -> StoreSettingsSchema:
    return serialize_store_settings(await get_store_settings(session))


@router.patch("", response_model=StoreSettingsSchema)
async def patch_settings(
    payload: StoreSettingsUpdateRequest, session: AsyncSession = Depends(get_db)
) -> StoreSettingsSchema:
    return serialize_store_settings(await update_store_settings(session, payload))


__all__ = ["router"]
