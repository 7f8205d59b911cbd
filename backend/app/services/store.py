"""Store settings persistence."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models import StoreSettings
from app.schemas import StoreSettingsSchema, StoreSettingsUpdateRequest

logger = logging.getLogger(__name__)


async def get_store_settings(session: AsyncSession) -> StoreSettings:
    """Return the single settings row, seeding it from configuration on first use."""

    row = (await session.execute(select(StoreSettings).order_by(StoreSettings.id).limit(1))).scalar_one_or_none()
    if row is not None:
        return row

    settings = get_settings()
    row = StoreSettings(
        organization_name=settings.organization_name,
        tax_rate_percent=Decimal(str(settings.tax_rate_percent)),
        service_charge_rate_percent=Decimal(str(settings.service_charge_rate_percent)),
        charge_enabled=settings.charge_enabled,
        charge_fixed=Decimal(str(settings.charge_fixed)),
        currency=settings.currency,
        timezone=settings.timezone,
        open_time=settings.business_open_time,
        close_time=settings.business_close_time,
    )
    session.add(row)
    await session.commit()
    logger.info("Seeded store settings for %s", row.organization_name)
    return row


async def update_store_settings(
    session: AsyncSession, payload: StoreSettingsUpdateRequest
) -> StoreSettings:
    row = await get_store_settings(session)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if isinstance(value, float):
            value = Decimal(str(value))
        setattr(row, field, value)
    await session.commit()
    return row


def serialize_store_settings(row: StoreSettings) -> StoreSettingsSchema:
    return StoreSettingsSchema(
        organization_name=row.organization_name,
        tax_rate_percent=float(row.tax_rate_percent),
        service_charge_rate_percent=float(row.service_charge_rate_percent),
        charge_enabled=row.charge_enabled,
        charge_fixed=float(row.charge_fixed),
        currency=row.currency,
        timezone=row.timezone,
        open_time=row.open_time,
        close_time=row.close_time,
    )


__all__ = ["get_store_settings", "serialize_store_settings", "update_store_settings"]
