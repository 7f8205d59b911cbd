"""Endpoints for issuing, editing and settling receipts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models import ReceiptStatus
from app.schemas import (
    BatchReceiptResult,
    ReceiptAssignmentRequest,
    ReceiptCreateRequest,
    ReceiptPreviewRequest,
    ReceiptSchema,
    ReceiptTotalsSchema,
    ReceiptUpdateRequest,
)
from app.services import receipts as receipt_service

router = APIRouter()


@router.post("/preview", response_model=ReceiptTotalsSchema)
async def preview_receipt(
    payload: ReceiptPreviewRequest, session: AsyncSession = Depends(get_db)
) -> ReceiptTotalsSchema:
    """Price an unsaved draft without persisting anything."""

    return await receipt_service.preview_totals(session, payload)


@router.post("/batch", response_model=list[BatchReceiptResult])
async def batch_receipts(
    ops: list[Any] = Body(..., description="Operations tagged by 'op': create, update or cancel"),
    session: AsyncSession = Depends(get_db),
) -> list[BatchReceiptResult]:
    return await receipt_service.run_batch(session, ops)


@router.get("", response_model=list[ReceiptSchema])
async def list_receipts(
    status_filter: ReceiptStatus | None = Query(default=None, alias="status"),
    issued_from: datetime | None = Query(default=None, alias="from"),
    issued_to: datetime | None = Query(default=None, alias="to"),
    session: AsyncSession = Depends(get_db),
) -> list[ReceiptSchema]:
    receipts = await receipt_service.list_receipts(
        session, status_filter=status_filter, issued_from=issued_from, issued_to=issued_to
    )
    return [receipt_service.serialize_receipt(receipt) for receipt in receipts]


@router.post("", response_model=ReceiptSchema, status_code=status.HTTP_201_CREATED)
async def create_receipt(
    payload: ReceiptCreateRequest, session: AsyncSession = Depends(get_db)
) -> ReceiptSchema:
    receipt = await receipt_service.create_receipt(session, payload)
    return receipt_service.serialize_receipt(receipt)


@router.get("/{receipt_id}", response_model=ReceiptSchema)
async def get_receipt(receipt_id: str, session: AsyncSession = Depends(get_db)) -> ReceiptSchema:
    receipt = await receipt_service.get_receipt_or_404(session, receipt_id)
    return receipt_service.serialize_receipt(receipt)


@router.patch("/{receipt_id}", response_model=ReceiptSchema)
async def update_receipt(
    receipt_id: str, payload: ReceiptUpdateRequest, session: AsyncSession = Depends(get_db)
) -> ReceiptSchema:
    receipt = await receipt_service.update_receipt(session, receipt_id, payload)
    return receipt_service.serialize_receipt(receipt)


@router.post("/{receipt_id}/cancel", response_model=ReceiptSchema)
async def cancel_receipt(receipt_id: str, session: AsyncSession = Depends(get_db)) -> ReceiptSchema:
    receipt = await receipt_service.cancel_receipt(session, receipt_id)
    return receipt_service.serialize_receipt(receipt)


@router.post("/{receipt_id}/pay", response_model=ReceiptSchema)
async def pay_receipt(receipt_id: str, session: AsyncSession = Depends(get_db)) -> ReceiptSchema:
    receipt = await receipt_service.mark_paid(session, receipt_id)
    return receipt_service.serialize_receipt(receipt)


@router.post(
    "/{receipt_id}/assignments",
    response_model=ReceiptSchema,
    status_code=status.HTTP_201_CREATED,
)
async def assign_staff(
    receipt_id: str, payload: ReceiptAssignmentRequest, session: AsyncSession = Depends(get_db)
) -> ReceiptSchema:
    receipt = await receipt_service.assign_staff(session, receipt_id, payload)
    return receipt_service.serialize_receipt(receipt)


__all__ = ["router"]
