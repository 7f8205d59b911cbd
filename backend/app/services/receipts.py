"""Receipt lifecycle: pricing, persistence and batch operations."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Sequence
from zoneinfo import ZoneInfo

from fastapi import HTTPException, status
from pydantic import TypeAdapter, ValidationError
from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import (
    Receipt,
    ReceiptAssignment,
    ReceiptItem,
    ReceiptStatus,
    Staff,
    StoreSettings,
)
from app.schemas import (
    BatchReceiptOp,
    BatchReceiptResult,
    ReceiptAssignmentRequest,
    ReceiptAssignmentSchema,
    ReceiptCreateRequest,
    ReceiptItemInput,
    ReceiptItemSchema,
    ReceiptPreviewRequest,
    ReceiptSchema,
    ReceiptTotalsSchema,
    ReceiptUpdateRequest,
)
from app.schemas.receipts import CancelReceiptOp, CreateReceiptOp, UpdateReceiptOp
from app.services.store import get_store_settings
from nightclub import LineItem, PricingParameters, TotalsResult, calc_receipt_totals, generate_receipt_id
from nightclub.worktime import as_utc

logger = logging.getLogger(__name__)

_BATCH_OP = TypeAdapter(BatchReceiptOp)
_OPS_REQUIRING_ID = ("update", "cancel")
_OPS_REQUIRING_PAYLOAD = ("create", "update")


def _dec(value: float | Decimal) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _price(
    items: Iterable[tuple[Decimal | float, int]],
    *,
    discount: Decimal | float,
    service_charge_rate_percent: Decimal | float,
    charge_enabled: bool,
    charge_fixed: Decimal | float,
    tax_rate_percent: Decimal | float,
) -> TotalsResult:
    return calc_receipt_totals(
        [LineItem.of(unit_price, qty) for unit_price, qty in items],
        PricingParameters(
            discount=_dec(discount),
            service_charge_rate_percent=_dec(service_charge_rate_percent),
            fixed_charge_enabled=charge_enabled,
            fixed_charge=_dec(charge_fixed),
            tax_rate_percent=_dec(tax_rate_percent),
        ),
    )


def _totals_schema(totals: TotalsResult) -> ReceiptTotalsSchema:
    return ReceiptTotalsSchema(
        subtotal=float(totals.subtotal),
        discount=float(totals.effective_discount),
        service_charge=float(totals.service_charge),
        charge_fixed=float(totals.fixed_charge),
        total_raw=float(totals.raw_total),
        total=totals.rounded_total,
        tax_included=totals.estimated_tax_portion,
    )


def _build_items(items: Sequence[ReceiptItemInput]) -> list[ReceiptItem]:
    return [
        ReceiptItem(
            position=position,
            name=item.name,
            category=item.category,
            unit_price=_dec(item.unit_price),
            qty=item.qty,
        )
        for position, item in enumerate(items)
    ]


def _reprice(receipt: Receipt) -> None:
    """Recompute and store totals from the receipt's own lines and parameters."""

    totals = _price(
        ((item.unit_price, item.qty) for item in receipt.items),
        discount=receipt.discount,
        service_charge_rate_percent=receipt.service_charge_rate_percent,
        charge_enabled=receipt.charge_enabled,
        charge_fixed=receipt.charge_fixed,
        tax_rate_percent=receipt.tax_rate_percent,
    )
    receipt.subtotal = totals.subtotal
    receipt.discount_applied = totals.effective_discount
    receipt.service_charge = totals.service_charge
    receipt.charge_fixed_applied = totals.fixed_charge
    receipt.total_raw = totals.raw_total
    receipt.total = totals.rounded_total
    receipt.tax_included = totals.estimated_tax_portion


def serialize_receipt(receipt: Receipt) -> ReceiptSchema:
    return ReceiptSchema(
        id=receipt.id,
        issued_at=as_utc(receipt.issued_at),
        items=[
            ReceiptItemSchema(
                id=item.id,
                name=item.name,
                category=item.category,
                unit_price=float(item.unit_price),
                qty=item.qty,
                amount=float(_dec(item.unit_price) * item.qty),
            )
            for item in receipt.items
        ],
        payment_method=receipt.payment_method,
        discount=float(receipt.discount),
        service_charge_rate_percent=float(receipt.service_charge_rate_percent),
        charge_enabled=receipt.charge_enabled,
        charge_fixed=float(receipt.charge_fixed),
        tax_rate_percent=float(receipt.tax_rate_percent),
        totals=ReceiptTotalsSchema(
            subtotal=float(receipt.subtotal),
            discount=float(receipt.discount_applied),
            service_charge=float(receipt.service_charge),
            charge_fixed=float(receipt.charge_fixed_applied),
            total_raw=float(receipt.total_raw),
            total=receipt.total,
            tax_included=receipt.tax_included,
        ),
        status=receipt.status,
        note=receipt.note,
        assignments=[
            ReceiptAssignmentSchema(id=assignment.id, staff_id=assignment.staff_id, type=assignment.type)
            for assignment in receipt.assignments
        ],
    )


async def _load(session: AsyncSession, receipt_id: str) -> Receipt | None:
    stmt = (
        select(Receipt)
        .where(Receipt.id == receipt_id)
        .execution_options(populate_existing=True)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def get_receipt_or_404(session: AsyncSession, receipt_id: str) -> Receipt:
    receipt = await _load(session, receipt_id)
    if receipt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Receipt not found: {receipt_id}")
    return receipt


def _ensure_not_cancelled(receipt: Receipt) -> None:
    if receipt.status == ReceiptStatus.CANCELLED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Receipt is cancelled: {receipt.id}",
        )


async def list_receipts(
    session: AsyncSession,
    *,
    status_filter: ReceiptStatus | None = None,
    issued_from: datetime | None = None,
    issued_to: datetime | None = None,
) -> list[Receipt]:
    stmt: Select = select(Receipt)
    if status_filter is not None:
        stmt = stmt.where(Receipt.status == status_filter)
    if issued_from is not None:
        stmt = stmt.where(Receipt.issued_at >= as_utc(issued_from))
    if issued_to is not None:
        stmt = stmt.where(Receipt.issued_at <= as_utc(issued_to))
    stmt = stmt.order_by(Receipt.issued_at.desc(), Receipt.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def preview_totals(session: AsyncSession, payload: ReceiptPreviewRequest) -> ReceiptTotalsSchema:
    store = await get_store_settings(session)
    totals = _price(
        ((item.unit_price, item.qty) for item in payload.items),
        discount=payload.discount,
        service_charge_rate_percent=_or_default(
            payload.service_charge_rate_percent, store.service_charge_rate_percent
        ),
        charge_enabled=_or_default(payload.charge_enabled, store.charge_enabled),
        charge_fixed=_or_default(payload.charge_fixed, store.charge_fixed),
        tax_rate_percent=_or_default(payload.tax_rate_percent, store.tax_rate_percent),
    )
    return _totals_schema(totals)


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def _new_receipt(payload: ReceiptCreateRequest, store: StoreSettings) -> Receipt:
    now = datetime.now(timezone.utc)
    receipt = Receipt(
        id=generate_receipt_id(now.astimezone(ZoneInfo(store.timezone))),
        issued_at=now,
        payment_method=payload.payment_method,
        discount=_dec(payload.discount or 0),
        service_charge_rate_percent=_dec(
            _or_default(payload.service_charge_rate_percent, store.service_charge_rate_percent)
        ),
        charge_enabled=_or_default(payload.charge_enabled, store.charge_enabled),
        charge_fixed=_dec(_or_default(payload.charge_fixed, store.charge_fixed)),
        tax_rate_percent=store.tax_rate_percent,
        status=ReceiptStatus.ACTIVE,
        note=payload.note,
        items=_build_items(payload.items),
        assignments=[],
    )
    _reprice(receipt)
    return receipt


async def create_receipt(session: AsyncSession, payload: ReceiptCreateRequest) -> Receipt:
    store = await get_store_settings(session)
    receipt = _new_receipt(payload, store)
    session.add(receipt)
    await session.commit()
    logger.info("Created receipt %s total=%s", receipt.id, receipt.total)
    return await get_receipt_or_404(session, receipt.id)


async def update_receipt(
    session: AsyncSession, receipt_id: str, payload: ReceiptUpdateRequest
) -> Receipt:
    """Apply a partial edit and recompute totals with the receipt's captured tax rate."""

    receipt = await get_receipt_or_404(session, receipt_id)
    _ensure_not_cancelled(receipt)

    changes = payload.model_dump(exclude_unset=True)
    if payload.items is not None:
        receipt.items = _build_items(payload.items)
    if payload.payment_method is not None:
        receipt.payment_method = payload.payment_method
    for field in ("discount", "service_charge_rate_percent", "charge_fixed"):
        value = changes.get(field)
        if value is not None:
            setattr(receipt, field, _dec(value))
    if payload.charge_enabled is not None:
        receipt.charge_enabled = payload.charge_enabled
    if "note" in changes:
        receipt.note = payload.note

    _reprice(receipt)
    await session.commit()
    logger.info("Updated receipt %s total=%s", receipt.id, receipt.total)
    return await get_receipt_or_404(session, receipt_id)


async def cancel_receipt(session: AsyncSession, receipt_id: str) -> Receipt:
    receipt = await get_receipt_or_404(session, receipt_id)
    if receipt.status != ReceiptStatus.CANCELLED:
        receipt.status = ReceiptStatus.CANCELLED
        await session.commit()
        logger.info("Cancelled receipt %s", receipt_id)
    return receipt


async def mark_paid(session: AsyncSession, receipt_id: str) -> Receipt:
    receipt = await get_receipt_or_404(session, receipt_id)
    _ensure_not_cancelled(receipt)
    if receipt.status != ReceiptStatus.PAID:
        receipt.status = ReceiptStatus.PAID
        await session.commit()
    return receipt


async def assign_staff(
    session: AsyncSession, receipt_id: str, payload: ReceiptAssignmentRequest
) -> Receipt:
    receipt = await get_receipt_or_404(session, receipt_id)
    staff = await session.get(Staff, payload.staff_id)
    if staff is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Staff not found: {payload.staff_id}")
    for existing in receipt.assignments:
        if existing.staff_id == payload.staff_id and existing.type == payload.type:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Staff {payload.staff_id} already assigned as {payload.type.value}",
            )
    receipt.assignments.append(ReceiptAssignment(staff_id=payload.staff_id, type=payload.type))
    await session.commit()
    return await get_receipt_or_404(session, receipt_id)


def _field_paths(exc: ValidationError, tag: str) -> list[str]:
    paths = []
    for error in exc.errors():
        loc = error["loc"]
        if loc and loc[0] == tag:
            loc = loc[1:]
        paths.append(".".join(str(part) for part in loc))
    return paths


def _validate_op(raw: Any) -> BatchReceiptOp | BatchReceiptResult:
    if not isinstance(raw, dict):
        return BatchReceiptResult(id="unknown", status="error", message="Operation must be an object")

    op = raw.get("op")
    ref = str(raw["id"]) if raw.get("id") else "unknown"
    if op not in ("create", "update", "cancel"):
        return BatchReceiptResult(id=ref, status="error", message=f"Unknown operation: {op}")
    if op in _OPS_REQUIRING_ID and not raw.get("id"):
        return BatchReceiptResult(id=ref, status="error", message=f"{op.capitalize()} operation requires id")
    if op in _OPS_REQUIRING_PAYLOAD and raw.get("payload") is None:
        return BatchReceiptResult(
            id=ref, status="error", message=f"{op.capitalize()} operation requires payload"
        )
    try:
        return _BATCH_OP.validate_python(raw)
    except ValidationError as exc:
        return BatchReceiptResult(
            id=ref, status="error", message="invalid input: " + ", ".join(_field_paths(exc, op))
        )


async def _execute_op(session: AsyncSession, op: BatchReceiptOp) -> BatchReceiptResult:
    if isinstance(op, CreateReceiptOp):
        receipt = await create_receipt(session, op.payload)
    elif isinstance(op, UpdateReceiptOp):
        receipt = await update_receipt(session, op.id, op.payload)
    elif isinstance(op, CancelReceiptOp):
        receipt = await cancel_receipt(session, op.id)
    else:  # pragma: no cover - the discriminated union is closed
        raise TypeError(f"Unsupported operation: {op!r}")
    return BatchReceiptResult(id=receipt.id, status="ok")


async def run_batch(session: AsyncSession, raw_ops: Sequence[Any]) -> list[BatchReceiptResult]:
    """Validate every operation first; run them only when all are well formed.

    Each operation commits on its own, so a failure part way through leaves
    earlier operations applied and is reported in that operation's slot.
    """

    validated = [_validate_op(raw) for raw in raw_ops]
    rejected = [item for item in validated if isinstance(item, BatchReceiptResult)]
    if rejected:
        logger.info("Rejected receipt batch: %d of %d operations invalid", len(rejected), len(validated))
        return rejected

    results: list[BatchReceiptResult] = []
    for op in validated:
        ref = getattr(op, "id", None) or "unknown"
        try:
            results.append(await _execute_op(session, op))
        except HTTPException as exc:
            await session.rollback()
            results.append(BatchReceiptResult(id=ref, status="error", message=str(exc.detail)))
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.exception("Batch %s operation failed for %s", op.op, ref)
            results.append(BatchReceiptResult(id=ref, status="error", message=str(exc)))
    return results


__all__ = [
    "assign_staff",
    "cancel_receipt",
    "create_receipt",
    "get_receipt_or_404",
    "list_receipts",
    "mark_paid",
    "preview_totals",
    "run_batch",
    "serialize_receipt",
    "update_receipt",
]
