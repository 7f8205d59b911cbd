"""Pydantic schemas for receipts, totals previews and batch operations."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from app.models.menu import MenuCategory
from app.models.receipt import AssignmentType, PaymentMethod, ReceiptStatus


class ReceiptItemInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=128, examples=["60分セット"])
    category: MenuCategory
    unit_price: float = Field(..., ge=0, description="Tax-inclusive unit price")
    qty: int = Field(..., ge=1)


class ReceiptCreateRequest(BaseModel):
    items: list[ReceiptItemInput] = Field(..., min_length=1)
    payment_method: PaymentMethod
    discount: float | None = Field(default=None, ge=0)
    service_charge_rate_percent: float | None = Field(default=None, ge=0, le=100)
    charge_enabled: bool | None = None
    charge_fixed: float | None = Field(default=None, ge=0)
    note: str | None = Field(default=None, max_length=512)

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"name": "シャンパン（モエ）", "category": "bottle", "unit_price": 35000, "qty": 1},
                    {"name": "60分セット", "category": "set", "unit_price": 8000, "qty": 2},
                ],
                "payment_method": "Card",
                "discount": 1000,
                "service_charge_rate_percent": 20,
                "charge_enabled": True,
                "charge_fixed": 3000,
            }
        }


class ReceiptUpdateRequest(BaseModel):
    """Partial update; ``items`` replaces every line when present."""

    items: list[ReceiptItemInput] | None = Field(default=None, min_length=1)
    payment_method: PaymentMethod | None = None
    discount: float | None = Field(default=None, ge=0)
    service_charge_rate_percent: float | None = Field(default=None, ge=0, le=100)
    charge_enabled: bool | None = None
    charge_fixed: float | None = Field(default=None, ge=0)
    note: str | None = Field(default=None, max_length=512)


class ReceiptPreviewRequest(BaseModel):
    items: list[ReceiptItemInput] = Field(default_factory=list)
    discount: float = Field(default=0, ge=0)
    service_charge_rate_percent: float | None = Field(default=None, ge=0, le=100)
    charge_enabled: bool | None = None
    charge_fixed: float | None = Field(default=None, ge=0)
    tax_rate_percent: float | None = Field(default=None, ge=0, le=100)


class ReceiptTotalsSchema(BaseModel):
    subtotal: float
    discount: float
    service_charge: float
    charge_fixed: float
    total_raw: float
    total: int
    tax_included: int


class ReceiptItemSchema(BaseModel):
    id: int | None = None
    name: str
    category: MenuCategory
    unit_price: float
    qty: int
    amount: float


class ReceiptAssignmentRequest(BaseModel):
    staff_id: int
    type: AssignmentType


class ReceiptAssignmentSchema(BaseModel):
    id: int
    staff_id: int
    type: AssignmentType


class ReceiptSchema(BaseModel):
    id: str
    issued_at: datetime
    items: list[ReceiptItemSchema]
    payment_method: PaymentMethod
    discount: float
    service_charge_rate_percent: float
    charge_enabled: bool
    charge_fixed: float
    tax_rate_percent: float
    totals: ReceiptTotalsSchema
    status: ReceiptStatus
    note: str | None = None
    assignments: list[ReceiptAssignmentSchema] = Field(default_factory=list)


class CreateReceiptOp(BaseModel):
    op: Literal["create"]
    payload: ReceiptCreateRequest


class UpdateReceiptOp(BaseModel):
    op: Literal["update"]
    id: str
    payload: ReceiptUpdateRequest


class CancelReceiptOp(BaseModel):
    op: Literal["cancel"]
    id: str


BatchReceiptOp = Annotated[
    Union[CreateReceiptOp, UpdateReceiptOp, CancelReceiptOp],
    Field(discriminator="op"),
]


class BatchReceiptResult(BaseModel):
    id: str
    status: Literal["ok", "error"]
    message: str | None = None


__all__ = [
    "BatchReceiptOp",
    "BatchReceiptResult",
    "CancelReceiptOp",
    "CreateReceiptOp",
    "ReceiptAssignmentRequest",
    "ReceiptAssignmentSchema",
    "ReceiptCreateRequest",
    "ReceiptItemInput",
    "ReceiptItemSchema",
    "ReceiptPreviewRequest",
    "ReceiptSchema",
    "ReceiptTotalsSchema",
    "ReceiptUpdateRequest",
    "UpdateReceiptOp",
]
