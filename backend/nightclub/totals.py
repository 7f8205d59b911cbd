"""Receipt total calculation.

All prices are tax-inclusive. The steps run in a fixed order because stored
receipts and payroll incentives are reconciled against these exact figures:

1. subtotal = sum(unit_price * quantity)
2. discount is clamped to ``[0, subtotal]``
3. service charge = (subtotal - discount) * rate / 100, kept unrounded
4. fixed charge applies only when enabled
5. raw total = discounted subtotal + service charge + fixed charge
6. total = ceil(raw total)
7. estimated tax = round_half_up(raw total * t / (1 + t)), reporting only
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from typing import Iterable, Union

Number = Union[int, float, Decimal]

_ZERO = Decimal("0")
_HALF = Decimal("0.5")
_HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Convert via ``str`` so binary float noise does not leak into totals."""

    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def ceil_to_yen(value: Number) -> int:
    """Round up to the next whole currency unit."""

    return int(to_decimal(value).to_integral_value(rounding=ROUND_CEILING))


def round_to_yen(value: Number) -> int:
    """Round to the nearest whole unit, halves toward positive infinity."""

    return int((to_decimal(value) + _HALF).to_integral_value(rounding=ROUND_FLOOR))


@dataclass(frozen=True)
class LineItem:
    unit_price: Decimal
    quantity: int

    @classmethod
    def of(cls, unit_price: Number, quantity: int) -> "LineItem":
        return cls(unit_price=to_decimal(unit_price), quantity=quantity)


@dataclass(frozen=True)
class PricingParameters:
    discount: Number = 0
    service_charge_rate_percent: Number = 0
    fixed_charge_enabled: bool = False
    fixed_charge: Number = 0
    tax_rate_percent: Number = 0


@dataclass(frozen=True)
class TotalsResult:
    subtotal: Decimal
    effective_discount: Decimal
    service_charge: Decimal
    fixed_charge: Decimal
    raw_total: Decimal
    rounded_total: int
    estimated_tax_portion: int


def calc_receipt_totals(items: Iterable[LineItem], params: PricingParameters) -> TotalsResult:
    """Compute receipt totals. Never raises; inputs are clamped, not validated."""

    subtotal = sum(
        (to_decimal(item.unit_price) * item.quantity for item in items),
        _ZERO,
    )

    effective_discount = min(max(_ZERO, to_decimal(params.discount)), subtotal)
    after_discount = subtotal - effective_discount

    service_charge = after_discount * (to_decimal(params.service_charge_rate_percent) / _HUNDRED)
    fixed_charge = to_decimal(params.fixed_charge) if params.fixed_charge_enabled else _ZERO

    raw_total = after_discount + service_charge + fixed_charge
    rounded_total = ceil_to_yen(raw_total)

    tax_rate = to_decimal(params.tax_rate_percent) / _HUNDRED
    if tax_rate == -1:
        # a -100% rate has no tax-inclusive inverse
        estimated_tax_portion = 0
    else:
        estimated_tax_portion = round_to_yen(raw_total * tax_rate / (1 + tax_rate))

    return TotalsResult(
        subtotal=subtotal,
        effective_discount=effective_discount,
        service_charge=service_charge,
        fixed_charge=fixed_charge,
        raw_total=raw_total,
        rounded_total=rounded_total,
        estimated_tax_portion=estimated_tax_portion,
    )


__all__ = [
    "LineItem",
    "PricingParameters",
    "TotalsResult",
    "calc_receipt_totals",
    "ceil_to_yen",
    "round_to_yen",
    "to_decimal",
]
