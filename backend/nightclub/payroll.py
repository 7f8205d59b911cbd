"""Monthly payroll figures for hourly-paid staff."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

from .totals import Number, round_to_yen, to_decimal

DRINK_CATEGORIES = ("bottle", "item")

_SIXTY = Decimal("60")
_HUNDRED = Decimal("100")


@dataclass
class PayrollInputs:
    hourly_wage: Number
    transportation_allowance: Number
    work_minutes: int
    work_days: int
    drink_back_rate: Number = 0
    receipt_back_rate: Number = 0
    drink_sales: Number = 0
    receipt_sales: Number = 0
    adjustment: int = 0
    withholding_rate_percent: Number = 0


@dataclass
class PayrollFigures:
    base_pay: int
    transportation: int
    drink_back: int
    receipt_back: int
    adjustment: int
    total_pay: int
    deduction: int
    net_pay: int


class PayrollLike(Protocol):
    base_pay: int
    transportation: int
    drink_back: int
    receipt_back: int
    adjustment: int
    total_pay: int
    deduction: int
    net_pay: int


@dataclass
class PayrollSummary:
    year_month: str
    total_staff: int
    total_base_pay: int
    total_transportation: int
    total_incentive: int
    total_adjustment: int
    total_payroll: int
    total_deduction: int
    total_net_pay: int


def compute_payroll(inputs: PayrollInputs) -> PayrollFigures:
    base_pay = round_to_yen(to_decimal(inputs.hourly_wage) * inputs.work_minutes / _SIXTY)
    transportation = round_to_yen(to_decimal(inputs.transportation_allowance) * inputs.work_days)
    drink_back = round_to_yen(to_decimal(inputs.drink_sales) * to_decimal(inputs.drink_back_rate) / _HUNDRED)
    receipt_back = round_to_yen(
        to_decimal(inputs.receipt_sales) * to_decimal(inputs.receipt_back_rate) / _HUNDRED
    )
    total_pay = base_pay + transportation + drink_back + receipt_back + inputs.adjustment
    deduction = round_to_yen(max(total_pay, 0) * to_decimal(inputs.withholding_rate_percent) / _HUNDRED)
    return PayrollFigures(
        base_pay=base_pay,
        transportation=transportation,
        drink_back=drink_back,
        receipt_back=receipt_back,
        adjustment=inputs.adjustment,
        total_pay=total_pay,
        deduction=deduction,
        net_pay=total_pay - deduction,
    )


def summarize_payroll(year_month: str, records: Iterable[PayrollLike]) -> PayrollSummary:
    summary = PayrollSummary(
        year_month=year_month,
        total_staff=0,
        total_base_pay=0,
        total_transportation=0,
        total_incentive=0,
        total_adjustment=0,
        total_payroll=0,
        total_deduction=0,
        total_net_pay=0,
    )
    for record in records:
        summary.total_staff += 1
        summary.total_base_pay += record.base_pay
        summary.total_transportation += record.transportation
        summary.total_incentive += record.drink_back + record.receipt_back
        summary.total_adjustment += record.adjustment
        summary.total_payroll += record.total_pay
        summary.total_deduction += record.deduction
        summary.total_net_pay += record.net_pay
    return summary


__all__ = [
    "DRINK_CATEGORIES",
    "PayrollFigures",
    "PayrollInputs",
    "PayrollSummary",
    "compute_payroll",
    "summarize_payroll",
]
