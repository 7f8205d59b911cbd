"""Core business rules for the nightclub point-of-sale backend."""

from .identifiers import generate_menu_id, generate_receipt_id, generate_visit_id
from .payroll import PayrollFigures, PayrollInputs, compute_payroll, summarize_payroll
from .totals import (
    LineItem,
    PricingParameters,
    TotalsResult,
    calc_receipt_totals,
    ceil_to_yen,
    round_to_yen,
)
from .worktime import business_date, calculate_work_minutes, month_bounds, summarize_month

__all__ = [
    "LineItem",
    "PricingParameters",
    "TotalsResult",
    "calc_receipt_totals",
    "ceil_to_yen",
    "round_to_yen",
    "generate_receipt_id",
    "generate_visit_id",
    "generate_menu_id",
    "PayrollInputs",
    "PayrollFigures",
    "compute_payroll",
    "summarize_payroll",
    "business_date",
    "calculate_work_minutes",
    "month_bounds",
    "summarize_month",
]
