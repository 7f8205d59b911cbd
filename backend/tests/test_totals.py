"""Golden tests for receipt totals."""

from __future__ import annotations

import importlib
import random
from decimal import Decimal, getcontext, localcontext

from nightclub import LineItem, PricingParameters, calc_receipt_totals, ceil_to_yen, round_to_yen


def test_service_charge_and_fixed_charge():
    result = calc_receipt_totals(
        [LineItem.of(3000, 1)],
        PricingParameters(
            discount=0,
            service_charge_rate_percent=10,
            fixed_charge_enabled=True,
            fixed_charge=1000,
            tax_rate_percent=10,
        ),
    )

    assert result.subtotal == Decimal("3000")
    assert result.effective_discount == Decimal("0")
    assert result.service_charge == Decimal("300")
    assert result.fixed_charge == Decimal("1000")
    assert result.raw_total == Decimal("4300")
    assert result.rounded_total == 4300
    assert result.estimated_tax_portion == 391


def test_fractional_prices_round_total_up_and_tax_to_nearest():
    result = calc_receipt_totals(
        [LineItem.of(1500.5, 1), LineItem.of(1000, 1)],
        PricingParameters(
            discount=600,
            service_charge_rate_percent=5,
            fixed_charge_enabled=False,
            tax_rate_percent=10,
        ),
    )

    assert result.subtotal == Decimal("2500.5")
    assert result.service_charge == Decimal("95.025")
    assert result.fixed_charge == Decimal("0")
    assert result.raw_total == Decimal("1995.525")
    assert result.rounded_total == 1996
    assert result.estimated_tax_portion == 181


def test_discount_is_capped_at_subtotal():
    result = calc_receipt_totals(
        [LineItem.of(1000, 1)],
        PricingParameters(discount=2000, service_charge_rate_percent=10),
    )

    assert result.effective_discount == Decimal("1000")
    assert result.service_charge == Decimal("0")
    assert result.raw_total == Decimal("0")
    assert result.rounded_total == 0


def test_negative_discount_is_ignored():
    result = calc_receipt_totals(
        [LineItem.of(1000, 1)],
        PricingParameters(discount=-500, service_charge_rate_percent=10),
    )

    assert result.effective_discount == Decimal("0")
    assert result.service_charge == Decimal("100")
    assert result.rounded_total == 1100


def test_empty_receipt_is_all_zero():
    result = calc_receipt_totals(
        [],
        PricingParameters(discount=500, service_charge_rate_percent=20, tax_rate_percent=10),
    )

    assert result.subtotal == 0
    assert result.effective_discount == 0
    assert result.service_charge == 0
    assert result.fixed_charge == 0
    assert result.raw_total == 0
    assert result.rounded_total == 0
    assert result.estimated_tax_portion == 0


def test_fixed_charge_alone_when_items_are_empty():
    result = calc_receipt_totals(
        [],
        PricingParameters(fixed_charge_enabled=True, fixed_charge=2000, tax_rate_percent=10),
    )

    assert result.raw_total == Decimal("2000")
    assert result.rounded_total == 2000
    assert result.estimated_tax_portion == 182


def test_subtotal_ignores_item_order():
    rng = random.Random(7)
    items = [LineItem.of(rng.choice([1500, 2500.5, 8000, 333.3]), rng.randint(1, 4)) for _ in range(12)]
    params = PricingParameters(discount=1200, service_charge_rate_percent=15, tax_rate_percent=10)

    forward = calc_receipt_totals(items, params)
    shuffled = list(items)
    rng.shuffle(shuffled)
    backward = calc_receipt_totals(shuffled, params)

    assert forward == backward
    assert forward.subtotal == sum((item.unit_price * item.quantity for item in items), Decimal("0"))


def test_rounded_total_is_ceiling_within_one_unit():
    rng = random.Random(11)
    for _ in range(200):
        items = [LineItem.of(round(rng.uniform(0, 20000), 2), rng.randint(1, 5)) for _ in range(rng.randint(0, 6))]
        params = PricingParameters(
            discount=round(rng.uniform(-1000, 30000), 2),
            service_charge_rate_percent=round(rng.uniform(0, 40), 3),
            fixed_charge_enabled=rng.random() < 0.5,
            fixed_charge=round(rng.uniform(0, 5000), 2),
            tax_rate_percent=10,
        )
        result = calc_receipt_totals(items, params)

        assert result.rounded_total >= result.raw_total
        assert result.rounded_total - result.raw_total < 1
        assert Decimal("0") <= result.effective_discount <= result.subtotal


def test_calculation_is_idempotent():
    items = [LineItem.of(1500.5, 3), LineItem.of(999.99, 2)]
    params = PricingParameters(discount=100, service_charge_rate_percent=12.5, tax_rate_percent=8)

    assert calc_receipt_totals(items, params) == calc_receipt_totals(items, params)


def test_rounding_helpers():
    assert ceil_to_yen(Decimal("1995.001")) == 1996
    assert ceil_to_yen(Decimal("2000")) == 2000
    assert round_to_yen(Decimal("181.41")) == 181
    assert round_to_yen(Decimal("0.5")) == 1
    assert round_to_yen(Decimal("-100.5")) == -100


def test_minus_hundred_percent_tax_does_not_divide_by_zero():
    result = calc_receipt_totals([LineItem.of(1000, 1)], PricingParameters(tax_rate_percent=-100))

    assert result.rounded_total == 1000
    assert result.estimated_tax_portion == 0


def test_import_leaves_decimal_context_alone():
    import nightclub.totals

    with localcontext() as context:
        context.prec = 12
        importlib.reload(nightclub.totals)
        assert getcontext().prec == 12
