from __future__ import annotations

from decimal import Decimal

import pytest

from pos_core.financials import (
    aggregate_totals,
    clamp_discount_value,
    compute_change,
    is_payment_sufficient,
    line_item_discount,
    line_item_net,
    line_item_profit,
    line_item_profit_margin,
    reset_discounts_for_mode_change,
)
from pos_core.models_sales import Cart, DiscountMode


def test_amount_discount_line(make_item) -> None:
    item = make_item(unit_price="100", unit_cost="60", quantity=3, discount_value="50")
    assert item.gross_amount == Decimal("300")
    assert line_item_discount(item, False) == Decimal("50")
    assert line_item_net(item, False) == Decimal("250")
    assert line_item_profit(item, False) == Decimal("70")


def test_percentage_discount_line(make_item) -> None:
    item = make_item(unit_price="100", unit_cost="60", quantity=3, discount_value="10")
    assert line_item_discount(item, True) == Decimal("30")
    assert line_item_net(item, True) == Decimal("270")


def test_amount_discount_capped_at_gross(make_item) -> None:
    item = make_item(unit_price="100", quantity=3, discount_value="500")
    assert line_item_discount(item, False) == Decimal("300")
    assert line_item_net(item, False) == Decimal("0")


def test_percentage_over_hundred_is_not_clamped(make_item) -> None:
    item = make_item(unit_price="100", unit_cost="60", quantity=3, discount_value="150")
    assert line_item_discount(item, True) == Decimal("450")
    assert line_item_net(item, True) == Decimal("-150")
    assert line_item_profit_margin(item, True) == Decimal("0")


def test_zero_discount_and_margin(make_item) -> None:
    item = make_item(unit_price="200", unit_cost="150", quantity=1)
    assert line_item_discount(item, True) == Decimal("0")
    assert line_item_profit_margin(item, False) == Decimal("25")


def test_aggregate_totals(make_item) -> None:
    items = [
        make_item("a", product_id="p1", unit_price="100", unit_cost="60", quantity=3, discount_value="50"),
        make_item("b", product_id="p2", unit_price="25.50", unit_cost="10", quantity=2),
    ]
    totals = aggregate_totals(items, False)
    assert totals.subtotal == Decimal("351.00")
    assert totals.total_discount == Decimal("50")
    assert totals.grand_total == Decimal("301.00")
    assert totals.grand_total == totals.subtotal - totals.total_discount
    assert totals.total_cost == Decimal("200")
    assert totals.total_profit == Decimal("101.00")
    assert totals.total_item_count == 5
    assert totals.unique_product_count == 2
    assert totals.has_discount is True


def test_aggregate_totals_empty() -> None:
    totals = aggregate_totals([], True)
    assert totals.subtotal == Decimal("0")
    assert totals.grand_total == Decimal("0")
    assert totals.profit_margin == Decimal("0")
    assert totals.total_item_count == 0
    assert totals.has_discount is False


def test_grand_total_identity_with_percentages(make_item) -> None:
    items = [
        make_item("a", product_id="p1", unit_price="19.99", quantity=7, discount_value="12.5"),
        make_item("b", product_id="p2", unit_price="0.35", quantity=13, discount_value="33"),
    ]
    totals = aggregate_totals(items, True)
    assert totals.grand_total == totals.subtotal - totals.total_discount


def test_reset_discounts_for_mode_change(make_item) -> None:
    items = [
        make_item("a", product_id="p1", discount_value="10"),
        make_item("b", product_id="p2", discount_value="0"),
    ]
    reset = reset_discounts_for_mode_change(items)
    assert [item.discount_value for item in reset] == [Decimal("0"), Decimal("0")]
    assert [item.id for item in reset] == ["a", "b"]
    assert items[0].discount_value == Decimal("10")
    assert reset_discounts_for_mode_change(reset) == reset


def test_mode_switch_zeroes_discounts(make_item) -> None:
    cart = Cart(items=[make_item(discount_value="10")])
    switched = cart.set_discount_mode(DiscountMode.PERCENTAGE)
    assert switched.discount_mode is DiscountMode.PERCENTAGE
    assert switched.totals.total_discount == Decimal("0")
    assert cart.totals.total_discount == Decimal("10")


@pytest.mark.parametrize(
    ("value", "is_percentage", "expected"),
    [
        ("150", True, "100"),
        ("-5", True, "0"),
        ("40", True, "40"),
        ("500", False, "300"),
        ("120", False, "120"),
    ],
)
def test_clamp_discount_value(value: str, is_percentage: bool, expected: str) -> None:
    clamped = clamp_discount_value(Decimal(value), is_percentage=is_percentage, gross_amount=Decimal("300"))
    assert clamped == Decimal(expected)


def test_change_and_sufficiency() -> None:
    assert compute_change(Decimal("250"), Decimal("300")) == Decimal("50")
    assert compute_change(Decimal("250"), Decimal("200")) == Decimal("0")
    assert is_payment_sufficient(Decimal("250"), Decimal("250")) is True
    assert is_payment_sufficient(Decimal("250"), Decimal("249.99")) is False
