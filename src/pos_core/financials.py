"""Money rules shared by carts, drafts, sales and reports.

Every total in the POS is derived here so the cart on screen, the saved
draft and the finalized sale can never disagree. Discount values only
mean something together with the owning aggregate's discount mode, which
callers pass in as ``is_percentage``.

No rounding happens in this module; format for display at the edge.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Protocol, Sequence

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class PricedLine(Protocol):
    unit_price: Decimal
    unit_cost: Decimal
    quantity: int
    discount_value: Decimal


@dataclass(frozen=True)
class AggregateTotals:
    subtotal: Decimal
    total_discount: Decimal
    grand_total: Decimal
    total_cost: Decimal
    total_profit: Decimal
    profit_margin: Decimal
    total_item_count: int
    unique_product_count: int

    @property
    def has_discount(self) -> bool:
        return self.total_discount > 0


def line_item_gross(item: PricedLine) -> Decimal:
    return item.unit_price * item.quantity


def line_item_cost(item: PricedLine) -> Decimal:
    return item.unit_cost * item.quantity


def line_item_discount(item: PricedLine, is_percentage: bool) -> Decimal:
    """Money taken off one line.

    Amount discounts are capped at the line's gross. Percentage discounts
    are not clamped here; values above 100 must be stopped at entry.
    """
    if item.discount_value <= 0:
        return ZERO
    gross = line_item_gross(item)
    if is_percentage:
        return gross * (item.discount_value / HUNDRED)
    return min(item.discount_value, gross)


def line_item_net(item: PricedLine, is_percentage: bool) -> Decimal:
    return line_item_gross(item) - line_item_discount(item, is_percentage)


def line_item_profit(item: PricedLine, is_percentage: bool) -> Decimal:
    return line_item_net(item, is_percentage) - line_item_cost(item)


def line_item_profit_margin(item: PricedLine, is_percentage: bool) -> Decimal:
    net = line_item_net(item, is_percentage)
    if net <= 0:
        return ZERO
    return line_item_profit(item, is_percentage) / net * HUNDRED


def aggregate_totals(items: Iterable[PricedLine], is_percentage: bool) -> AggregateTotals:
    lines = list(items)
    subtotal = sum((line_item_gross(item) for item in lines), ZERO)
    total_discount = sum((line_item_discount(item, is_percentage) for item in lines), ZERO)
    total_cost = sum((line_item_cost(item) for item in lines), ZERO)
    grand_total = subtotal - total_discount
    total_profit = grand_total - total_cost
    profit_margin = total_profit / grand_total * HUNDRED if grand_total > 0 else ZERO
    return AggregateTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        grand_total=grand_total,
        total_cost=total_cost,
        total_profit=total_profit,
        profit_margin=profit_margin,
        total_item_count=sum(item.quantity for item in lines),
        unique_product_count=len(lines),
    )


def reset_discounts_for_mode_change(items: Sequence[Any]) -> list[Any]:
    return [item.model_copy(update={"discount_value": ZERO}) for item in items]


def change_discount_mode(aggregate: Any, new_mode: Any) -> Any:
    """Switch an aggregate's discount mode, zeroing every line discount.

    A stored "10" means pesos in one mode and percent in the other, so the
    values cannot survive the switch.
    """
    items = reset_discounts_for_mode_change(aggregate.items)
    # Re-validate so a raw mode string is coerced to the enum.
    return type(aggregate).model_validate({**aggregate.model_dump(), "discount_mode": new_mode, "items": items})


def clamp_discount_value(value: Decimal, *, is_percentage: bool, gross_amount: Decimal) -> Decimal:
    upper = HUNDRED if is_percentage else gross_amount
    if value < 0:
        return ZERO
    return min(value, upper)


def compute_change(grand_total: Decimal, amount_received: Decimal) -> Decimal:
    return max(amount_received - grand_total, ZERO)


def is_payment_sufficient(grand_total: Decimal, amount_received: Decimal) -> bool:
    return amount_received >= grand_total
