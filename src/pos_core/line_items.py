from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Sequence

from .financials import ZERO

if TYPE_CHECKING:
    from .models_sales import SaleItem


def find_item(items: Sequence[SaleItem], item_id: str) -> SaleItem | None:
    return next((item for item in items if item.id == item_id), None)


def add_item(items: Sequence[SaleItem], item: SaleItem) -> list[SaleItem]:
    """Append a line, or merge its quantity into the line for the same product."""
    result = list(items)
    if item.product_id:
        for index, existing in enumerate(result):
            if existing.product_id == item.product_id:
                result[index] = _with(existing, quantity=existing.quantity + item.quantity)
                return result
    if not item.id:
        item = _with(item, id=str(uuid.uuid4()))
    result.append(item)
    return result


def update_item(items: Sequence[SaleItem], updated: SaleItem) -> list[SaleItem]:
    return [updated if item.id == updated.id else item for item in items]


def update_item_quantity(items: Sequence[SaleItem], item_id: str, quantity: int) -> list[SaleItem]:
    if quantity <= 0:
        return remove_item(items, item_id)
    return [_with(item, quantity=quantity) if item.id == item_id else item for item in items]


def remove_item(items: Sequence[SaleItem], item_id: str) -> list[SaleItem]:
    return [item for item in items if item.id != item_id]


def apply_item_discount(
    items: Sequence[SaleItem], item_id: str, discount_value: Decimal | int | str
) -> list[SaleItem]:
    value = Decimal(str(discount_value))
    return [_with(item, discount_value=value) if item.id == item_id else item for item in items]


def clear_discounts(items: Sequence[SaleItem]) -> list[SaleItem]:
    return [_with(item, discount_value=ZERO) for item in items]


def _with(item: SaleItem, **changes: Any) -> SaleItem:
    # Re-validate so a bad quantity or discount cannot slip in through a copy.
    return type(item).model_validate({**item.model_dump(), **changes})
