from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from . import line_items
from .financials import (
    ZERO,
    AggregateTotals,
    aggregate_totals,
    change_discount_mode,
    clamp_discount_value,
    compute_change,
    is_payment_sufficient,
    line_item_cost,
    line_item_gross,
)


class DiscountMode(str, Enum):
    AMOUNT = "amount"
    PERCENTAGE = "percentage"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_value(cls, value: str | None) -> DiscountMode:
        for member in cls:
            if member.value == value:
                return member
        return cls.AMOUNT


class PaymentMethod(str, Enum):
    CASH = "cash"
    GCASH = "gcash"

    @property
    def display_name(self) -> str:
        return "GCash" if self is PaymentMethod.GCASH else "Cash"

    @property
    def has_fees(self) -> bool:
        return self is PaymentMethod.GCASH


class SaleStatus(str, Enum):
    COMPLETED = "completed"
    VOIDED = "voided"
    DRAFT = "draft"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SaleItem(BaseModel):
    """One line of a cart, draft or sale.

    Price and cost are snapshots taken when the line was added.
    ``discount_value`` is pesos or percent depending on the parent's mode.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    product_id: str = ""
    sku: str = ""
    name: str = ""
    unit_price: Decimal = Field(ge=0)
    unit_cost: Decimal = Field(default=ZERO, ge=0)
    quantity: int = Field(default=1, ge=0)
    discount_value: Decimal = Field(default=ZERO, ge=0)
    unit: str = "pcs"

    @property
    def gross_amount(self) -> Decimal:
        return line_item_gross(self)

    @property
    def total_cost(self) -> Decimal:
        return line_item_cost(self)

    @property
    def has_discount(self) -> bool:
        return self.discount_value > 0


class _LineAggregate(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: list[SaleItem] = Field(default_factory=list)
    discount_mode: DiscountMode = DiscountMode.AMOUNT
    notes: str | None = None

    @property
    def is_percentage_discount(self) -> bool:
        return self.discount_mode is DiscountMode.PERCENTAGE

    @property
    def totals(self) -> AggregateTotals:
        return aggregate_totals(self.items, self.is_percentage_discount)

    @property
    def grand_total(self) -> Decimal:
        return self.totals.grand_total

    @property
    def is_empty(self) -> bool:
        return not self.items


class Cart(_LineAggregate):
    payment_method: PaymentMethod = PaymentMethod.CASH
    amount_received: Decimal = Field(default=ZERO, ge=0)
    source_draft_id: str | None = None

    @property
    def change(self) -> Decimal:
        return compute_change(self.grand_total, self.amount_received)

    @property
    def is_payment_sufficient(self) -> bool:
        return is_payment_sufficient(self.grand_total, self.amount_received)

    @property
    def can_checkout(self) -> bool:
        return not self.is_empty and self.is_payment_sufficient

    @property
    def can_save_as_draft(self) -> bool:
        return not self.is_empty

    @property
    def is_from_draft(self) -> bool:
        return bool(self.source_draft_id)

    def add_item(self, item: SaleItem) -> Cart:
        return self.model_copy(update={"items": line_items.add_item(self.items, item)})

    def update_item_quantity(self, item_id: str, quantity: int) -> Cart:
        return self.model_copy(update={"items": line_items.update_item_quantity(self.items, item_id, quantity)})

    def increment_item_quantity(self, item_id: str) -> Cart:
        item = line_items.find_item(self.items, item_id)
        if item is None:
            return self
        return self.update_item_quantity(item_id, item.quantity + 1)

    def decrement_item_quantity(self, item_id: str) -> Cart:
        item = line_items.find_item(self.items, item_id)
        if item is None:
            return self
        return self.update_item_quantity(item_id, item.quantity - 1)

    def remove_item(self, item_id: str) -> Cart:
        return self.model_copy(update={"items": line_items.remove_item(self.items, item_id)})

    def clear_items(self) -> Cart:
        return self.model_copy(update={"items": []})

    def set_discount_mode(self, mode: DiscountMode | str) -> Cart:
        if DiscountMode(mode) is self.discount_mode:
            return self
        return change_discount_mode(self, mode)

    def apply_item_discount(self, item_id: str, discount_value: Decimal | int | str) -> Cart:
        """Set a line discount, clamped to 0..100 percent or 0..gross pesos."""
        item = line_items.find_item(self.items, item_id)
        if item is None:
            return self
        value = clamp_discount_value(
            Decimal(str(discount_value)),
            is_percentage=self.is_percentage_discount,
            gross_amount=item.gross_amount,
        )
        return self.model_copy(update={"items": line_items.apply_item_discount(self.items, item_id, value)})

    def remove_item_discount(self, item_id: str) -> Cart:
        return self.apply_item_discount(item_id, ZERO)

    def clear_all_discounts(self) -> Cart:
        return self.model_copy(update={"items": line_items.clear_discounts(self.items)})

    def set_payment_method(self, method: PaymentMethod) -> Cart:
        return self.model_copy(update={"payment_method": method})

    def set_amount_received(self, amount: Decimal | int | str) -> Cart:
        return Cart.model_validate({**self.model_dump(), "amount_received": Decimal(str(amount))})

    def set_exact_amount(self) -> Cart:
        return self.set_amount_received(max(self.grand_total, ZERO))

    def set_notes(self, notes: str | None) -> Cart:
        return self.model_copy(update={"notes": notes or None})

    @classmethod
    def from_draft(cls, draft: Draft) -> Cart:
        return cls(
            items=list(draft.items),
            discount_mode=draft.discount_mode,
            notes=draft.notes,
            source_draft_id=draft.id,
        )

    def to_draft(
        self,
        *,
        name: str,
        created_by: str,
        created_by_name: str,
        now: datetime | None = None,
    ) -> Draft:
        return Draft(
            id=self.source_draft_id or "",
            name=name,
            items=list(self.items),
            discount_mode=self.discount_mode,
            created_by=created_by,
            created_by_name=created_by_name,
            created_at=now or _utcnow(),
            notes=self.notes,
        )

    def to_sale(
        self,
        *,
        sale_number: str,
        cashier_id: str,
        cashier_name: str,
        now: datetime | None = None,
    ) -> Sale:
        return Sale(
            id="",
            sale_number=sale_number,
            items=list(self.items),
            discount_mode=self.discount_mode,
            payment_method=self.payment_method,
            amount_received=self.amount_received,
            change_given=self.change,
            cashier_id=cashier_id,
            cashier_name=cashier_name,
            created_at=now or _utcnow(),
            draft_id=self.source_draft_id,
            notes=self.notes,
        )


class Draft(_LineAggregate):
    id: str = ""
    name: str
    created_by: str
    created_by_name: str
    created_at: datetime
    updated_at: datetime | None = None
    updated_by: str | None = None
    is_converted: bool = False
    converted_to_sale_id: str | None = None
    converted_at: datetime | None = None

    @property
    def can_checkout(self) -> bool:
        return not self.is_empty and not self.is_converted

    @property
    def item_count_label(self) -> str:
        count = self.totals.total_item_count
        return "1 item" if count == 1 else f"{count} items"

    def _touched(self, now: datetime | None, **changes: object) -> Draft:
        return self.model_copy(update={**changes, "updated_at": now or _utcnow()})

    def add_item(self, item: SaleItem, *, now: datetime | None = None) -> Draft:
        return self._touched(now, items=line_items.add_item(self.items, item))

    def update_item(self, item: SaleItem, *, now: datetime | None = None) -> Draft:
        if line_items.find_item(self.items, item.id) is None:
            return self
        return self._touched(now, items=line_items.update_item(self.items, item))

    def update_item_quantity(self, item_id: str, quantity: int, *, now: datetime | None = None) -> Draft:
        if quantity > 0 and line_items.find_item(self.items, item_id) is None:
            return self
        return self._touched(now, items=line_items.update_item_quantity(self.items, item_id, quantity))

    def remove_item(self, item_id: str, *, now: datetime | None = None) -> Draft:
        return self._touched(now, items=line_items.remove_item(self.items, item_id))

    def apply_item_discount(
        self, item_id: str, discount_value: Decimal | int | str, *, now: datetime | None = None
    ) -> Draft:
        if line_items.find_item(self.items, item_id) is None:
            return self
        return self._touched(now, items=line_items.apply_item_discount(self.items, item_id, discount_value))

    def change_discount_mode(self, mode: DiscountMode | str, *, now: datetime | None = None) -> Draft:
        return change_discount_mode(self, mode)._touched(now)

    def clear_items(self, *, now: datetime | None = None) -> Draft:
        return self._touched(now, items=[])

    def mark_converted(self, sale_id: str, *, now: datetime | None = None) -> Draft:
        stamp = now or _utcnow()
        return self._touched(stamp, is_converted=True, converted_to_sale_id=sale_id, converted_at=stamp)


class Sale(_LineAggregate):
    id: str = ""
    sale_number: str
    payment_method: PaymentMethod = PaymentMethod.CASH
    amount_received: Decimal = Field(ge=0)
    change_given: Decimal = ZERO
    status: SaleStatus = SaleStatus.COMPLETED
    cashier_id: str
    cashier_name: str
    created_at: datetime
    updated_at: datetime | None = None
    draft_id: str | None = None
    voided_at: datetime | None = None
    voided_by: str | None = None
    voided_by_name: str | None = None
    void_reason: str | None = None

    @property
    def is_voided(self) -> bool:
        return self.status is SaleStatus.VOIDED

    @property
    def is_completed(self) -> bool:
        return self.status is SaleStatus.COMPLETED

    @property
    def is_from_draft(self) -> bool:
        return bool(self.draft_id)

    @property
    def is_valid(self) -> bool:
        if self.is_empty:
            return False
        if self.amount_received < self.grand_total:
            return False
        return self.change_given >= 0

    def void(
        self,
        *,
        voided_by: str,
        voided_by_name: str,
        reason: str,
        now: datetime | None = None,
    ) -> Sale:
        stamp = now or _utcnow()
        return self.model_copy(
            update={
                "status": SaleStatus.VOIDED,
                "updated_at": stamp,
                "voided_at": stamp,
                "voided_by": voided_by,
                "voided_by_name": voided_by_name,
                "void_reason": reason,
            }
        )
