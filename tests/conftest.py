from __future__ import annotations

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = BASE_DIR / "src"

sys.path.insert(0, str(SRC_DIR))

from pos_core.models_sales import SaleItem  # noqa: E402


@pytest.fixture
def make_item():
    def _make(
        item_id: str = "line-1",
        *,
        product_id: str = "prod-1",
        unit_price: str = "100",
        unit_cost: str = "60",
        quantity: int = 1,
        discount_value: str = "0",
    ) -> SaleItem:
        return SaleItem(
            id=item_id,
            product_id=product_id,
            sku=f"SKU-{product_id}",
            name=f"Item {product_id}",
            unit_price=unit_price,
            unit_cost=unit_cost,
            quantity=quantity,
            discount_value=discount_value,
        )

    return _make
