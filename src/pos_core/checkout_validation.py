from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Sequence

from .config import CoreConfig
from .financials import HUNDRED, AggregateTotals, aggregate_totals
from .logger import get_logger, log_action
from .models_sales import DiscountMode, SaleItem, SaleStatus

DEFAULT_VOID_REASON_MIN_LENGTH = 5

_logger = get_logger()


@dataclass(frozen=True)
class SaleValidationIssue:
    field: str
    reason: str


@dataclass(frozen=True)
class CheckoutValidationResult:
    ok: bool
    totals: AggregateTotals
    issues: list[SaleValidationIssue]


@dataclass(frozen=True)
class VoidValidationResult:
    ok: bool
    issues: list[SaleValidationIssue]


def validate_checkout(
    *,
    items: Sequence[SaleItem | Mapping[str, Any]],
    discount_mode: DiscountMode | str | None,
    amount_received: Decimal | int | float | str,
    cashier_id: str | None,
) -> CheckoutValidationResult:
    mode = discount_mode if isinstance(discount_mode, DiscountMode) else DiscountMode.from_value(discount_mode)
    is_percentage = mode is DiscountMode.PERCENTAGE
    lines = [item if isinstance(item, SaleItem) else SaleItem.model_validate(item) for item in items]
    issues: list[SaleValidationIssue] = []

    if not lines:
        issues.append(SaleValidationIssue(field="items", reason="sale must contain at least one item"))
    for idx, line in enumerate(lines):
        if line.quantity <= 0:
            issues.append(SaleValidationIssue(field=f"items[{idx}].quantity", reason="quantity must be greater than 0"))
        if is_percentage and line.discount_value > HUNDRED:
            issues.append(
                SaleValidationIssue(
                    field=f"items[{idx}].discount_value",
                    reason="percentage discount must be between 0 and 100",
                )
            )

    totals = aggregate_totals(lines, is_percentage)
    received = Decimal(str(amount_received))
    if received < totals.grand_total:
        issues.append(SaleValidationIssue(field="amount_received", reason="payment does not cover grand total"))
    if cashier_id is None or not cashier_id.strip():
        issues.append(SaleValidationIssue(field="cashier_id", reason="is required"))

    return CheckoutValidationResult(ok=not issues, totals=totals, issues=issues)


def validate_void_request(
    *,
    status: SaleStatus | str,
    reason: str | None,
    voided_by: str | None,
    actor_role: str | None = None,
    min_reason_length: int | None = None,
    config: CoreConfig | None = None,
) -> VoidValidationResult:
    """Check a void request. An explicit ``min_reason_length`` wins over ``config``."""
    if min_reason_length is None:
        min_reason_length = config.void_reason_min_length if config else DEFAULT_VOID_REASON_MIN_LENGTH
    issues: list[SaleValidationIssue] = []
    text = (reason or "").strip()
    if not text:
        issues.append(SaleValidationIssue(field="reason", reason="is required"))
    elif len(text) < min_reason_length:
        issues.append(
            SaleValidationIssue(field="reason", reason=f"must be at least {min_reason_length} characters")
        )
    if voided_by is None or not voided_by.strip():
        issues.append(SaleValidationIssue(field="voided_by", reason="is required"))
    current = _parse_status(status)
    if current is None:
        issues.append(SaleValidationIssue(field="status", reason=f"unknown sale status {status!r}"))
    elif current is SaleStatus.VOIDED:
        issues.append(SaleValidationIssue(field="status", reason="sale has already been voided"))

    log_action(
        _logger,
        "sales",
        "void_sale",
        actor_role,
        "accepted" if not issues else "rejected",
        issues=[issue.field for issue in issues],
    )
    return VoidValidationResult(ok=not issues, issues=issues)


def _parse_status(status: SaleStatus | str | None) -> SaleStatus | None:
    if isinstance(status, SaleStatus):
        return status
    try:
        return SaleStatus((status or "").strip().lower())
    except ValueError:
        return None
