from .checkout_validation import (
    CheckoutValidationResult,
    SaleValidationIssue,
    VoidValidationResult,
    validate_checkout,
    validate_void_request,
)
from .config import ConfigError, CoreConfig, load_config
from .cost_code import decode_cost, default_cost_code_mapping, encode_cost, is_valid_code
from .cost_code_validation import (
    CostCodeIssue,
    CostCodeMappingError,
    CostCodeValidationResult,
    apply_mapping_update,
    ensure_valid_mapping,
    validate_cost_code_mapping,
)
from .financials import (
    AggregateTotals,
    aggregate_totals,
    change_discount_mode,
    clamp_discount_value,
    compute_change,
    is_payment_sufficient,
    line_item_discount,
    line_item_gross,
    line_item_net,
    line_item_profit,
    line_item_profit_margin,
    reset_discounts_for_mode_change,
)
from .logger import get_logger, log_action, set_log_level
from .models_cost_code import CostCodeMapping
from .models_sales import Cart, DiscountMode, Draft, PaymentMethod, Sale, SaleItem, SaleStatus
from .permissions import (
    CostDisplay,
    Permission,
    PermissionDecision,
    UserRole,
    check_permission,
    cost_display,
    has_permission,
    requires_password,
)

__all__ = [
    "AggregateTotals",
    "Cart",
    "CheckoutValidationResult",
    "ConfigError",
    "CoreConfig",
    "CostCodeIssue",
    "CostCodeMapping",
    "CostCodeMappingError",
    "CostCodeValidationResult",
    "CostDisplay",
    "DiscountMode",
    "Draft",
    "PaymentMethod",
    "Permission",
    "PermissionDecision",
    "Sale",
    "SaleItem",
    "SaleStatus",
    "SaleValidationIssue",
    "UserRole",
    "VoidValidationResult",
    "aggregate_totals",
    "apply_mapping_update",
    "change_discount_mode",
    "check_permission",
    "clamp_discount_value",
    "compute_change",
    "cost_display",
    "decode_cost",
    "default_cost_code_mapping",
    "encode_cost",
    "ensure_valid_mapping",
    "get_logger",
    "has_permission",
    "is_payment_sufficient",
    "is_valid_code",
    "line_item_discount",
    "line_item_gross",
    "line_item_net",
    "line_item_profit",
    "line_item_profit_margin",
    "load_config",
    "log_action",
    "requires_password",
    "reset_discounts_for_mode_change",
    "set_log_level",
    "validate_checkout",
    "validate_cost_code_mapping",
    "validate_void_request",
]
