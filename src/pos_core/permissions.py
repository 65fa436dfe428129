from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .cost_code import encode_cost
from .models_cost_code import CostCodeMapping


class UserRole(str, Enum):
    CASHIER = "cashier"
    STAFF = "staff"
    ADMIN = "admin"

    @classmethod
    def from_value(cls, value: str | None) -> UserRole:
        for member in cls:
            if member.value == (value or "").strip().lower():
                return member
        return cls.CASHIER

    @property
    def rank(self) -> int:
        return list(UserRole).index(self)

    def has_privilege_of(self, other: UserRole) -> bool:
        return self.rank >= other.rank


class Permission(str, Enum):
    ACCESS_POS = "access_pos"
    PROCESS_SALE = "process_sale"
    APPLY_DISCOUNT = "apply_discount"
    VOID_SALE = "void_sale"
    SAVE_DRAFT = "save_draft"
    VIEW_DRAFTS = "view_drafts"
    EDIT_DRAFT = "edit_draft"
    DELETE_DRAFT = "delete_draft"
    VIEW_INVENTORY = "view_inventory"
    VIEW_PRODUCT_COST = "view_product_cost"
    ADD_PRODUCT = "add_product"
    EDIT_PRODUCT = "edit_product"
    DELETE_PRODUCT = "delete_product"
    ACCESS_RECEIVING = "access_receiving"
    RECEIVE_STOCK = "receive_stock"
    BULK_RECEIVE = "bulk_receive"
    VIEW_SALES_REPORTS = "view_sales_reports"
    VIEW_PROFIT_REPORTS = "view_profit_reports"
    VIEW_SETTINGS = "view_settings"
    EDIT_COST_CODE_MAPPING = "edit_cost_code_mapping"


_CASHIER_PERMISSIONS = frozenset(
    {
        Permission.ACCESS_POS,
        Permission.PROCESS_SALE,
        Permission.APPLY_DISCOUNT,
        Permission.SAVE_DRAFT,
        Permission.VIEW_DRAFTS,
        Permission.EDIT_DRAFT,
        Permission.DELETE_DRAFT,
    }
)

# Staff sees inventory but never costs.
_STAFF_PERMISSIONS = _CASHIER_PERMISSIONS | {
    Permission.VIEW_INVENTORY,
    Permission.ACCESS_RECEIVING,
    Permission.RECEIVE_STOCK,
    Permission.BULK_RECEIVE,
}

_ROLE_PERMISSIONS: dict[UserRole, frozenset[Permission]] = {
    UserRole.CASHIER: _CASHIER_PERMISSIONS,
    UserRole.STAFF: _STAFF_PERMISSIONS,
    UserRole.ADMIN: frozenset(Permission),
}

PASSWORD_PROTECTED_PERMISSIONS = frozenset(
    {
        Permission.VIEW_PRODUCT_COST,
        Permission.VOID_SALE,
        Permission.EDIT_COST_CODE_MAPPING,
    }
)


@dataclass(frozen=True)
class PermissionDecision:
    allowed: bool
    reason: str = ""


@dataclass(frozen=True)
class CostDisplay:
    cost_code: str
    cost: Decimal | None = None

    @property
    def is_revealed(self) -> bool:
        return self.cost is not None


def permissions_for(role: UserRole) -> frozenset[Permission]:
    return _ROLE_PERMISSIONS[role]


def has_permission(role: UserRole, permission: Permission) -> bool:
    return permission in permissions_for(role)


def requires_password(permission: Permission) -> bool:
    return permission in PASSWORD_PROTECTED_PERMISSIONS


def check_permission(
    role: UserRole,
    permission: Permission,
    *,
    password_confirmed: bool = False,
) -> PermissionDecision:
    if not has_permission(role, permission):
        return PermissionDecision(False, f"role {role.value} lacks {permission.value}")
    if requires_password(permission) and not password_confirmed:
        return PermissionDecision(False, "password confirmation required")
    return PermissionDecision(True)


def cost_display(
    mapping: CostCodeMapping,
    unit_cost: Decimal | int | str,
    *,
    role: UserRole,
    password_confirmed: bool = False,
) -> CostDisplay:
    code = encode_cost(mapping, unit_cost)
    decision = check_permission(role, Permission.VIEW_PRODUCT_COST, password_confirmed=password_confirmed)
    if not decision.allowed:
        return CostDisplay(cost_code=code)
    return CostDisplay(cost_code=code, cost=Decimal(str(unit_cost)))
