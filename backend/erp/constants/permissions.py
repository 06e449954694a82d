"""Static role -> permission table.

Single source of truth for the authorization surface. Built once at import and
never mutated; changing access means editing this file and redeploying.
Never rename tokens silently: add new ones and retire the old ones.
"""
from __future__ import annotations
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping


class Role(str, Enum):
    SUPER_ADMIN = 'Super Admin'
    MANAGER = 'Manager'
    STOREKEEPER = 'Storekeeper'
    ACCOUNTANT = 'Accountant'


# Grouping is for readability only; tokens are opaque.
PERMISSION_AREAS: Dict[str, List[str]] = {
    'users': ['manage_users', 'manage_staff', 'view_staff'],
    'fleet': ['manage_fleet', 'view_fleet', 'manage_maintenance'],
    'documents': ['manage_truck_documents', 'view_truck_documents'],
    'inventory': [
        'manage_inventory', 'view_inventory', 'create_inventory_item',
        'approve_inventory_items', 'manage_silos',
    ],
    'material_requests': [
        'approve_material_requests', 'create_material_requests',
        'view_material_requests', 'view_own_material_requests',
    ],
    'stock_transactions': [
        'approve_stock_transactions', 'create_stock_transactions', 'view_stock_transactions',
    ],
    'production': ['manage_recipes', 'view_recipes', 'log_production', 'view_production_runs'],
    'fuel': ['manage_fuel', 'view_fuel_logs', 'log_fuel'],
    'exceptions': ['manage_exceptions', 'create_exception', 'view_exceptions'],
    'reporting': ['view_analytics', 'view_financials', 'manage_system_settings'],
    'crm': ['view_crm', 'manage_clients', 'manage_expenses', 'approve_expenses', 'view_expense_reports'],
    'orders': ['manage_orders', 'approve_orders', 'view_orders'],
}


def build_all_permissions() -> FrozenSet[str]:
    tokens: List[str] = []
    for area_tokens in PERMISSION_AREAS.values():
        tokens.extend(area_tokens)
    return frozenset(tokens)

ALL_PERMISSIONS = build_all_permissions()

MANAGE_SYSTEM_SETTINGS = 'manage_system_settings'

_CRM = PERMISSION_AREAS['crm']
_ORDERS = PERMISSION_AREAS['orders']

ROLE_GRANTS: Dict[Role, List[str]] = {
    # Super Admin sees every request, so the "own requests" scope does not apply
    Role.SUPER_ADMIN: sorted(ALL_PERMISSIONS - {'view_own_material_requests'}),
    Role.MANAGER: [
        'view_staff',
        'view_fleet', 'manage_maintenance',
        'manage_truck_documents', 'view_truck_documents',
        'view_inventory', 'approve_inventory_items',
        'approve_material_requests', 'create_material_requests', 'view_material_requests',
        'approve_stock_transactions', 'create_stock_transactions', 'view_stock_transactions',
        'view_recipes', 'log_production', 'view_production_runs',
        'view_fuel_logs', 'log_fuel',
        'create_exception', 'manage_exceptions', 'view_exceptions',
        'view_analytics', 'view_financials',
        *_CRM,
        *_ORDERS,
    ],
    Role.STOREKEEPER: [
        'create_inventory_item', 'view_inventory',
        'create_material_requests', 'view_own_material_requests',
        'create_stock_transactions',
        'view_recipes', 'log_production',
        'create_exception', 'view_exceptions',
        'log_fuel', 'view_fuel_logs',
        'view_orders',
    ],
    Role.ACCOUNTANT: [
        'view_fleet', 'view_truck_documents',
        'view_inventory', 'view_material_requests', 'view_stock_transactions',
        'view_recipes', 'view_production_runs',
        'view_fuel_logs', 'view_exceptions',
        'view_analytics', 'view_financials',
        # CRM: view and record expenses only
        'view_crm', 'manage_expenses', 'view_expense_reports',
        'view_orders',
    ],
}


def build_role_permissions(grants: Mapping[Role, Iterable[str]]) -> Mapping[Role, FrozenSet[str]]:
    """Freeze the grant lists into a read-only table.

    Raises ValueError when a role has no entry or a grant names an unknown token,
    so a bad table fails at import instead of silently denying at request time.
    """
    table: Dict[Role, FrozenSet[str]] = {}
    for role in Role:
        if role not in grants:
            raise ValueError(f"Role '{role.value}' has no permission entry")
        codes = frozenset(grants[role])
        unknown = codes - ALL_PERMISSIONS
        if unknown:
            raise ValueError(f"Role '{role.value}' grants unknown permissions: {sorted(unknown)}")
        table[role] = codes
    return MappingProxyType(table)

ROLE_PERMISSIONS = build_role_permissions(ROLE_GRANTS)

__all__ = [
    'Role', 'PERMISSION_AREAS', 'ALL_PERMISSIONS', 'MANAGE_SYSTEM_SETTINGS',
    'ROLE_GRANTS', 'ROLE_PERMISSIONS', 'build_all_permissions', 'build_role_permissions',
]
