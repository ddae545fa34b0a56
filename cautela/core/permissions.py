#!/usr/bin/env python

"""
    Role based capabilities for Cautela.

    Every check is a lookup in `GRANTS`; roles outside the closed
    `Role` enumeration (or no role at all) are granted nothing.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import enum
from typing import Optional, Union


class Role(str, enum.Enum):
    COMMON = "COMMON"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class Permission(enum.Enum):
    MANAGE_USERS = "manage_users"
    MANAGE_EQUIPMENTS = "manage_equipments"
    MANAGE_CATEGORIES = "manage_categories"
    CREATE_LOANS = "create_loans"
    GENERATE_REPORTS = "generate_reports"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ADMINS = frozenset({Role.ADMIN, Role.SUPER_ADMIN})

GRANTS = {
    Permission.MANAGE_USERS: ADMINS,
    Permission.MANAGE_EQUIPMENTS: ADMINS,
    Permission.MANAGE_CATEGORIES: ADMINS,
    Permission.CREATE_LOANS: frozenset(Role),
    Permission.GENERATE_REPORTS: frozenset({Role.SUPER_ADMIN}),
    Permission.ADMIN: ADMINS,
    Permission.SUPER_ADMIN: frozenset({Role.SUPER_ADMIN}),
}


def to_role(value) -> Optional[Role]:
    """Returns the `Role` for `value`, or None when it is not one."""
    if isinstance(value, Role):
        return value
    # Accept any enum member carrying a role name as its value
    value = getattr(value, "value", value)
    try:
        return Role(value)
    except (ValueError, TypeError):
        return None


def has_permission(role: Union[Role, str, None], permission: Permission) -> bool:
    role = to_role(role)
    return role is not None and role in GRANTS.get(permission, frozenset())


def is_admin(role) -> bool:
    return has_permission(role, Permission.ADMIN)

def is_super_admin(role) -> bool:
    return has_permission(role, Permission.SUPER_ADMIN)

def can_manage_users(role) -> bool:
    return has_permission(role, Permission.MANAGE_USERS)

def can_create_loans(role) -> bool:
    return has_permission(role, Permission.CREATE_LOANS)

def can_manage_equipments(role) -> bool:
    return has_permission(role, Permission.MANAGE_EQUIPMENTS)

def can_manage_categories(role) -> bool:
    return has_permission(role, Permission.MANAGE_CATEGORIES)

def can_generate_reports(role) -> bool:
    return has_permission(role, Permission.GENERATE_REPORTS)
