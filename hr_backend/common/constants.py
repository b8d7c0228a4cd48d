"""Enums, role capabilities and field limits for the HR directory."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    employee = "EMPLOYEE"
    manager = "MANAGER"
    hr = "HR"
    admin = "ADMIN"


# ── Absence ─────────────────────────────────────────────────────────

class AbsenceType(str, enum.Enum):
    vacation = "VACATION"
    sick_leave = "SICK_LEAVE"
    personal = "PERSONAL"
    unpaid = "UNPAID"


class AbsenceStatus(str, enum.Enum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"


# ── Capabilities per role ───────────────────────────────────────────
#
# Routers guard endpoints with require_permission(); the engine consults
# the same map to decide row visibility and mutation rights.

PERMISSIONS: dict[UserRole, frozenset[str]] = {
    UserRole.employee: frozenset({
        "employee:read_own",
        "employee:update_own",
        "team:read",
        "absence:request",
        "absence:respond",
        "feedback:give",
        "feedback:suggest",
    }),
    UserRole.manager: frozenset({
        "employee:read_own",
        "employee:read_reports",
        "employee:update_own",
        "employee:update_reports",
        "employee:create_report",
        "employee:delete",
        "team:read",
        "team:manage",
        "absence:request",
        "absence:respond",
        "feedback:give",
        "feedback:suggest",
    }),
    UserRole.hr: frozenset({
        "employee:read_own",
        "employee:read_all",
        "employee:update_own",
        "employee:update_all",
        "employee:create",
        "employee:delete",
        "team:read",
        "team:manage",
        "absence:request",
        "absence:respond",
        "feedback:give",
        "feedback:suggest",
    }),
}
PERMISSIONS[UserRole.admin] = PERMISSIONS[UserRole.hr]


def has_permission(role: UserRole, *capabilities: str) -> bool:
    """True if ``role`` holds at least one of ``capabilities``."""
    granted = PERMISSIONS.get(role, frozenset())
    return any(cap in granted for cap in capabilities)


# ── Field limits ────────────────────────────────────────────────────

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100
ORG_FIELD_MAX_LENGTH = 100
ABSENCE_REASON_MAX_LENGTH = 500
FEEDBACK_MIN_LENGTH = 10
FEEDBACK_MAX_LENGTH = 1000

MANAGER_POSITION_KEYWORDS = ("manager", "lead")
