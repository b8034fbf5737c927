from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles as stored in the users table."""

    FIELD_WORKER = "field_worker"
    SALES_OFFICE = "sales_office"
    SUB_ADMIN = "sub_admin"
    ADMIN = "admin"
    EXTERNAL = "external"


SUPERVISOR_ROLES = frozenset({Role.ADMIN, Role.SUB_ADMIN})

# Roles whose days are never reported as discrepancies.
ISSUE_EXEMPT_ROLES = frozenset({Role.ADMIN, Role.SALES_OFFICE, Role.EXTERNAL})


class AttendanceState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class DiscrepancyKind(str, Enum):
    """Result of comparing attendance minutes with reported work minutes."""

    NONE = "none"
    EXCESSIVE = "excessive"
    LOW = "low"
    ISSUE = "issue"


class BreakOverlapMode(str, Enum):
    SUM = "sum"
    MERGE = "merge"
