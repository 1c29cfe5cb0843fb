from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.domain.models import Role

PERM_WILDCARD = "*"
PERM_REGISTRY_READ = "registry.read"
PERM_REGISTRY_WRITE = "registry.write"
PERM_REMINDER_READ = "reminder.read"
PERM_REMINDER_WRITE = "reminder.write"
PERM_DASHBOARD_READ = "dashboard.read"
PERM_REPORTING_READ = "reporting.read"
PERM_ADMIN = "admin"

INSPECTOR_PERMISSIONS = [
    PERM_REGISTRY_READ,
    PERM_REGISTRY_WRITE,
    PERM_REMINDER_READ,
    PERM_REMINDER_WRITE,
    PERM_DASHBOARD_READ,
]

ROLE_PERMISSIONS: dict[Role, list[str]] = {
    Role.INSPECTOR: INSPECTOR_PERMISSIONS,
    Role.SUPER_ADMIN: [PERM_WILDCARD],
}


def has_permission(claims: dict[str, Any], permission: str) -> bool:
    permissions = claims.get("permissions", [])
    if not isinstance(permissions, list):
        return False
    return permission in permissions or PERM_WILDCARD in permissions


@dataclass(frozen=True)
class SingleInspector:
    inspector_id: str

    def includes(self, inspector_id: str) -> bool:
        return inspector_id == self.inspector_id


@dataclass(frozen=True)
class AllInspectors:
    def includes(self, inspector_id: str) -> bool:
        return True


Scope = SingleInspector | AllInspectors


def scope_inspector_id(scope: Scope) -> str | None:
    if isinstance(scope, SingleInspector):
        return scope.inspector_id
    return None


def resolve_scope(claims: dict[str, Any], requested_inspector_id: str | None = None) -> Scope:
    """Inspectors always see their own records; the super admin may narrow to one inspector."""
    if claims.get("role") == Role.SUPER_ADMIN:
        if requested_inspector_id:
            return SingleInspector(requested_inspector_id)
        return AllInspectors()
    inspector_id = claims.get("inspector_id")
    if not isinstance(inspector_id, str) or not inspector_id:
        raise PermissionError("inspector token carries no inspector_id")
    return SingleInspector(inspector_id)
