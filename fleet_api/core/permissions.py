"""
Role based permission table.

Every protected operation is listed here once. The authorization dependency
in ``fleet_api.api.deps`` consults this table and nothing else; an operation
missing from the table is denied.
"""
from typing import Dict, FrozenSet, Optional

from fleet_api.schemas.auth import Role

ALL_ROLES: FrozenSet[Role] = frozenset(Role)
FLEET_MANAGER = frozenset({Role.fleet_manager})
DISPATCHER = frozenset({Role.dispatcher})
SAFETY_OFFICER = frozenset({Role.safety_officer})
FINANCIAL_ANALYST = frozenset({Role.financial_analyst})
ANALYTICS_READERS = frozenset({Role.fleet_manager, Role.financial_analyst})

PERMISSIONS: Dict[str, FrozenSet[Role]] = {
    "auth:profile": ALL_ROLES,

    "vehicles:read": ALL_ROLES,
    "vehicles:analytics": ALL_ROLES,
    "vehicles:create": FLEET_MANAGER,
    "vehicles:update": FLEET_MANAGER,
    "vehicles:retire": FLEET_MANAGER,
    "vehicles:delete": FLEET_MANAGER,

    "drivers:read": ALL_ROLES,
    "drivers:create": SAFETY_OFFICER,
    "drivers:update": SAFETY_OFFICER,
    "drivers:status": SAFETY_OFFICER,

    "trips:read": ALL_ROLES,
    "trips:create": DISPATCHER,
    "trips:update": DISPATCHER,
    "trips:delete": DISPATCHER,
    "trips:dispatch": DISPATCHER,
    "trips:complete": DISPATCHER,
    "trips:cancel": DISPATCHER,

    "maintenance:read": ALL_ROLES,
    "maintenance:write": FLEET_MANAGER,

    "fuel:read": ALL_ROLES,
    "fuel:write": FINANCIAL_ANALYST,

    "analytics:read": ANALYTICS_READERS,
}


def parse_role(value: Optional[str]) -> Optional[Role]:
    """Case-insensitive lookup of a stored role string."""
    if not value:
        return None
    wanted = value.strip().lower()
    for role in Role:
        if role.value.lower() == wanted:
            return role
    return None


def is_allowed(operation: str, role: Optional[str]) -> bool:
    allowed = PERMISSIONS.get(operation)
    if not allowed:
        return False
    parsed = parse_role(role)
    return parsed is not None and parsed in allowed
