from typing import Optional
from schemas.user import (
    ROLE_USER, ROLE_SHOPKEEPER, ROLE_ADMIN, ROLE_SUPER_ADMIN, PROVIDER_ROLES
)

USER_HOME = "/(user)/home"
PROVIDER_HOME = "/(tabs)/_admin-home"
SUPER_ADMIN_HOME = "/(tabs)/_super-admin-home"

ROLE_ROUTES = {
    ROLE_USER: USER_HOME,
    ROLE_SHOPKEEPER: PROVIDER_HOME,
    ROLE_ADMIN: PROVIDER_HOME,
    ROLE_SUPER_ADMIN: SUPER_ADMIN_HOME,
}


def resolve_role(role: Optional[str]) -> str:
    """Unknown or missing roles fall back to a plain user."""
    if role in ROLE_ROUTES:
        return role
    return ROLE_USER


def route_for_role(role: Optional[str]) -> str:
    return ROLE_ROUTES[resolve_role(role)]


def is_provider(role: Optional[str]) -> bool:
    return resolve_role(role) in PROVIDER_ROLES
