from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, FrozenSet, Optional
from flask_jwt_extended import get_jwt, get_jwt_identity
from erp.constants.permissions import Role, ROLE_PERMISSIONS
from erp.errors import AuthorizationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    user_id: Optional[str]
    name: Optional[str]
    role: Optional[str]

    @property
    def display_name(self) -> str:
        return self.name or 'Unknown'


def resolve_role(role: Any) -> Optional[Role]:
    """Map an untrusted role value onto the closed Role set, or None."""
    if isinstance(role, Role):
        return role
    if not isinstance(role, str):
        return None
    try:
        return Role(role)
    except ValueError:
        return None


def permissions_for_role(role: Any) -> FrozenSet[str]:
    resolved = resolve_role(role)
    if resolved is None:
        return frozenset()
    return ROLE_PERMISSIONS[resolved]


def has_permission(role: Any, permission: str) -> bool:
    # Unknown or stale roles and malformed tokens are denied, never raised
    if not isinstance(permission, str):
        return False
    resolved = resolve_role(role)
    if resolved is None:
        return False
    return permission in ROLE_PERMISSIONS[resolved]


def check_permission(role: Any, permission: str) -> None:
    if not has_permission(role, permission):
        logger.warning('permission denied: role=%r permission=%s', role, permission)
        raise AuthorizationError(permission)


def current_actor() -> Actor:
    """Build the Actor from the verified JWT of the current request."""
    claims = get_jwt()
    return Actor(user_id=get_jwt_identity(), name=claims.get('name'), role=claims.get('role'))


SYSTEM_ACTOR = Actor(user_id=None, name='system', role=Role.SUPER_ADMIN.value)

__all__ = [
    'Actor', 'SYSTEM_ACTOR', 'resolve_role', 'permissions_for_role', 'has_permission',
    'check_permission', 'current_actor',
]
