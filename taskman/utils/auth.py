# taskman/utils/auth.py
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from taskman.config.settings import Settings
from taskman.database import get_db
from taskman.errors import Forbidden, Unauthenticated
from taskman.models.user import User
from taskman.utils.permissions import Role
from taskman.utils.security import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated actor, resolved once per request"""
    id: int
    role: str
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def has_permission(self, permission: str) -> bool:
        return self.is_admin or permission in self.permissions


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No auth token provided")

    payload = verify_token(credentials.credentials, settings)
    if payload is None:
        raise Unauthenticated("Invalid token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthenticated("Invalid user identifier in token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthenticated("Invalid token")

    return Identity(
        id=user.id,
        role=user.role,
        permissions=frozenset(user.permissions or []),
        name=user.name,
    )


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_admin:
        raise Forbidden("Access denied. Admin only.")
    return identity


def require_permission(permission: str):
    """Dependency factory: admin, or an identity holding the given permission"""

    def checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        if not identity.has_permission(permission):
            raise Forbidden("Permission denied")
        return identity

    return checker
