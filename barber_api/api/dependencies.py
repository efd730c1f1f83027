"""
API dependencies for FastAPI dependency injection.

Provides database sessions, authentication and role capability checks.
"""
from typing import Callable, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jwt.exceptions import InvalidTokenError
from sqlalchemy.orm import Session

from barber_api.api.middleware.error_handler import ForbiddenException, UnauthorizedException
from barber_api.lib.db import get_db as get_db_session
from barber_api.lib.jwt import verify_token
from barber_api.models.users import User, UserRole
from barber_api.services.payment_provider import PaymentProvider, get_payment_provider


# Re-export get_db for convenience
get_db = get_db_session


# Missing credentials are reported as 401 by get_current_user, not by the scheme
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get current authenticated user from JWT token.

    The user row is re-read on every request so a role promotion made
    after the token was issued takes effect immediately.

    Raises:
        UnauthorizedException: If the token is missing, invalid, or the user no longer exists
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    try:
        payload = verify_token(credentials.credentials)
        user_id = UUID(payload["sub"])
    except (InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedException("Invalid authentication token")

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedException("User not found")

    return user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Build a capability check for a handler.

    ADMIN passes every check.

    Usage:
        @router.get("/barber/me")
        def handler(user: User = Depends(require_roles(UserRole.BARBER))):
            ...
    """
    allowed = frozenset(roles) | {UserRole.ADMIN}

    def check_role(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise ForbiddenException(
                f"This action requires one of the roles: {', '.join(sorted(r.value for r in roles))}"
            )
        return user

    return check_role


def get_provider() -> PaymentProvider:
    """Payment provider dependency; overridden in tests."""
    return get_payment_provider()
