"""Authentication service for email/password accounts.

Handles registration, login and token issuance. Every successful call
returns the public user view together with a signed access token.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from barber_api.api.middleware.error_handler import (
    ConflictException,
    NotFoundException,
    UnauthorizedException,
)
from barber_api.api.schemas import AuthResponse, UserOut
from barber_api.lib.jwt import create_access_token
from barber_api.lib.logging import get_logger
from barber_api.lib.security import hash_password, verify_password
from barber_api.models.users import User, UserRole


logger = get_logger(__name__)


class AuthService:
    """Registration and credential checks.

    New accounts are always created as CLIENT; the barber profile flow
    promotes them later.
    """

    def __init__(self, session: Session):
        self.session = session

    def register(self, email: str, password: str, full_name: str, phone: Optional[str] = None) -> AuthResponse:
        """Create a CLIENT account and issue a token.

        Raises:
            ConflictException: If the email is already registered
        """
        existing = self.session.execute(
            select(User.id).where(User.email == email)
        ).scalar_one_or_none()
        if existing is not None:
            raise ConflictException("Email already registered", details={"email": email})

        user = User(
            email=email,
            password=hash_password(password),
            full_name=full_name,
            phone=phone,
            role=UserRole.CLIENT,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration with the same email
            self.session.rollback()
            raise ConflictException("Email already registered", details={"email": email})
        self.session.refresh(user)

        logger.info("User registered", extra={"user_id": str(user.id)})
        return self._auth_response(user)

    def login(self, email: str, password: str) -> AuthResponse:
        """Check credentials and issue a token.

        Raises:
            UnauthorizedException: If the email is unknown or the password is wrong
        """
        user = self.session.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

        if user is None or not verify_password(password, user.password):
            raise UnauthorizedException("Invalid credentials")

        return self._auth_response(user)

    def get_user(self, user_id: UUID) -> UserOut:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundException("User", str(user_id))
        return UserOut.model_validate(user)

    @staticmethod
    def _auth_response(user: User) -> AuthResponse:
        token = create_access_token(
            user_id=str(user.id),
            email=user.email,
            role=user.role.value,
        )
        return AuthResponse(user=UserOut.model_validate(user), access_token=token)
