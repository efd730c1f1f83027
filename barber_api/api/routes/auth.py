"""Authentication routes.

Provides email/password authentication endpoints:
- POST /auth/register: Create a client account and get a JWT token
- POST /auth/login: Exchange credentials for a JWT token
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from barber_api.api.dependencies import get_db
from barber_api.api.schemas import AuthResponse, LoginRequest, RegisterRequest
from barber_api.services.auth_service import AuthService


router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Get AuthService instance with database session."""
    return AuthService(db)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a client account and receive a JWT access token",
)
def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new client.

    Raises:
        409: Email already registered
        422: Invalid payload
    """
    return auth_service.register(
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        phone=request.phone,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Verify email and password and receive a JWT access token",
)
def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Log in with email and password.

    Raises:
        401: Invalid credentials
    """
    return auth_service.login(request.email, request.password)
