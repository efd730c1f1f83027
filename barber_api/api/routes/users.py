"""
User routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from barber_api.api.dependencies import get_current_user, get_db
from barber_api.api.schemas import UserOut
from barber_api.models.users import User
from barber_api.services.auth_service import AuthService


router = APIRouter(prefix="/users", tags=["Users"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.get("/me", response_model=UserOut, summary="Current user")
def get_me(
    user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Return the authenticated user."""
    return auth_service.get_user(user.id)
