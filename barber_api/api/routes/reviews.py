"""
Review routes addressed by review rather than by barber.
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from barber_api.api.dependencies import get_current_user, get_db
from barber_api.api.schemas import ReviewForBarberRequest, ReviewOut
from barber_api.models.users import User
from barber_api.services.review_service import ReviewService


router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.post(
    "",
    response_model=ReviewOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
)
def create_review(
    request: ReviewForBarberRequest,
    user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    """Same gating as POST /barbers/{id}/reviews, with the barber in the body."""
    return review_service.create_review(
        client_id=user.id,
        barber_id=request.barber_id,
        rating=request.rating,
        comment=request.comment,
    )


@router.get("/barber/{barber_id}", response_model=List[ReviewOut], summary="Reviews of a barber")
def list_for_barber(
    barber_id: UUID,
    review_service: ReviewService = Depends(get_review_service),
):
    """Reviews newest first, without aggregates."""
    return review_service.get_reviews_for_barber(barber_id)
