"""
Barber routes: profiles, services, nearby search and per-barber reviews.
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from barber_api.api.dependencies import get_current_user, get_db, require_roles
from barber_api.api.schemas import (
    BarberDetailOut,
    BarberOut,
    BarberProfileRequest,
    BarberReviewsOut,
    ReviewCreateRequest,
    ReviewOut,
    ServiceCreateRequest,
    ServiceOut,
    ServiceUpdateRequest,
)
from barber_api.models.users import User, UserRole
from barber_api.services.barber_service import BarberService
from barber_api.services.review_service import ReviewService


router = APIRouter(prefix="/barbers", tags=["Barbers"])


def get_barber_service(db: Session = Depends(get_db)) -> BarberService:
    return BarberService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.post(
    "/profile",
    response_model=BarberOut,
    summary="Create or update own barber profile",
)
def upsert_profile(
    request: BarberProfileRequest,
    user: User = Depends(get_current_user),
    barber_service: BarberService = Depends(get_barber_service),
):
    """
    Create the caller's barber profile, or update it if it already exists.

    A CLIENT account is promoted to BARBER.
    """
    return barber_service.upsert_profile(user.id, request)


@router.post(
    "/me/services",
    response_model=ServiceOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a service to own profile",
)
def add_service(
    request: ServiceCreateRequest,
    user: User = Depends(require_roles(UserRole.BARBER)),
    barber_service: BarberService = Depends(get_barber_service),
):
    return barber_service.add_service(user.id, request)


@router.patch(
    "/me/services/{service_id}",
    response_model=ServiceOut,
    summary="Update one of own services",
)
def update_service(
    service_id: UUID,
    request: ServiceUpdateRequest,
    user: User = Depends(require_roles(UserRole.BARBER)),
    barber_service: BarberService = Depends(get_barber_service),
):
    """Existing bookings keep the price they were made at."""
    return barber_service.update_service(user.id, service_id, request)


@router.get("/nearby", response_model=List[BarberOut], summary="Search barbers")
def get_nearby(
    postal_code: Optional[str] = Query(None, alias="postalCode", description="Postal code prefix"),
    city: Optional[str] = Query(None, description="City, case-insensitive"),
    barber_service: BarberService = Depends(get_barber_service),
):
    """
    List barbers matching a postal-code prefix or a city.

    Query parameters:
    - postalCode: e.g. H3N or H3N 1Y4
    - city: e.g. Montreal

    Filters are OR-combined. Each barber carries ratingAverage/ratingCount.
    """
    return barber_service.find_nearby(postal_code=postal_code, city=city)


@router.get("/{barber_id}", response_model=BarberDetailOut, summary="Barber details")
def get_barber(
    barber_id: UUID,
    barber_service: BarberService = Depends(get_barber_service),
):
    """Barber with services, recent reviews and rating stats."""
    return barber_service.get_barber(barber_id)


@router.post(
    "/{barber_id}/reviews",
    response_model=ReviewOut,
    status_code=status.HTTP_201_CREATED,
    summary="Review a barber",
)
def create_review(
    barber_id: UUID,
    request: ReviewCreateRequest,
    user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    """
    Leave a review. Requires a confirmed or completed booking with the
    barber; barbers cannot review themselves.
    """
    return review_service.create_review(
        client_id=user.id,
        barber_id=barber_id,
        rating=request.rating,
        comment=request.comment,
    )


@router.get(
    "/{barber_id}/reviews",
    response_model=BarberReviewsOut,
    summary="Barber reviews with rating stats",
)
def get_reviews(
    barber_id: UUID,
    review_service: ReviewService = Depends(get_review_service),
):
    return review_service.get_barber_reviews(barber_id)
