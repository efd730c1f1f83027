"""Review service: gated review creation and on-read rating aggregates."""
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from barber_api.api.middleware.error_handler import ForbiddenException, NotFoundException
from barber_api.api.schemas import BarberReviewsOut, ReviewOut, UserSummary
from barber_api.lib.logging import get_logger
from barber_api.models.barbers import BarberProfile
from barber_api.models.bookings import Booking, BookingStatus
from barber_api.models.reviews import Review
from barber_api.models.users import User


logger = get_logger(__name__)

# Booking states that qualify a client to review the barber
REVIEW_QUALIFYING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)

RatingStats = Tuple[Optional[float], int]


def average_rating(total: int, count: int) -> Optional[float]:
    """Arithmetic mean of `count` ratings summing to `total`; None when empty."""
    if count == 0:
        return None
    return total / count


class ReviewService:
    """Creates reviews and reads them back with client summaries."""

    def __init__(self, session: Session):
        self.session = session

    def create_review(
        self,
        client_id: UUID,
        barber_id: UUID,
        rating: int,
        comment: Optional[str] = None,
    ) -> ReviewOut:
        """Create a review after checking the client may leave one.

        Raises:
            NotFoundException: If the barber does not exist
            ForbiddenException: On self-review, or without a confirmed/completed booking
        """
        barber = self._get_barber(barber_id)

        if barber.user_id == client_id:
            raise ForbiddenException("You cannot review your own barber profile")

        qualifying_booking = self.session.execute(
            select(Booking.id)
            .where(
                Booking.client_id == client_id,
                Booking.barber_id == barber_id,
                Booking.status.in_(REVIEW_QUALIFYING_STATUSES),
            )
            .limit(1)
        ).scalar_one_or_none()
        if qualifying_booking is None:
            raise ForbiddenException(
                "You need a confirmed or completed booking with this barber to leave a review"
            )

        review = Review(
            client_id=client_id,
            barber_id=barber_id,
            rating=rating,
            comment=comment,
        )
        self.session.add(review)
        self.session.commit()
        self.session.refresh(review)

        client = self.session.get(User, client_id)
        logger.info(
            "Review created",
            extra={"review_id": str(review.id), "barber_id": str(barber_id), "rating": rating},
        )
        return self._to_review_out(review, client)

    def list_for_barber(self, barber_id: UUID, limit: Optional[int] = None) -> List[ReviewOut]:
        """Reviews of a barber, newest first, each with the client summary."""
        stmt = (
            select(Review, User)
            .join(User, User.id == Review.client_id)
            .where(Review.barber_id == barber_id)
            .order_by(Review.created_at.desc(), Review.id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        return [self._to_review_out(review, client) for review, client in self.session.execute(stmt)]

    def get_reviews_for_barber(self, barber_id: UUID) -> List[ReviewOut]:
        """Reviews of an existing barber, newest first, without aggregates.

        Raises:
            NotFoundException: If the barber does not exist
        """
        self._get_barber(barber_id)
        return self.list_for_barber(barber_id)

    def get_barber_reviews(self, barber_id: UUID) -> BarberReviewsOut:
        """All reviews of a barber plus rating stats.

        Raises:
            NotFoundException: If the barber does not exist
        """
        self._get_barber(barber_id)
        reviews = self.list_for_barber(barber_id)
        average, count = self.rating_stats([barber_id])[barber_id]
        return BarberReviewsOut(reviews=reviews, rating_average=average, rating_count=count)

    def rating_stats(self, barber_ids: Iterable[UUID]) -> Dict[UUID, RatingStats]:
        """(average, count) per barber, computed from the review rows.

        Barbers without reviews map to (None, 0).
        """
        ids = list(barber_ids)
        stats: Dict[UUID, RatingStats] = {barber_id: (None, 0) for barber_id in ids}
        if not ids:
            return stats

        rows = self.session.execute(
            select(Review.barber_id, func.count(Review.id), func.sum(Review.rating))
            .where(Review.barber_id.in_(ids))
            .group_by(Review.barber_id)
        )
        for barber_id, count, total in rows:
            stats[barber_id] = (average_rating(int(total or 0), int(count)), int(count))
        return stats

    def _get_barber(self, barber_id: UUID) -> BarberProfile:
        barber = self.session.get(BarberProfile, barber_id)
        if barber is None:
            raise NotFoundException("Barber", str(barber_id))
        return barber

    @staticmethod
    def _to_review_out(review: Review, client: User) -> ReviewOut:
        return ReviewOut(
            id=review.id,
            barber_id=review.barber_id,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
            client=UserSummary(id=client.id, full_name=client.full_name),
        )
