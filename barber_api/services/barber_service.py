"""Barber profile service.

Profile upsert, nearby search, barber details and service management.
Responses are assembled from a fixed number of flat queries (profiles,
their services, rating aggregates) rather than nested ORM loads.
"""
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from barber_api.api.middleware.error_handler import ForbiddenException, NotFoundException
from barber_api.api.schemas import (
    BarberDetailOut,
    BarberOut,
    BarberProfileRequest,
    ServiceCreateRequest,
    ServiceOut,
    ServiceUpdateRequest,
    UserSummary,
)
from barber_api.lib.logging import get_logger
from barber_api.lib.settings import settings
from barber_api.models.barbers import BarberProfile
from barber_api.models.services import Service
from barber_api.models.users import User, UserRole
from barber_api.services.review_service import ReviewService


logger = get_logger(__name__)

# Service columns that cannot be cleared with an explicit null
_REQUIRED_SERVICE_FIELDS = frozenset({"name", "duration_min", "price_cents"})


def get_profile_for_user(session: Session, user_id: UUID) -> Optional[BarberProfile]:
    """The barber profile owned by a user, if any."""
    return session.execute(
        select(BarberProfile).where(BarberProfile.user_id == user_id)
    ).scalar_one_or_none()


class BarberService:
    """Barber profiles and the services they offer."""

    def __init__(self, session: Session):
        self.session = session
        self.reviews = ReviewService(session)

    def upsert_profile(self, user_id: UUID, data: BarberProfileRequest) -> BarberOut:
        """Create or update the caller's profile, promoting a CLIENT to BARBER.

        Raises:
            NotFoundException: If the user does not exist
        """
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundException("User", str(user_id))

        if user.role == UserRole.CLIENT:
            user.role = UserRole.BARBER

        fields = data.model_dump()
        fields["postal_code"] = fields["postal_code"].strip().upper()

        profile = get_profile_for_user(self.session, user_id)
        created = profile is None
        if created:
            profile = BarberProfile(user_id=user_id, **fields)
            self.session.add(profile)
        else:
            for name, value in fields.items():
                setattr(profile, name, value)

        self.session.commit()
        self.session.refresh(profile)

        logger.info(
            "Barber profile created" if created else "Barber profile updated",
            extra={"barber_id": str(profile.id), "user_id": str(user_id)},
        )
        return self._assemble([(profile, user)])[0]

    def find_nearby(self, postal_code: Optional[str] = None, city: Optional[str] = None) -> List[BarberOut]:
        """Profiles matching a postal-code prefix OR a city, case-insensitive.

        Not geospatial: latitude/longitude are ignored. Without any filter the
        result is capped tighter than with one.
        """
        postal_code = (postal_code or "").strip().upper()
        city = (city or "").strip()

        filters = []
        if postal_code:
            filters.append(BarberProfile.postal_code.startswith(postal_code, autoescape=True))
        if city:
            filters.append(func.lower(BarberProfile.city) == city.lower())

        stmt = (
            select(BarberProfile, User)
            .join(User, User.id == BarberProfile.user_id)
            .order_by(BarberProfile.shop_name, BarberProfile.id)
        )
        if filters:
            stmt = stmt.where(or_(*filters)).limit(settings.nearby_filtered_limit)
        else:
            stmt = stmt.limit(settings.nearby_default_limit)

        rows = [(profile, user) for profile, user in self.session.execute(stmt)]
        return self._assemble(rows)

    def get_barber(self, barber_id: UUID) -> BarberDetailOut:
        """Profile with services, the most recent reviews and rating stats.

        Raises:
            NotFoundException: If the barber does not exist
        """
        row = self.session.execute(
            select(BarberProfile, User)
            .join(User, User.id == BarberProfile.user_id)
            .where(BarberProfile.id == barber_id)
        ).first()
        if row is None:
            raise NotFoundException("Barber", str(barber_id))

        barber = self._assemble([(row[0], row[1])])[0]
        recent = self.reviews.list_for_barber(barber_id, limit=settings.recent_reviews_limit)
        return BarberDetailOut(**barber.model_dump(), reviews=recent)

    def add_service(self, user_id: UUID, data: ServiceCreateRequest) -> ServiceOut:
        """Add a service to the caller's profile.

        Raises:
            ForbiddenException: If the caller has no barber profile
        """
        profile = self._require_profile(user_id)

        service = Service(barber_id=profile.id, **data.model_dump())
        self.session.add(service)
        self.session.commit()
        self.session.refresh(service)

        logger.info(
            "Service created",
            extra={"service_id": str(service.id), "barber_id": str(profile.id)},
        )
        return ServiceOut.model_validate(service)

    def update_service(self, user_id: UUID, service_id: UUID, data: ServiceUpdateRequest) -> ServiceOut:
        """Update a service owned by the caller. Booking snapshots are untouched.

        Raises:
            NotFoundException: If the service does not exist
            ForbiddenException: If the caller does not own the service
        """
        profile = self._require_profile(user_id)

        service = self.session.get(Service, service_id)
        if service is None:
            raise NotFoundException("Service", str(service_id))
        if service.barber_id != profile.id:
            raise ForbiddenException("You can only modify your own services")

        for name, value in data.model_dump(exclude_unset=True).items():
            if value is None and name in _REQUIRED_SERVICE_FIELDS:
                continue
            setattr(service, name, value)

        self.session.commit()
        self.session.refresh(service)

        logger.info(
            "Service updated",
            extra={"service_id": str(service.id), "price_cents": service.price_cents},
        )
        return ServiceOut.model_validate(service)

    def _require_profile(self, user_id: UUID) -> BarberProfile:
        profile = get_profile_for_user(self.session, user_id)
        if profile is None:
            raise ForbiddenException("This account is not set up as a barber")
        return profile

    def _services_by_barber(self, barber_ids: Sequence[UUID]) -> Dict[UUID, List[ServiceOut]]:
        grouped: Dict[UUID, List[ServiceOut]] = defaultdict(list)
        if not barber_ids:
            return grouped

        services = self.session.execute(
            select(Service)
            .where(Service.barber_id.in_(barber_ids))
            .order_by(Service.price_cents, Service.name)
        ).scalars()
        for service in services:
            grouped[service.barber_id].append(ServiceOut.model_validate(service))
        return grouped

    def _assemble(self, rows: Sequence[Tuple[BarberProfile, User]]) -> List[BarberOut]:
        barber_ids = [profile.id for profile, _ in rows]
        services = self._services_by_barber(barber_ids)
        stats = self.reviews.rating_stats(barber_ids)

        result = []
        for profile, user in rows:
            average, count = stats[profile.id]
            result.append(
                BarberOut(
                    id=profile.id,
                    user_id=profile.user_id,
                    shop_name=profile.shop_name,
                    description=profile.description,
                    phone=profile.phone,
                    address_line1=profile.address_line1,
                    address_line2=profile.address_line2,
                    city=profile.city,
                    province=profile.province,
                    postal_code=profile.postal_code,
                    latitude=profile.latitude,
                    longitude=profile.longitude,
                    user=UserSummary(id=user.id, full_name=user.full_name),
                    services=services.get(profile.id, []),
                    rating_average=average,
                    rating_count=count,
                )
            )
        return result
