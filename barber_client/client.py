"""
HTTP client for the barber booking API.

Mirrors what the mobile app does: one method per endpoint, the bearer
token taken from the session, and server error messages surfaced as-is.
There are no retries; callers retry by calling again.

Only the pydantic schemas and enums are shared with barber_api; importing
the client never builds a database engine or configures logging.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar, Union
from uuid import UUID

import httpx
from pydantic import BaseModel, TypeAdapter

from barber_api.api.schemas import (
    AuthResponse,
    BarberDetailOut,
    BarberOut,
    BarberProfileRequest,
    BarberReviewsOut,
    BookingCreateRequest,
    BookingOut,
    LoginRequest,
    PaymentIntentOut,
    RegisterRequest,
    ReviewCreateRequest,
    ReviewOut,
    ServiceCreateRequest,
    ServiceOut,
    ServiceUpdateRequest,
    UserOut,
)
from barber_api.enums import BookingStatus
from barber_client.session import Session


logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
NETWORK_ERROR_MESSAGE = "Unable to reach the server. Check your connection and try again."

T = TypeVar("T")
Id = Union[UUID, str]


class ApiError(Exception):
    """A failed API call, carrying the message to show the user."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class BarberApiClient:
    """Typed wrapper around the REST API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        session: Optional[Session] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.session = session or Session()
        self.http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "BarberApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Auth

    def register(self, email: str, password: str, full_name: str, phone: Optional[str] = None) -> AuthResponse:
        payload = RegisterRequest(email=email, password=password, full_name=full_name, phone=phone)
        auth = self._request("POST", "/auth/register", AuthResponse, json=_dump(payload), authenticated=False)
        self.session.login(auth)
        return auth

    def login(self, email: str, password: str) -> AuthResponse:
        payload = LoginRequest(email=email, password=password)
        auth = self._request("POST", "/auth/login", AuthResponse, json=_dump(payload), authenticated=False)
        self.session.login(auth)
        return auth

    def logout(self) -> None:
        self.session.logout()

    def me(self) -> UserOut:
        return self._request("GET", "/users/me", UserOut)

    # Barbers

    def fetch_nearby_barbers(self, postal_code: Optional[str] = None, city: Optional[str] = None) -> List[BarberOut]:
        params = {}
        if postal_code:
            params["postalCode"] = postal_code
        if city:
            params["city"] = city
        return self._request("GET", "/barbers/nearby", List[BarberOut], params=params, authenticated=False)

    def fetch_barber(self, barber_id: Id) -> BarberDetailOut:
        return self._request("GET", f"/barbers/{barber_id}", BarberDetailOut, authenticated=False)

    def fetch_barber_reviews(self, barber_id: Id) -> BarberReviewsOut:
        return self._request("GET", f"/barbers/{barber_id}/reviews", BarberReviewsOut, authenticated=False)

    def create_barber_review(self, barber_id: Id, rating: int, comment: Optional[str] = None) -> ReviewOut:
        payload = ReviewCreateRequest(rating=rating, comment=comment)
        return self._request("POST", f"/barbers/{barber_id}/reviews", ReviewOut, json=_dump(payload))

    def save_barber_profile(self, profile: BarberProfileRequest) -> BarberOut:
        return self._request("POST", "/barbers/profile", BarberOut, json=_dump(profile))

    def add_service(self, service: ServiceCreateRequest) -> ServiceOut:
        return self._request("POST", "/barbers/me/services", ServiceOut, json=_dump(service))

    def update_service(self, service_id: Id, changes: ServiceUpdateRequest) -> ServiceOut:
        body = changes.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return self._request("PATCH", f"/barbers/me/services/{service_id}", ServiceOut, json=body)

    # Bookings

    def create_booking(self, barber_id: Id, service_id: Id, scheduled_at: datetime) -> BookingOut:
        payload = BookingCreateRequest(barber_id=barber_id, service_id=service_id, scheduled_at=scheduled_at)
        return self._request("POST", "/bookings", BookingOut, json=_dump(payload))

    def fetch_my_bookings(self) -> List[BookingOut]:
        return self._request("GET", "/bookings/me", List[BookingOut])

    def fetch_barber_bookings(self) -> List[BookingOut]:
        return self._request("GET", "/bookings/barber/me", List[BookingOut])

    def cancel_booking(self, booking_id: Id) -> BookingOut:
        return self._request("PATCH", f"/bookings/{booking_id}/cancel", BookingOut, json={})

    def update_booking_status(self, booking_id: Id, status: BookingStatus) -> BookingOut:
        return self._request(
            "PATCH",
            f"/bookings/{booking_id}/status",
            BookingOut,
            json={"status": BookingStatus(status).value},
        )

    # Payments

    def create_payment_intent(self, booking_id: Id) -> PaymentIntentOut:
        return self._request("POST", f"/payments/bookings/{booking_id}/intent", PaymentIntentOut, json={})

    def _request(
        self,
        method: str,
        path: str,
        response_type: Type[T],
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> T:
        headers = {}
        if authenticated:
            if not self.session.is_authenticated:
                raise ApiError("Please log in to continue.", status_code=401)
            headers["Authorization"] = f"Bearer {self.session.access_token}"

        try:
            response = self.http.request(method, path, json=json, params=params, headers=headers)
        except httpx.TransportError as e:
            logger.warning("API request failed", extra={"method": method, "path": path, "error": str(e)})
            raise ApiError(NETWORK_ERROR_MESSAGE) from e

        if response.is_error:
            error = _error_from_response(response)
            if authenticated and response.status_code == 401:
                # Token expired or revoked; a fresh login is required
                self.session.logout()
            raise error

        return TypeAdapter(response_type).validate_python(response.json())


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _error_from_response(response: httpx.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = None

    message = GENERIC_ERROR_MESSAGE
    details: Dict[str, Any] = {}
    if isinstance(body, dict):
        message = body.get("error") or message
        details = body.get("details") or {}

    if not isinstance(message, str):
        message = GENERIC_ERROR_MESSAGE

    return ApiError(message, status_code=response.status_code, details=details)
