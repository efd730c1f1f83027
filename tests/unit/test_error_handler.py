"""
Tests for error handler middleware and custom exceptions.
"""
import logging

import pytest
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from barber_api.api.middleware.error_handler import (
    AppException,
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
    PaymentProviderException,
    UnauthorizedException,
    app_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)


@pytest.mark.unit
def test_app_exception_creation():
    """Test creating custom AppException."""
    exc = AppException(message="Test error", status_code=500, details={"key": "value"})

    assert exc.message == "Test error"
    assert exc.status_code == 500
    assert exc.details == {"key": "value"}


@pytest.mark.unit
def test_not_found_exception():
    """Test NotFoundException creation."""
    exc = NotFoundException("Booking", "123")

    assert exc.message == "Booking with id '123' not found"
    assert exc.status_code == 404
    assert exc.details["resource"] == "Booking"
    assert exc.details["resource_id"] == "123"


@pytest.mark.unit
def test_not_found_exception_without_id():
    exc = NotFoundException("Barber profile")

    assert exc.message == "Barber profile not found"
    assert exc.status_code == 404


@pytest.mark.unit
@pytest.mark.parametrize(
    "exc, status_code",
    [
        (UnauthorizedException(), 401),
        (ForbiddenException("You can only cancel your own bookings"), 403),
        (BadRequestException("Invalid amount for this booking"), 400),
        (ConflictException("Email already registered"), 409),
        (PaymentProviderException(), 502),
    ],
)
def test_exception_status_codes(exc, status_code):
    """Each exception maps to its HTTP status."""
    assert exc.status_code == status_code


@pytest.mark.unit
def test_payment_provider_exception_defaults():
    exc = PaymentProviderException()

    assert exc.message == "Payment provider error"
    assert exc.details == {}


@pytest.mark.integration
def test_app_exception_handler_in_route():
    """Test custom exception handler in actual route."""
    app = FastAPI()
    app.add_exception_handler(AppException, app_exception_handler)

    @app.get("/test-error")
    async def test_error():
        raise NotFoundException("Barber", "123")

    response = TestClient(app).get("/test-error")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "Barber with id '123' not found"
    assert "correlation_id" in data


@pytest.mark.integration
def test_validation_error_handler():
    """Test Pydantic validation error handler."""
    app = FastAPI()
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    class ReviewModel(BaseModel):
        rating: int = Field(..., ge=1, le=5)

    @app.post("/test-validation")
    async def test_validation(data: ReviewModel):
        return {"ok": True}

    response = TestClient(app).post("/test-validation", json={"rating": 6})

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "Validation error"
    assert data["details"]["errors"][0]["loc"] == ["body", "rating"]


@pytest.mark.integration
def test_http_exception_handler():
    """Test HTTP exception handler."""
    app = FastAPI()
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    @app.get("/test-http-error")
    async def test_http_error():
        raise StarletteHTTPException(status_code=404, detail="Page not found")

    response = TestClient(app).get("/test-http-error")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "Page not found"
    assert "correlation_id" in data


@pytest.mark.integration
def test_unhandled_exception_handler():
    """Test handler for unhandled exceptions."""
    app = FastAPI()
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/test-unhandled")
    async def test_unhandled():
        raise ValueError("Unexpected error")

    response = TestClient(app, raise_server_exceptions=False).get("/test-unhandled")

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Internal server error"
    assert "correlation_id" in data


@pytest.mark.integration
def test_exception_with_correlation_id():
    """Test that correlation ID is included in error response."""
    app = FastAPI()
    app.add_exception_handler(AppException, app_exception_handler)

    @app.get("/test-correlation")
    async def test_correlation(request: Request):
        request.state.correlation_id = "test-correlation-123"
        raise BadRequestException("Test error")

    response = TestClient(app).get("/test-correlation")

    assert response.status_code == 400
    assert response.json()["correlation_id"] == "test-correlation-123"


@pytest.mark.integration
def test_exception_details_included():
    """Details are returned only when present."""
    app = FastAPI()
    app.add_exception_handler(AppException, app_exception_handler)

    @app.get("/with-details")
    async def with_details():
        raise BadRequestException(
            "From status PENDING you can only move to CONFIRMED or CANCELED",
            details={"current_status": "PENDING", "requested_status": "COMPLETED"},
        )

    @app.get("/without-details")
    async def without_details():
        raise ForbiddenException("Nope")

    client = TestClient(app)

    data = client.get("/with-details").json()
    assert data["details"]["current_status"] == "PENDING"
    assert data["details"]["requested_status"] == "COMPLETED"

    assert "details" not in client.get("/without-details").json()


@pytest.mark.integration
def test_rejected_request_is_logged_with_error_type(caplog):
    """Service errors log the exception class; provider failures log at ERROR."""
    app = FastAPI()
    app.add_exception_handler(AppException, app_exception_handler)

    @app.get("/conflict")
    async def conflict():
        raise ConflictException("Booking status changed", details={"current_status": "CANCELED"})

    @app.get("/provider-down")
    async def provider_down():
        raise PaymentProviderException()

    client = TestClient(app)
    with caplog.at_level(logging.WARNING, logger="barber_api.api.middleware.error_handler"):
        client.get("/conflict")
        client.get("/provider-down")

    conflict_record, provider_record = [
        record for record in caplog.records if record.name == "barber_api.api.middleware.error_handler"
    ]
    assert conflict_record.levelno == logging.WARNING
    assert conflict_record.getMessage() == "Request rejected: Booking status changed"
    assert conflict_record.error_type == "ConflictException"
    assert conflict_record.path == "/conflict"
    assert provider_record.levelno == logging.ERROR
    assert provider_record.status_code == 502
