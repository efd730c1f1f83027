"""Tests for structured logging."""
import json
import logging

import pytest

from barber_api.lib.logging import JSONFormatter, get_correlation_id, set_correlation_id


def _record(msg="Booking created", **extra):
    record = logging.LogRecord("barber_api.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def reset_correlation_id():
    yield
    set_correlation_id(None)


@pytest.mark.unit
def test_json_formatter_includes_extra_fields():
    data = json.loads(JSONFormatter().format(_record(booking_id="b-1", total_price_cents=3500)))

    assert data["message"] == "Booking created"
    assert data["level"] == "INFO"
    assert data["logger"] == "barber_api.test"
    assert data["booking_id"] == "b-1"
    assert data["total_price_cents"] == 3500
    assert "timestamp" in data


@pytest.mark.unit
def test_json_formatter_adds_correlation_id():
    set_correlation_id("corr-123")

    data = json.loads(JSONFormatter().format(_record()))

    assert data["correlation_id"] == "corr-123"
    assert get_correlation_id() == "corr-123"


@pytest.mark.unit
def test_json_formatter_without_correlation_id():
    data = json.loads(JSONFormatter().format(_record()))

    assert "correlation_id" not in data
    assert "args" not in data
