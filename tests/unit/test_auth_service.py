"""Tests for authentication service."""
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from barber_api.api.middleware.error_handler import ConflictException, UnauthorizedException
from barber_api.lib.jwt import verify_token
from barber_api.lib.security import hash_password
from barber_api.models.users import User, UserRole
from barber_api.services.auth_service import AuthService


@pytest.fixture
def mock_session():
    """Create mock database session."""
    session = MagicMock()
    session.refresh.side_effect = lambda user: setattr(user, "id", uuid4())
    return session


@pytest.fixture
def auth_service(mock_session):
    """Create auth service instance with mocked session."""
    return AuthService(mock_session)


def _lookup_returns(mock_session, value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    mock_session.execute.return_value = result


@pytest.mark.unit
def test_register_creates_client(auth_service, mock_session):
    """New accounts are CLIENTs with a hashed password and a token."""
    _lookup_returns(mock_session, None)

    auth = auth_service.register("new@example.com", "secret123", "New Client", phone="514-555-0000")

    added = mock_session.add.call_args[0][0]
    assert isinstance(added, User)
    assert added.role == UserRole.CLIENT
    assert added.password != "secret123"
    mock_session.commit.assert_called_once()

    assert auth.user.email == "new@example.com"
    assert auth.user.role == UserRole.CLIENT
    payload = verify_token(auth.access_token)
    assert payload["sub"] == str(auth.user.id)
    assert payload["role"] == "CLIENT"


@pytest.mark.unit
def test_register_duplicate_email(auth_service, mock_session):
    _lookup_returns(mock_session, uuid4())

    with pytest.raises(ConflictException, match="Email already registered"):
        auth_service.register("taken@example.com", "secret123", "Someone")

    mock_session.add.assert_not_called()


@pytest.mark.unit
def test_register_race_on_unique_email(auth_service, mock_session):
    """A unique-constraint failure on commit is reported as a conflict."""
    _lookup_returns(mock_session, None)
    mock_session.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(ConflictException):
        auth_service.register("race@example.com", "secret123", "Racer")

    mock_session.rollback.assert_called_once()


@pytest.mark.unit
def test_login_success(auth_service, mock_session):
    user = User(
        id=uuid4(),
        email="client@example.com",
        password=hash_password("secret123"),
        full_name="Test Client",
        role=UserRole.BARBER,
    )
    _lookup_returns(mock_session, user)

    auth = auth_service.login("client@example.com", "secret123")

    assert auth.user.id == user.id
    assert verify_token(auth.access_token)["role"] == "BARBER"


@pytest.mark.unit
def test_login_wrong_password(auth_service, mock_session):
    user = User(
        id=uuid4(),
        email="client@example.com",
        password=hash_password("secret123"),
        full_name="Test Client",
        role=UserRole.CLIENT,
    )
    _lookup_returns(mock_session, user)

    with pytest.raises(UnauthorizedException, match="Invalid credentials"):
        auth_service.login("client@example.com", "wrong-password")


@pytest.mark.unit
def test_login_unknown_email(auth_service, mock_session):
    """Unknown emails get the same message as wrong passwords."""
    _lookup_returns(mock_session, None)

    with pytest.raises(UnauthorizedException, match="Invalid credentials"):
        auth_service.login("nobody@example.com", "secret123")
