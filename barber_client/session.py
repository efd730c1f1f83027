"""
Client-side session: the signed-in user and their access token.

The session is an explicit object with a login/logout lifecycle and is
persisted through a store, so a restarted app resumes where it left off.
"""
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from barber_api.api.schemas import AuthResponse, UserOut


class SessionStore(ABC):
    """Where a session is kept between app runs."""

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """Return the saved session data, or None if nothing is saved."""

    @abstractmethod
    def save(self, data: Dict[str, Any]) -> None:
        """Persist session data, replacing anything saved before."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the saved session."""


class MemorySessionStore(SessionStore):
    """Keeps the session for the lifetime of the process only."""

    def __init__(self):
        self._data: Optional[Dict[str, Any]] = None

    def load(self) -> Optional[Dict[str, Any]]:
        return self._data

    def save(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = None


class FileSessionStore(SessionStore):
    """
    JSON file readable and writable by the owner only (mode 0600).

    A corrupt or unreadable file is treated as no session.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            return None

    def save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


class Session:
    """Signed-in user and bearer token, backed by a store."""

    def __init__(self, store: Optional[SessionStore] = None):
        self.store = store or MemorySessionStore()
        self.user: Optional[UserOut] = None
        self.access_token: Optional[str] = None
        self._restore()

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def login(self, auth: AuthResponse) -> None:
        """Start a session from a register/login response and persist it."""
        self.user = auth.user
        self.access_token = auth.access_token
        self.store.save(auth.model_dump(mode="json", by_alias=True))

    def logout(self) -> None:
        """End the session and remove it from the store."""
        self.user = None
        self.access_token = None
        self.store.clear()

    def _restore(self) -> None:
        data = self.store.load()
        if not data:
            return
        try:
            auth = AuthResponse.model_validate(data)
        except ValueError:
            self.store.clear()
            return
        self.user = auth.user
        self.access_token = auth.access_token
