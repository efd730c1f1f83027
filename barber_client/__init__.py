"""
Client library for the barber booking API.
"""
from barber_client.client import ApiError, BarberApiClient
from barber_client.session import FileSessionStore, MemorySessionStore, Session, SessionStore

__all__ = [
    "ApiError",
    "BarberApiClient",
    "FileSessionStore",
    "MemorySessionStore",
    "Session",
    "SessionStore",
]
