"""Implementaciones in-memory para testing."""

from keydesk.infrastructure.in_memory.key_repo import InMemoryKeyRepo
from keydesk.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from keydesk.infrastructure.in_memory.user_repo import InMemoryUserRepo

__all__ = [
    "InMemoryKeyRepo",
    "InMemoryReservationRepo",
    "InMemoryUserRepo",
]
