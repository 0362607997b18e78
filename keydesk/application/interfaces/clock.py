"""Reloj inyectable: vencimientos y barridos dependen de `now()`."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Hora actual, siempre timezone-aware en UTC."""
        raise NotImplementedError


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock(Clock):
    """Reloj detenido que solo avanza a pedido; sirve para provocar vencimientos."""

    def __init__(self, start: datetime | None = None):
        self._current = start or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: int = 0, minutes: int = 0, hours: int = 0, days: int = 0) -> None:
        self._current += timedelta(seconds=seconds, minutes=minutes, hours=hours, days=days)
