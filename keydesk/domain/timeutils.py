"""Normalización de fechas a UTC."""

from datetime import datetime, timezone


def ensure_utc(value: datetime | None) -> datetime | None:
    """
    Retorna el datetime en UTC.

    Los datetimes naive se interpretan como UTC (así los devuelve SQLite).
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
