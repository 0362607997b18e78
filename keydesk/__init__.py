"""Servicio de reserva de llaves del edificio."""

__version__ = "0.1.0"
