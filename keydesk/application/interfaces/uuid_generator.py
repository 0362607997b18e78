"""Generación de ids para llaves, usuarios y reservaciones."""

import uuid
from abc import ABC, abstractmethod


class UUIDGenerator(ABC):
    @abstractmethod
    def generate_uuid(self) -> str:
        raise NotImplementedError


class RealUUIDGenerator(UUIDGenerator):
    def generate_uuid(self) -> str:
        return str(uuid.uuid4())


class FakeUUIDGenerator(UUIDGenerator):
    """Ids secuenciales con forma de UUID (00000000-0000-0000-0000-000000000001, ...)."""

    def __init__(self) -> None:
        self._issued = 0

    def generate_uuid(self) -> str:
        self._issued += 1
        return str(uuid.UUID(int=self._issued))
