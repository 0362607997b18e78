"""Interface PasswordHasher - hash de una vía con verificación en tiempo constante."""

from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """
    Puerto de hashing de contraseñas.

    Los métodos son async: el costo de hashing es alto a propósito y las
    implementaciones no deben ejecutarlo en el event loop.
    """

    @abstractmethod
    async def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def verify(self, password: str, password_hash: str) -> bool:
        raise NotImplementedError
