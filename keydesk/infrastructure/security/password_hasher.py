import bcrypt
from fastapi.concurrency import run_in_threadpool

from keydesk.application.interfaces.password_hasher import PasswordHasher


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt con salt por hash; `rounds` es el factor de costo."""

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(self._hash_sync, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await run_in_threadpool(self._verify_sync, password, password_hash)

    def _hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _verify_sync(password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Hash malformado o contraseña fuera del límite de bcrypt
            return False
