from passlib.context import CryptContext

from ...application.ports.password_hasher import PasswordHasher


class PasslibPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int = 12) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return self._context.verify(password, hashed)
        except ValueError:
            # Malformed or foreign hash in storage
            return False
