from __future__ import annotations

from passlib.context import CryptContext


class PasswordHasher:
    """One-way password hashing for the Credential Store (bcrypt)."""

    def __init__(self, rounds: int = 10) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Unrecognised or corrupted hash.
            return False

    def dummy_verify(self) -> None:
        """Spend roughly the time of a real verification.

        Used when the username does not exist so response timing does not
        reveal which usernames are registered.
        """

        self._context.dummy_verify()
