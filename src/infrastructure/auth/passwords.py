"""Password hashing with bcrypt."""

from typing import Protocol

import bcrypt

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class IPasswordHasher(Protocol):
    """Protocol for password hashers."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        ...


class BcryptPasswordHasher:
    """bcrypt-backed hasher. Hashes are stored as UTF-8 strings.

    Passwords longer than MAX_PASSWORD_BYTES are refused by ``hash`` and never
    verify, so two passwords sharing a 72-byte prefix cannot collide.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        if password_too_long(password):
            raise ValueError(f"Password exceeds {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)
        ).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        if password_too_long(password):
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed hash in storage
            return False
