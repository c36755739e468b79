"""Password hashing strategies."""

from __future__ import annotations


import bcrypt
from werkzeug.security import check_password_hash

from attendance_backend.domain.devadmin.repositories import PasswordHasher

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
MIN_BCRYPT_ROUNDS = 10


def is_bcrypt_hash(hashed: str) -> bool:
    return hashed.startswith(BCRYPT_PREFIXES)


class AdaptivePasswordHasher(PasswordHasher):
    """bcrypt for new hashes; verifies bcrypt and werkzeug (scrypt/pbkdf2) formats."""

    def __init__(self, rounds: int = MIN_BCRYPT_ROUNDS) -> None:
        if rounds < MIN_BCRYPT_ROUNDS:
            raise ValueError(f"bcrypt cost must be at least {MIN_BCRYPT_ROUNDS}, got {rounds}")
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        if is_bcrypt_hash(hashed):
            return bool(bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii")))
        return bool(check_password_hash(hashed, password))
