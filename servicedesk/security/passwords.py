"""
Password hashing with bcrypt.

bcrypt only looks at the first 72 bytes of a password, so longer inputs are
cut on a byte boundary before hashing and verification.
"""

import bcrypt

BCRYPT_MAX_BYTES = 72


def _truncate_to_72(password: str) -> bytes:
    """Encode and cut a password to bcrypt's 72-byte limit."""
    return (password or "").encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """
    Hash and verify passwords.

    Usage:
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        stored = hasher.hash("s3cret!")
        hasher.verify("s3cret!", stored)  # True
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_truncate_to_72(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Return True if password matches the stored hash. Malformed hashes never match."""
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(_truncate_to_72(password), password_hash.encode("utf-8"))
        except ValueError:
            return False
