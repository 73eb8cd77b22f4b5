"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

from typing import Optional

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """bcrypt hash/verify with a fixed work factor."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash: Optional[bytes] = None

    def hash(self, password: str) -> str:
        """Hash ``password`` with a fresh salt.  Two calls never return the same value."""
        if not password:
            raise ValueError("Password must not be empty")
        raw = password.encode("utf-8")
        if len(raw) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password exceeds {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash.  Never raises."""
        if not password or not password_hash:
            return False
        try:
            raw = password.encode("utf-8")
            if len(raw) > MAX_PASSWORD_BYTES:
                # same bcrypt cost as a real check
                return self.dummy_verify(password)
            return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False

    def dummy_verify(self, password: str) -> bool:
        """
        Spend the same work as ``verify`` against a throwaway hash.

        Called when the account does not exist, so that response time does
        not reveal whether an e-mail is registered.  Always ``False``.
        """
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=self.rounds))
        bcrypt.checkpw(password.encode("utf-8")[:MAX_PASSWORD_BYTES], self._dummy_hash)
        return False
