"""
Tests for bcrypt password hashing.
"""

import bcrypt
import pytest

from auth.password import PasswordHasher


class TestPasswordHasher:
    def setup_method(self):
        self.hasher = PasswordHasher(rounds=4)

    def test_hash_then_verify(self):
        hashed = self.hasher.hash("secret1")
        assert hashed != "secret1"
        assert self.hasher.verify("secret1", hashed) is True

    def test_same_password_hashes_differently(self):
        first = self.hasher.hash("secret1")
        second = self.hasher.hash("secret1")
        assert first != second
        assert self.hasher.verify("secret1", first)
        assert self.hasher.verify("secret1", second)

    def test_wrong_password_rejected(self):
        hashed = self.hasher.hash("secret1")
        assert self.hasher.verify("secret2", hashed) is False

    @pytest.mark.parametrize("bad_hash", ["", "not-a-bcrypt-hash", "$2b$04$short"])
    def test_malformed_hash_returns_false(self, bad_hash):
        assert self.hasher.verify("secret1", bad_hash) is False

    def test_empty_password_never_verifies(self):
        hashed = self.hasher.hash("secret1")
        assert self.hasher.verify("", hashed) is False

    def test_empty_password_cannot_be_hashed(self):
        with pytest.raises(ValueError):
            self.hasher.hash("")

    def test_password_over_72_bytes_rejected(self):
        with pytest.raises(ValueError, match="72"):
            self.hasher.hash("x" * 73)
        assert self.hasher.verify("x" * 73, self.hasher.hash("x" * 72)) is False

    def test_dummy_verify_is_always_false(self):
        assert self.hasher.dummy_verify("dummy-password") is False
        assert self.hasher.dummy_verify("anything") is False

    def test_long_password_still_costs_one_bcrypt_check(self, monkeypatch):
        calls = []
        real_checkpw = bcrypt.checkpw

        def counting_checkpw(password, hashed):
            calls.append(len(password))
            return real_checkpw(password, hashed)

        hashed = self.hasher.hash("secret1")
        monkeypatch.setattr(bcrypt, "checkpw", counting_checkpw)

        assert self.hasher.verify("y" * 100, hashed) is False
        assert len(calls) == 1
