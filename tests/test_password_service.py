"""Tests for password hashing."""

import pytest

from app.exceptions import ValidationError
from app.services.password_service import PasswordHasher


@pytest.mark.unit
class TestPasswordHasher:
    """Test argon2 hashing and verification."""

    def test_hash_is_salted(self, hasher):
        """Same password hashes differently each time."""
        hash1 = hasher.hash("testpassword123")
        hash2 = hasher.hash("testpassword123")

        assert hash1 != hash2
        assert hash1.startswith("$argon2id$")

    @pytest.mark.parametrize("password", ["p", "testpassword123", "pässwörd ünïcode", "x" * 1024])
    def test_verify_round_trip(self, hasher, password):
        assert hasher.verify(password, hasher.hash(password))

    def test_verify_wrong_password(self, hasher):
        digest = hasher.hash("correct horse")
        assert not hasher.verify("correct horsf", digest)
        assert not hasher.verify("", digest)

    def test_hash_rejects_oversized_password(self, hasher):
        with pytest.raises(ValidationError):
            hasher.hash("x" * 1025)

    def test_length_limit_counts_utf8_bytes(self):
        hasher = PasswordHasher(max_length=4, time_cost=1, memory_cost=1024, parallelism=1)
        hasher.hash("abcd")
        with pytest.raises(ValidationError):
            hasher.hash("ééé")  # 6 bytes

    def test_verify_oversized_password_returns_false(self, hasher):
        digest = hasher.hash("short")
        assert not hasher.verify("x" * 2000, digest)

    @pytest.mark.parametrize(
        "digest",
        [
            "",
            "not-a-hash",
            "$argon2id$v=19$m=garbage",
            "$2b$12$abcdefghijklmnopqrstuuKZq0sYIoV0Lc6oH0xv4ZRNM7E5M4p3S",
            "$argon2id$é",
        ],
    )
    def test_verify_malformed_digest_returns_false(self, hasher, digest):
        """Malformed stored hashes degrade to a failed verification."""
        assert hasher.verify("password", digest) is False

    def test_needs_rehash(self, hasher):
        digest = hasher.hash("password")
        stronger = PasswordHasher(time_cost=2, memory_cost=2048, parallelism=1)

        assert not hasher.needs_rehash(digest)
        assert stronger.needs_rehash(digest)
        assert not hasher.needs_rehash("not-a-hash")
        assert not hasher.needs_rehash("$argon2id$é")
