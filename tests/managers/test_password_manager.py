"""Tests for password hashing."""

import pytest

from blogapi.managers.password_manager import PasswordHasher, hash_password, verify_password


class TestPasswordHasher:
    def test_hash_is_argon2(self) -> None:
        hashed = PasswordHasher().hash("correct-horse-battery")
        assert hashed.startswith("$argon2")

    def test_empty_password_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            PasswordHasher().hash("")

    def test_corrupted_hash_does_not_verify(self) -> None:
        assert PasswordHasher().verify("anything", "$argon2id$garbage") is False

    def test_blank_hash_does_not_verify(self) -> None:
        assert PasswordHasher().verify("anything", "   ") is False


class TestAsyncHelpers:
    @pytest.mark.asyncio
    async def test_hash_then_verify(self) -> None:
        hashed = await hash_password("correct-horse-battery")

        assert await verify_password("correct-horse-battery", hashed)
        assert not await verify_password("wrong-password", hashed)

    @pytest.mark.asyncio
    async def test_missing_hash_never_verifies(self) -> None:
        assert await verify_password("correct-horse-battery", None) is False
