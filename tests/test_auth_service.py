"""
Tests for the register / login rules.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from auth.errors import (
    CorruptCredential,
    EmailInUse,
    InvalidCredentials,
    InvalidInput,
    PasswordMismatch,
    UsernameInUse,
)
from utils.schemas import RegisterRequest


def _register(email="a@b.com", password="pw123", confirm=None, **extra) -> RegisterRequest:
    return RegisterRequest(
        email=email,
        password=password,
        confirm_password=password if confirm is None else confirm,
        **extra,
    )


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_then_login(self, authenticator, tokens):
        result = await authenticator.register(_register(first_name="Ada", last_name="Lovelace"))
        assert result.message == "User registered"
        assert result.user.email == "a@b.com"
        assert "password" not in result.model_dump_json()

        login = await authenticator.login("A@B.com ", "pw123")
        claims = tokens.verify(login.token)
        assert claims.user_id == result.user.id
        assert claims.email == "a@b.com"

    @pytest.mark.asyncio
    async def test_password_mismatch(self, authenticator):
        with pytest.raises(PasswordMismatch):
            await authenticator.register(_register(confirm="other"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", ["", "   ", "no-at-sign", "a@b", "a b@c.com"])
    async def test_invalid_email(self, authenticator, email):
        with pytest.raises(InvalidInput):
            await authenticator.register(_register(email=email))

    @pytest.mark.asyncio
    async def test_missing_password(self, authenticator):
        with pytest.raises(InvalidInput):
            await authenticator.register(_register(password=""))

    @pytest.mark.asyncio
    async def test_duplicate_email_differing_case_and_whitespace(self, authenticator):
        await authenticator.register(_register())
        with pytest.raises(EmailInUse):
            await authenticator.register(_register(email="  A@B.COM "))

    @pytest.mark.asyncio
    async def test_duplicate_username(self, authenticator):
        await authenticator.register(_register(username="ada"))
        with pytest.raises(UsernameInUse):
            await authenticator.register(_register(email="c@d.com", username="ada"))

    @pytest.mark.asyncio
    async def test_username_required_when_configured(self, authenticator):
        authenticator.require_username = True
        with pytest.raises(InvalidInput):
            await authenticator.register(_register())

    @pytest.mark.asyncio
    async def test_concurrent_registration_only_one_wins(self, authenticator):
        outcomes = await asyncio.gather(
            authenticator.register(_register()),
            authenticator.register(_register(email="A@b.com")),
            return_exceptions=True,
        )
        successes = [o for o in outcomes if not isinstance(o, Exception)]
        failures = [o for o in outcomes if isinstance(o, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], EmailInUse)


class TestLogin:
    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_identical(self, authenticator):
        await authenticator.register(_register())

        with pytest.raises(InvalidCredentials) as wrong_pw:
            await authenticator.login("a@b.com", "wrong")
        with pytest.raises(InvalidCredentials) as unknown:
            await authenticator.login("nobody@b.com", "pw123")

        assert wrong_pw.value.message == unknown.value.message == "Invalid credentials"
        assert wrong_pw.value.status_code == unknown.value.status_code == 401

    @pytest.mark.asyncio
    async def test_empty_credentials(self, authenticator):
        with pytest.raises(InvalidCredentials):
            await authenticator.login("", "")

    @pytest.mark.asyncio
    async def test_corrupt_stored_hash(self, authenticator, store):
        await store.create(email="broken@b.com", password_hash="plaintext")
        with pytest.raises(CorruptCredential):
            await authenticator.login("broken@b.com", "plaintext")

    @pytest.mark.asyncio
    async def test_unknown_email_still_runs_bcrypt(self, authenticator):
        with patch.object(authenticator.hasher, "verify", new_callable=AsyncMock) as verify:
            verify.return_value = False
            with pytest.raises(InvalidCredentials):
                await authenticator.login("nobody@b.com", "pw123")

        verify.assert_awaited_once_with("pw123", authenticator._dummy_hash)
        assert authenticator._dummy_hash.startswith("$2")
