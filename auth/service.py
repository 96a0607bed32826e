"""
Authenticator — register and login business rules.

Wires the credential store, password hasher and token service together.
Login failures are deliberately indistinguishable: an unknown email and a
wrong password both raise ``InvalidCredentials`` with the same message.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from auth.errors import (
    DuplicateIdentifier,
    EmailInUse,
    InvalidCredentials,
    InvalidInput,
    PasswordMismatch,
    UsernameInUse,
)
from auth.jwt import TokenService
from auth.password import MAX_PASSWORD_BYTES, PasswordHasher, hash_password
from database.users import UserStore
from utils.schemas import LoginResult, RegisterRequest, RegisterResult
from utils.validators import is_valid_email, normalize_email, normalize_username

logger = logging.getLogger(__name__)


class Authenticator:
    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        token_ttl: timedelta,
        require_username: bool = False,
    ):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.token_ttl = token_ttl
        self.require_username = require_username
        # Unknown emails are checked against this so they cost the same as a
        # wrong password.
        self._dummy_hash = hash_password("dummy-password", hasher.rounds)

    async def register(self, req: RegisterRequest) -> RegisterResult:
        """Create an account.  No token is issued; login is a separate step."""
        if not req.email.strip() or not req.password or not req.confirm_password:
            raise InvalidInput("Email and passwords are required")
        if req.password != req.confirm_password:
            raise PasswordMismatch()

        email = normalize_email(req.email)
        if not is_valid_email(email):
            raise InvalidInput("Email address is not valid")
        if len(req.password.encode()) > MAX_PASSWORD_BYTES:
            raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        username = normalize_username(req.username)
        if self.require_username and username is None:
            raise InvalidInput("Username is required")

        password_hash = await self.hasher.hash(req.password)
        try:
            user = await self.store.create(
                email=email,
                password_hash=password_hash,
                username=username,
                first_name=req.first_name,
                last_name=req.last_name,
            )
        except DuplicateIdentifier as exc:
            if exc.field == "username":
                raise UsernameInUse() from exc
            raise EmailInUse() from exc

        logger.info("Registered user %s", user.id)
        return RegisterResult(message="User registered", user=user)

    async def login(self, email: str, password: str) -> LoginResult:
        """Check credentials and issue a bearer token."""
        email = normalize_email(email)
        if not email or not password:
            raise InvalidCredentials()

        stored = await self.store.find_by_email(email)
        if stored is None:
            await self.hasher.verify(password, self._dummy_hash)
            logger.info("Login rejected: unknown email")
            raise InvalidCredentials()

        if not await self.hasher.verify(password, stored.password_hash):
            logger.info("Login rejected: bad password for user %s", stored.profile.id)
            raise InvalidCredentials()

        token = self.tokens.issue(
            {"id": stored.profile.id, "email": stored.profile.email},
            self.token_ttl,
        )
        logger.info("Login: %s", stored.profile.id)
        return LoginResult(token=token, user=stored.profile)
