"""
Credential store — persistence for user records.

Uniqueness of email and username is enforced by the table's unique
constraints, so concurrent inserts for the same identifier cannot both
succeed.  Reads that leave the auth boundary return ``UserProfile``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auth.errors import DuplicateIdentifier, StorageUnavailable
from database.models import User
from utils.schemas import StoredUser, UserProfile
from utils.validators import normalize_email, normalize_username

logger = logging.getLogger(__name__)


def _to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=str(user.user_id),
        email=user.email,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        created_at=user.created_at,
    )


_USERNAME_MARKERS = ("uq_users_username", "users.username")


def _duplicate_field(exc: IntegrityError) -> str:
    # Postgres names the constraint (uq_users_username), SQLite the column
    # (users.username).  The offending value itself may contain "username".
    orig = exc.orig
    constraint = getattr(orig, "constraint_name", None) or getattr(
        getattr(orig, "__cause__", None), "constraint_name", None
    )
    if constraint:
        return "username" if constraint == "uq_users_username" else "email"
    message = str(orig).lower()
    return "username" if any(marker in message for marker in _USERNAME_MARKERS) else "email"


class UserStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(
        self,
        email: str,
        password_hash: str,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> UserProfile:
        """
        Insert a new user.

        Raises ``DuplicateIdentifier`` when the email or username is taken.
        """
        user = User(
            user_id=uuid.uuid4(),
            email=normalize_email(email),
            username=normalize_username(username),
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(user)
            return _to_profile(user)
        except IntegrityError as exc:
            field = _duplicate_field(exc)
            logger.info("Rejected duplicate %s on insert", field)
            raise DuplicateIdentifier(field) from exc
        except (OperationalError, InterfaceError) as exc:
            logger.error("User insert failed: %s", exc)
            raise StorageUnavailable() from exc

    async def find_by_email(self, email: str) -> Optional[StoredUser]:
        """Lookup by normalized email; the result carries the password hash."""
        user = await self._fetch_one(select(User).where(User.email == normalize_email(email)))
        if user is None:
            return None
        return StoredUser(profile=_to_profile(user), password_hash=user.password_hash)

    async def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        try:
            uid = uuid.UUID(str(user_id))
        except ValueError:
            return None
        user = await self._fetch_one(select(User).where(User.user_id == uid))
        return _to_profile(user) if user is not None else None

    async def _fetch_one(self, stmt) -> Optional[User]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except (OperationalError, InterfaceError) as exc:
            logger.error("User lookup failed: %s", exc)
            raise StorageUnavailable() from exc
