"""
SQLAlchemy ORM models.

Schema changes ship as versioned steps in ``database.migrate``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Index,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        # NULLs never collide, so users without a username are unaffected.
        UniqueConstraint("username", name="uq_users_username"),
    )

    user_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False)
    username = Column(String(64), nullable=True)
    first_name = Column(String(128))
    last_name = Column(String(128))
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


class Transaction(Base):
    __tablename__ = "transactions"

    transaction_id = Column(String(64), primary_key=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    category = Column(String(64), nullable=False)
    status = Column(String(32), nullable=False)
    user_id = Column(String(64), nullable=False)
    user_profile = Column(String(512))

    __table_args__ = (
        Index("ix_transactions_date", "date"),
        Index("ix_transactions_user_id", "user_id"),
    )
