"""
Pydantic schemas shared by the auth core and the dashboard routes.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════════════════════


class UserProfile(BaseModel):
    """Client-facing projection of a user record (never carries the hash)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    email: str
    username: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class StoredUser(BaseModel):
    """User row including the password hash; stays inside the auth boundary."""

    profile: UserProfile
    password_hash: str = Field(repr=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Auth requests / results
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(None, alias="firstName", max_length=128)
    last_name: Optional[str] = Field(None, alias="lastName", max_length=128)
    username: Optional[str] = Field(None, max_length=64)
    email: str = Field("", max_length=255)
    password: str = Field("", max_length=128)
    confirm_password: str = Field("", alias="confirmPassword", max_length=128)


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class RegisterResult(BaseModel):
    message: str
    user: UserProfile


class LoginResult(BaseModel):
    token: str
    user: UserProfile


class ProtectedResponse(BaseModel):
    message: str
    user: UserProfile


# ═══════════════════════════════════════════════════════════════════════════════
# Transactions
# ═══════════════════════════════════════════════════════════════════════════════


class TransactionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: date
    amount: float
    category: str
    status: str
    user_id: str
    user_profile: Optional[str] = None


class TransactionPage(BaseModel):
    count: int
    transactions: List[Dict[str, Any]]


class DashboardSummary(BaseModel):
    greeting: str
    total_revenue: float
    total_expenses: float
    net: float
    transaction_count: int
    pending_count: int
    active_clients: int
