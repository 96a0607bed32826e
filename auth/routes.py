"""
Auth API routes — register, login, current user.

Route prefix: /auth
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from auth.dependencies import get_authenticator, get_current_user
from auth.service import Authenticator
from utils.schemas import (
    LoginRequest,
    LoginResult,
    RegisterRequest,
    RegisterResult,
    UserProfile,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResult, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    authenticator: Authenticator = Depends(get_authenticator),
) -> RegisterResult:
    """Register a new user."""
    return await authenticator.register(req)


@router.post("/login", response_model=LoginResult)
async def login(
    req: LoginRequest,
    authenticator: Authenticator = Depends(get_authenticator),
) -> LoginResult:
    """Login with email + password."""
    return await authenticator.login(req.email, req.password)


@router.get("/me", response_model=UserProfile)
async def me(user: UserProfile = Depends(get_current_user)) -> UserProfile:
    return user
