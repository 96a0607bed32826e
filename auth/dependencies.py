"""
FastAPI dependencies for authentication.

``get_current_user`` guards protected routes; ``get_optional_user`` is
for routes that personalize output but also serve anonymous callers.
Both read their services from ``request.app.state``.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request
from fastapi.security import HTTPBearer

from auth.errors import AuthError, NoToken, TokenMalformed
from auth.service import Authenticator
from utils.schemas import UserProfile

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


async def _extract_token(request: Request) -> str:
    header = request.headers.get("Authorization")
    if header is None:
        raise NoToken()

    credentials = await _bearer_scheme(request)
    if credentials is not None:
        token = credentials.credentials.strip()
    else:
        # Bare token without a scheme; "Bearer" with nothing after it is empty.
        token = header.strip()
        if token.lower() == "bearer":
            token = ""
    if not token:
        raise NoToken()
    return token


async def _resolve_user(request: Request) -> UserProfile:
    token = await _extract_token(request)
    authenticator: Authenticator = request.app.state.authenticator
    claims = authenticator.tokens.verify(token)

    user = await authenticator.store.find_by_id(claims.user_id)
    if user is None:
        raise TokenMalformed()
    return user


async def get_current_user(request: Request) -> UserProfile:
    """
    Verify the Bearer token and return the user it names.

    Raises ``NoToken``, ``TokenExpired`` or ``TokenMalformed`` (all 401).
    """
    user = await _resolve_user(request)
    request.state.user = user
    return user


async def get_optional_user(request: Request) -> Optional[UserProfile]:
    """Like ``get_current_user`` but any failure means anonymous."""
    try:
        user = await _resolve_user(request)
    except NoToken:
        user = None
    except AuthError as exc:
        logger.warning("Optional auth fell back to anonymous: %s", type(exc).__name__)
        user = None
    request.state.user = user
    return user


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator
