"""
Global middleware.
"""

from __future__ import annotations

import asyncio
import logging
import time

from fastapi import FastAPI, Request

from api.errors import server_error_response

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI, request_timeout: float | None = None) -> None:
    """Attach app-level middleware; ``request_timeout`` is in seconds."""

    if request_timeout:
        @app.middleware("http")
        async def request_deadline(request: Request, call_next):
            try:
                return await asyncio.wait_for(call_next(request), timeout=request_timeout)
            except asyncio.TimeoutError:
                logger.error(
                    "%s %s exceeded %.1fs", request.method, request.url.path, request_timeout,
                )
                return server_error_response()

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response
