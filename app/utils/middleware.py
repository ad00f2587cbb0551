from functools import wraps
from typing import Callable, AsyncGenerator
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import DBAPIError
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("ecotrack")


def with_db_retry(max_retries: int = 3, delay: int = 1):
    """
    Retry a session generator when the connection itself fails.

    Waits ``delay * 2**attempt`` seconds between attempts and gives up with a
    503 once ``max_retries`` is reached. Errors raised by the request after
    the session was handed out roll the session back and propagate.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> AsyncGenerator[AsyncSession, None]:
            last_error = None
            for attempt in range(max_retries):
                handed_out = False
                try:
                    async for session in func(*args, **kwargs):
                        handed_out = True
                        try:
                            yield session
                        except Exception:
                            await session.rollback()
                            raise
                        finally:
                            await session.close()
                    return
                except DBAPIError as e:
                    # Only connection setup is retried; request errors propagate
                    if handed_out:
                        raise
                    last_error = e
                    logger.warning(
                        f"Database connection attempt {attempt + 1}/{max_retries} failed: {e}"
                    )
                    if attempt < max_retries - 1:
                        await asyncio.sleep(delay * (2 ** attempt))

            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Database connection failed after {max_retries} attempts",
            ) from last_error
        return wrapper
    return decorator


class MaxRequestSizeMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body exceeds ``max_size`` bytes."""

    def __init__(self, app, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"detail": "Request body too large"},
            )
        return await call_next(request)
