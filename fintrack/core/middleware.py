import asyncio
import time

from fastapi import Request
from loguru import logger

from fintrack.config import settings
from fintrack.core.handlers import error_response

# a 504 is only answered where nothing can have been written
DEADLINE_METHODS = {"GET", "HEAD", "OPTIONS"}


async def log_requests(request: Request, call_next):
    """Log method, path, status and processing time for every request."""
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = time.perf_counter() - start_time
    logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.4f}s")
    return response


async def enforce_deadline(request: Request, call_next):
    """Bound read requests by REQUEST_TIMEOUT_SECONDS and answer 504 past it.

    Writes are never cut short; their response always reflects the commit.
    """
    timeout = settings.REQUEST_TIMEOUT_SECONDS
    if not timeout or timeout <= 0 or request.method not in DEADLINE_METHODS:
        return await call_next(request)
    try:
        return await asyncio.wait_for(call_next(request), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{request.method} {request.url.path} exceeded {timeout}s deadline")
        return error_response(504, "Request timed out")
