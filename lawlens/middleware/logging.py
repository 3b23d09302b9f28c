"""
Logging Middleware
"""

from fastapi import Request
import logging
import time

logger = logging.getLogger(__name__)


async def logging_middleware(request: Request, call_next):
    """Log method, path, status and duration of every request"""
    start_time = time.time()

    logger.info(f"Request started: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"Request finished: {request.method} {request.url.path} "
        f"status: {response.status_code} duration: {process_time:.3f}s"
    )

    response.headers["X-Process-Time"] = str(process_time)
    return response
