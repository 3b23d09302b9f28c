"""
Security Headers Middleware
"""

from fastapi import Request
from lawlens.core.constants import SECURITY_HEADERS

ADMIN_PATH_PREFIX = "/api/admin"


async def security_headers_middleware(request: Request, call_next):
    """Add the admin security headers to every admin API response"""
    response = await call_next(request)
    if request.url.path.startswith(ADMIN_PATH_PREFIX):
        for key, value in SECURITY_HEADERS.items():
            response.headers.setdefault(key, value)
    return response
