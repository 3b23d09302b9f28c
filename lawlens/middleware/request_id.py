"""
Request ID Middleware
"""

from fastapi import Request
import uuid


async def request_id_middleware(request: Request, call_next):
    """Tag each request with an id, reusing an inbound X-Request-ID"""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id
    return response
