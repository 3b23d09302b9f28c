"""
Admin Auth Schemas
"""

from pydantic import BaseModel, Field
from typing import Optional


class AdminLoginRequest(BaseModel):
    """Admin login request"""
    email: Optional[str] = Field(None, description="Admin email")
    password: Optional[str] = Field(None, description="Admin password")


class AdminUser(BaseModel):
    """A verified admin identity"""
    email: str
    role: str
    session_id: str
    login_time: float


class AdminSession(BaseModel):
    """Server-side admin session"""
    session_id: str
    email: str
    login_time: float
    last_activity: float


class RateLimitEntry(BaseModel):
    """Login attempts from one client IP"""
    count: int
    last_attempt: float
