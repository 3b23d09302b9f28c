"""
Base Schema for Pydantic
"""

from pydantic import BaseModel as PydanticBaseModel
from datetime import datetime
from typing import Optional


class BaseSchema(PydanticBaseModel):
    """Base schema reading from ORM attributes"""
    class Config:
        from_attributes = True


class BaseResponseSchema(BaseSchema):
    """Base response schema"""
    id: str
    created_at: Optional[datetime] = None
