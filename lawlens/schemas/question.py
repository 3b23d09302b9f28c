"""
Question Schemas
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime
from lawlens.schemas.base import BaseSchema, BaseResponseSchema

QuestionStatus = Literal["pending", "researching", "answered"]


class SearchResult(BaseResponseSchema):
    """A public, answered question with its derived relevance score"""
    question_text: str
    answer_text: Optional[str] = None
    source_url: Optional[str] = None
    is_public: bool = True
    status: str = "answered"
    relevance_score: Optional[int] = None

    @classmethod
    def from_record(cls, record, relevance_score: Optional[int] = None) -> "SearchResult":
        """Build from an ORM row or a mapping returned by the store"""
        if isinstance(record, dict):
            result = cls.model_validate(record)
        else:
            result = cls.model_validate(record, from_attributes=True)
        if relevance_score is not None:
            result.relevance_score = relevance_score
        return result


class PaymentSummary(BaseSchema):
    """Payment details shown next to a question in the admin console"""
    user_email: str
    stripe_payment_id: Optional[str] = None
    amount_cents: int
    created_at: Optional[datetime] = None


class QuestionResponse(BaseResponseSchema):
    """Question as seen by admins"""
    question_text: str
    answer_text: Optional[str] = None
    source_url: Optional[str] = None
    is_public: bool
    status: str
    updated_at: Optional[datetime] = None
    payments: List[PaymentSummary] = []


class QuestionCreate(BaseModel):
    """Admin question creation"""
    question_text: Optional[str] = None
    answer_text: Optional[str] = None
    source_url: Optional[str] = None
    is_public: bool = True


class QuestionUpdate(BaseModel):
    """Admin question update; only supplied fields are changed"""
    id: Optional[str] = None
    question_text: Optional[str] = None
    answer_text: Optional[str] = None
    source_url: Optional[str] = None
    is_public: Optional[bool] = None
    status: Optional[QuestionStatus] = None


class RecentQuestion(BaseSchema):
    """Recent activity row on the admin dashboard"""
    id: str
    question_text: str
    status: str
    created_at: Optional[datetime] = None
    payer_emails: List[str] = Field(default_factory=list)
