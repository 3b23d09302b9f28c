"""
Payment Schemas
"""

from pydantic import BaseModel
from typing import Optional


class CreatePaymentRequest(BaseModel):
    """Paid research request for an unanswered question"""
    email: Optional[str] = None
    question: Optional[str] = None


class CreatePaymentResponse(BaseModel):
    """Hosted checkout redirect"""
    checkout_url: str
    question_id: str
