"""
Question Model
"""

from sqlalchemy import Column, String, Text, Boolean
from sqlalchemy.orm import relationship
from lawlens.models.base import BaseModel


class Question(BaseModel):
    """A legal question and, once researched, its answer"""

    __tablename__ = "questions"

    question_text = Column(Text, nullable=False, comment="Canonical question")
    answer_text = Column(Text, nullable=True, comment="Researched answer")
    source_url = Column(String(1000), nullable=True, comment="Source of the answer")
    is_public = Column(Boolean, nullable=False, default=True, index=True, comment="Eligible for public search")
    status = Column(String(20), nullable=False, default="pending", index=True, comment="pending/researching/answered")

    payments = relationship("Payment", back_populates="question", order_by="Payment.created_at")

    def __repr__(self):
        return f"<Question(id='{self.id}', status='{self.status}')>"
