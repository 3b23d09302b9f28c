"""
Bad Decision Model
"""

from sqlalchemy import Column, String, Integer, Text
from lawlens.models.base import BaseModel


class BadDecision(BaseModel):
    """A scored Bad Decision Calculator submission"""

    __tablename__ = "bad_decisions"

    decision_text = Column(Text, nullable=False, comment="Submitted decision")
    risk_score = Column(Integer, nullable=False, comment="Risk score 0-100")
    ai_explanation = Column(Text, nullable=False, comment="Generated explanation")
    share_slug = Column(String(32), nullable=True, unique=True, index=True, comment="Public share slug")
    ip_address = Column(String(64), nullable=True, comment="Client IP")
    user_agent = Column(String(500), nullable=True, comment="Client user agent")

    def __repr__(self):
        return f"<BadDecision(id='{self.id}', risk_score={self.risk_score})>"
