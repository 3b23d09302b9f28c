"""
Bad Decision Calculator Schemas
"""

from pydantic import BaseModel, Field
from typing import Optional, Any


class BadDecisionRequest(BaseModel):
    """Decision submitted for scoring"""
    decisionText: Optional[Any] = Field(None, description="Decision to analyze")


class DecisionAnalysis(BaseModel):
    """Risk score and explanation"""
    risk_score: int
    message: str
