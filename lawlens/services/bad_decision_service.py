"""
Bad Decision Service
Risk scoring through the LLM and shareable result storage
"""

import json
import math
import secrets
from typing import Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lawlens.models.bad_decision import BadDecision
from lawlens.schemas.bad_decision import DecisionAnalysis
from lawlens.services.llm_service import LLMService
from lawlens.core.constants import SHARE_SLUG_ALPHABET
from lawlens.core.exceptions import CustomException, ErrorCode
from lawlens.core.logging import logger
from lawlens.config.settings import settings

ANALYSIS_PROMPT = """
Rate the following decision on financial, legal, social, and practical risk (0-10 each).
Sum them, multiply by 2.5 to get a 0-100 risk_score.
Then write a short funny message under 280 chars.

Decision: "{decision}"

Output strictly in JSON like this:
{{"risk_score": 75, "message": "This is a bad idea. Hide your wallet and your dignity."}}
"""


def parse_analysis(raw: str) -> DecisionAnalysis:
    """Validate the model's JSON answer and clamp the score to 0-100"""
    try:
        result = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CustomException(code=ErrorCode.LLM_INVALID_RESPONSE, message=f"Response is not JSON: {e}")

    if not isinstance(result, dict):
        raise CustomException(code=ErrorCode.LLM_INVALID_RESPONSE, message="Invalid response structure from LLM")

    score = result.get("risk_score")
    message = result.get("message")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not isinstance(message, str):
        raise CustomException(code=ErrorCode.LLM_INVALID_RESPONSE, message="Invalid response structure from LLM")
    if math.isnan(score) or math.isinf(score):
        raise CustomException(code=ErrorCode.LLM_INVALID_RESPONSE, message="Risk score is not finite")

    risk_score = max(0, min(100, math.floor(score + 0.5)))
    return DecisionAnalysis(risk_score=risk_score, message=message)


def generate_share_slug(length: Optional[int] = None) -> str:
    length = length or settings.SHARE_SLUG_LENGTH
    return "".join(secrets.choice(SHARE_SLUG_ALPHABET) for _ in range(length))


class BadDecisionService:
    """Bad Decision Calculator"""

    def __init__(self, db: Session, llm: Optional[LLMService] = None):
        self.db = db
        self.llm = llm or LLMService()

    def analyze(self, decision_text: str) -> DecisionAnalysis:
        prompt = ANALYSIS_PROMPT.format(decision=decision_text.strip())
        raw = self.llm.chat([{"role": "user", "content": prompt}])
        return parse_analysis(raw)

    def _slug_taken(self, slug: str) -> bool:
        return self.db.query(BadDecision.id).filter(BadDecision.share_slug == slug).first() is not None

    def unique_share_slug(self) -> str:
        slug = generate_share_slug()
        attempts = 0
        while attempts < settings.SHARE_SLUG_MAX_ATTEMPTS and self._slug_taken(slug):
            slug = generate_share_slug()
            attempts += 1
        return slug

    def save_result(
        self,
        decision_text: str,
        analysis: DecisionAnalysis,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> Optional[Tuple[str, str]]:
        """Store the result; (share_slug, id), or None when it could not be stored"""
        try:
            slug = self.unique_share_slug()
            decision = BadDecision(
                decision_text=decision_text.strip(),
                risk_score=analysis.risk_score,
                ai_explanation=analysis.message,
                share_slug=slug,
                ip_address=ip_address,
                user_agent=user_agent,
            )
            self.db.add(decision)
            self.db.commit()
            self.db.refresh(decision)
            return slug, decision.id
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to store bad decision: {e}")
            return None

    def get_shared(self, share_slug: str) -> Optional[BadDecision]:
        return self.db.query(BadDecision).filter(BadDecision.share_slug == share_slug).first()
