"""
Bad Decision Calculator API Routes
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from lawlens.schemas.bad_decision import BadDecisionRequest
from lawlens.services.bad_decision_service import BadDecisionService
from lawlens.services.llm_service import LLMService
from lawlens.services.demo_data import is_demo_mode, mock_bad_decision_analysis
from lawlens.services.auth_service import get_client_ip
from lawlens.dependencies.database import get_db
from lawlens.dependencies.common import get_llm_service
from lawlens.core.validators import validate_decision_text
from lawlens.core.logging import logger

router = APIRouter()


@router.post("")
def analyze_decision(
    request_data: BadDecisionRequest,
    request: Request,
    db: Session = Depends(get_db),
    llm: LLMService = Depends(get_llm_service),
):
    """Score a decision and store a shareable result"""
    decision_text = request_data.decisionText
    error = validate_decision_text(decision_text)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    decision_text = decision_text.strip()
    try:
        if is_demo_mode():
            logger.info("Bad Decision Calculator running in demo mode")
            result = mock_bad_decision_analysis(decision_text)
            return {
                "riskScore": result["risk_score"],
                "explanation": result["message"],
                "shareSlug": None,
                "id": None,
                "demo": True,
            }

        service = BadDecisionService(db, llm)
        analysis = service.analyze(decision_text)
        stored = service.save_result(
            decision_text,
            analysis,
            ip_address=get_client_ip(request),
            user_agent=request.headers.get("user-agent") or "unknown",
        )
        share_slug, decision_id = stored if stored else (None, None)
        return {
            "riskScore": analysis.risk_score,
            "explanation": analysis.message,
            "shareSlug": share_slug,
            "id": decision_id,
        }
    except Exception as e:
        logger.error(f"Bad decision analysis failed, using fallback: {e}", exc_info=True)
        result = mock_bad_decision_analysis(decision_text)
        return {
            "riskScore": result["risk_score"],
            "explanation": result["message"],
            "shareSlug": None,
            "id": None,
            "demo": True,
            "fallback": True,
        }


@router.get("")
def get_shared_result(
    share: Optional[str] = Query(None, description="Share slug"),
    db: Session = Depends(get_db),
):
    """Look up a shared result by slug"""
    if not share:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Share slug is required")

    try:
        decision = BadDecisionService(db, llm=None).get_shared(share)
    except Exception as e:
        logger.error(f"Error retrieving shared result: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve result")

    if not decision:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shared result not found")

    return {
        "decisionText": decision.decision_text,
        "riskScore": decision.risk_score,
        "explanation": decision.ai_explanation,
        "createdAt": decision.created_at,
    }
