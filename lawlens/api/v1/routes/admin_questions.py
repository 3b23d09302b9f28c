"""
Admin Questions API Routes
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from lawlens.schemas.auth import AdminUser
from lawlens.schemas.question import QuestionCreate, QuestionUpdate, QuestionResponse
from lawlens.services.question_service import QuestionService
from lawlens.tasks.notification_tasks import send_question_answered_email_task
from lawlens.dependencies.database import get_db
from lawlens.dependencies.auth import require_admin
from lawlens.core.constants import ADMIN_QUESTIONS_DEFAULT_LIMIT
from lawlens.core.exceptions import CustomException, ErrorCode
from lawlens.core.logging import logger

router = APIRouter()


def _status_for(e: CustomException) -> int:
    if e.code == ErrorCode.NOT_FOUND:
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


@router.get("")
def list_questions(
    status_filter: str = Query("all", alias="status"),
    limit: int = Query(ADMIN_QUESTIONS_DEFAULT_LIMIT, ge=1),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
):
    """Questions newest first, with their payments"""
    try:
        questions = QuestionService(db).list_questions(status=status_filter, limit=limit)
        return {"questions": [QuestionResponse.model_validate(q) for q in questions]}
    except Exception as e:
        logger.error(f"Error fetching questions: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch questions")


@router.post("")
def create_question(
    question_data: QuestionCreate,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
):
    """Add a question to the answer database"""
    try:
        question = QuestionService(db).create_question(question_data)
        return {"question": QuestionResponse.model_validate(question)}
    except CustomException as e:
        raise HTTPException(status_code=_status_for(e), detail=e.message)
    except Exception as e:
        logger.error(f"Error creating question: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create question")


@router.put("")
def update_question(
    question_data: QuestionUpdate,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
):
    """Partially update a question; answering a paid question emails the payer"""
    try:
        question, newly_answered = QuestionService(db).update_question(question_data)
    except CustomException as e:
        raise HTTPException(status_code=_status_for(e), detail=e.message)
    except Exception as e:
        logger.error(f"Error updating question: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update question")

    if newly_answered and question.payments:
        payment = question.payments[0]
        try:
            send_question_answered_email_task.delay(
                payment.user_email,
                question.question_text,
                question_data.answer_text,
                question_data.source_url,
            )
            logger.info(f"Answer email queued for question {question.id}")
        except Exception as e:
            logger.error(f"Failed to send answer email: {e}")

    return {"question": QuestionResponse.model_validate(question)}


@router.delete("")
def delete_question(
    id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
):
    """Delete a question"""
    try:
        QuestionService(db).delete_question(id)
        return {"success": True}
    except CustomException as e:
        raise HTTPException(status_code=_status_for(e), detail=e.message)
    except Exception as e:
        logger.error(f"Error deleting question: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete question")
