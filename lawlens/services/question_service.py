"""
Question Service
Admin curation of the answer database
"""

from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload

from lawlens.models.question import Question
from lawlens.schemas.question import QuestionCreate, QuestionUpdate
from lawlens.core.constants import QUESTION_STATUS, ADMIN_QUESTIONS_DEFAULT_LIMIT
from lawlens.core.exceptions import CustomException, ErrorCode
from lawlens.core.logging import logger


class QuestionService:
    """Question CRUD for the admin console"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, question_id: str) -> Optional[Question]:
        return self.db.query(Question).filter(Question.id == question_id).first()

    def list_questions(self, status: str = "all", limit: int = ADMIN_QUESTIONS_DEFAULT_LIMIT) -> List[Question]:
        """Newest first, payments eagerly loaded"""
        query = self.db.query(Question).options(selectinload(Question.payments))
        if status and status != "all":
            query = query.filter(Question.status == status)
        return query.order_by(Question.created_at.desc()).limit(limit).all()

    def create_question(self, data: QuestionCreate) -> Question:
        if not data.question_text:
            raise CustomException(code=ErrorCode.VALIDATION_ERROR, message="Question text is required")

        question = Question(
            question_text=data.question_text,
            answer_text=data.answer_text,
            source_url=data.source_url,
            is_public=data.is_public,
            status=QUESTION_STATUS["ANSWERED"] if data.answer_text else QUESTION_STATUS["PENDING"],
        )
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)
        logger.info(f"Question created: {question.id}")
        return question

    def update_question(self, data: QuestionUpdate) -> Tuple[Question, bool]:
        """
        Apply the supplied fields

        Returns the question and whether it was answered by this update.
        """
        if not data.id:
            raise CustomException(code=ErrorCode.VALIDATION_ERROR, message="Question ID is required")

        question = self.get_by_id(data.id)
        if not question:
            raise CustomException(code=ErrorCode.NOT_FOUND, message="Question not found")

        previous_status = question.status
        changes = data.model_dump(exclude_unset=True, exclude={"id"})
        for field, value in changes.items():
            setattr(question, field, value)

        if data.answer_text and data.status != QUESTION_STATUS["ANSWERED"]:
            question.status = QUESTION_STATUS["ANSWERED"]

        self.db.commit()
        self.db.refresh(question)

        newly_answered = bool(data.answer_text) and previous_status != QUESTION_STATUS["ANSWERED"]
        logger.info(f"Question updated: {question.id} (status {previous_status} -> {question.status})")
        return question, newly_answered

    def delete_question(self, question_id: Optional[str]) -> None:
        if not question_id:
            raise CustomException(code=ErrorCode.VALIDATION_ERROR, message="Question ID is required")

        question = self.get_by_id(question_id)
        if question:
            self.db.delete(question)
            self.db.commit()
            logger.info(f"Question deleted: {question_id}")
