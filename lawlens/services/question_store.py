"""
Question Store
Search primitives over the questions table
"""

from typing import List, Dict, Any, Iterable
from sqlalchemy import or_, text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lawlens.models.question import Question
from lawlens.core.constants import QUESTION_STATUS
from lawlens.core.exceptions import CustomException, ErrorCode
from lawlens.core.logging import logger
from lawlens.config.settings import settings


class QuestionStoreError(CustomException):
    """A store query failed"""
    def __init__(self, message: str):
        super().__init__(code=ErrorCode.SEARCH_FAILED, message=message)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class QuestionStore:
    """Read-only access to public, answered questions"""

    def __init__(self, db: Session):
        self.db = db

    def _searchable(self):
        return self.db.query(Question).filter(
            Question.is_public.is_(True),
            Question.status == QUESTION_STATUS["ANSWERED"],
        )

    def _fail(self, operation: str, error: Exception) -> QuestionStoreError:
        self.db.rollback()
        logger.error(f"Question store {operation} failed: {error}")
        return QuestionStoreError(f"{operation} failed: {error}")

    def fulltext_search(self, expression: str, limit: int) -> List[Dict[str, Any]]:
        """Run the database full-text function; rows are already filtered to public, answered questions"""
        try:
            rows = self.db.execute(
                sql_text(f"SELECT * FROM {settings.FULLTEXT_SEARCH_FUNCTION}(:search_query, :result_limit)"),
                {"search_query": expression, "result_limit": limit},
            ).mappings().all()
            return [dict(row) for row in rows]
        except SQLAlchemyError as e:
            raise self._fail("fulltext_search", e)

    def find_matching_any(self, terms: Iterable[str], exclude_ids: Iterable[str], limit: int) -> List[Question]:
        """Rows where any term appears in the question or the answer, newest first"""
        conditions = []
        for term in terms:
            pattern = f"%{_escape_like(term)}%"
            conditions.append(Question.question_text.ilike(pattern, escape="\\"))
            conditions.append(Question.answer_text.ilike(pattern, escape="\\"))
        if not conditions:
            return []

        try:
            query = self._searchable().filter(or_(*conditions))
            excluded = list(exclude_ids)
            if excluded:
                query = query.filter(Question.id.notin_(excluded))
            return query.order_by(Question.created_at.desc()).limit(limit).all()
        except SQLAlchemyError as e:
            raise self._fail("find_matching_any", e)

    def find_by_question_text(self, query: str, limit: int) -> List[Question]:
        """Rows whose question contains the raw query, newest first"""
        try:
            pattern = f"%{_escape_like(query)}%"
            return (
                self._searchable()
                .filter(Question.question_text.ilike(pattern, escape="\\"))
                .order_by(Question.created_at.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("find_by_question_text", e)
