"""
Common Dependencies
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from lawlens.dependencies.database import get_db
from lawlens.services.question_store import QuestionStore
from lawlens.services.search_service import LawLensSearch
from lawlens.services.llm_service import LLMService


def get_search_engine(db: Session = Depends(get_db)) -> LawLensSearch:
    return LawLensSearch(QuestionStore(db))


def get_llm_service() -> LLMService:
    return LLMService()
