"""
Search API Routes
"""

from typing import Optional, List, Dict, Any
from fastapi import APIRouter, Depends, HTTPException, Query, status

from lawlens.schemas.question import SearchResult
from lawlens.services.search_service import LawLensSearch
from lawlens.services.demo_data import is_demo_mode, mock_search
from lawlens.dependencies.common import get_search_engine
from lawlens.core.validators import validate_search_query
from lawlens.core.logging import logger
from lawlens.config.settings import settings

router = APIRouter()


def _parse_limit(raw: Optional[str]) -> int:
    try:
        limit = int(raw) if raw is not None else settings.SEARCH_DEFAULT_LIMIT
    except ValueError:
        limit = settings.SEARCH_DEFAULT_LIMIT
    return max(1, min(limit, settings.SEARCH_MAX_LIMIT))


def _multiple_body(results: List[SearchResult], query: str) -> Dict[str, Any]:
    return {
        "answers": results,
        "found": len(results) > 0,
        "count": len(results),
        "query": query,
    }


def _single_body(best: Optional[SearchResult], not_found_message: str) -> Dict[str, Any]:
    if best:
        return {"answer": best, "found": True, "relevance_score": best.relevance_score or 0}
    return {"answer": None, "found": False, "message": not_found_message}


def _demo_body(query: str, multiple: bool, limit: int, fallback: bool = False) -> Dict[str, Any]:
    results = mock_search(query)
    if multiple:
        body = _multiple_body(results[:limit], query)
    else:
        message = "No matching answers found (demo mode)" if fallback else "No matching answers found in our demo database"
        body = _single_body(results[0] if results else None, message)
    body["demo"] = True
    if fallback:
        body["fallback"] = True
    return body


@router.get("")
def search_questions(
    q: Optional[str] = Query(None, description="Question to search for"),
    multiple: Optional[str] = Query(None, description="'true' to return several related answers"),
    limit: Optional[str] = Query(None, description="Maximum number of answers in multiple mode"),
    engine: LawLensSearch = Depends(get_search_engine),
):
    """Find the best answer, or several related answers, for a question"""
    error = validate_search_query(q)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    query = q.strip()
    want_multiple = multiple == "true"
    max_results = _parse_limit(limit)

    try:
        if is_demo_mode():
            logger.info("Search running in demo mode")
            return _demo_body(query, want_multiple, max_results)

        if want_multiple:
            return _multiple_body(engine.search_related_questions(query, max_results), query)
        return _single_body(engine.find_best_match(query), "No matching answers found in our database")
    except Exception as e:
        logger.error(f"Search error, falling back to demo data: {e}", exc_info=True)
        return _demo_body(query, want_multiple, max_results, fallback=True)
