"""
Search Service: full-text + fuzzy + keyword layered search with relevance scoring
"""

from typing import List, Optional, Iterable
from lawlens.services.question_store import QuestionStore, QuestionStoreError
from lawlens.schemas.question import SearchResult
from lawlens.core.logging import logger
from lawlens.config.settings import settings


def _tokens(query: str, min_length: int, lowercase: bool = True) -> List[str]:
    text = query.lower() if lowercase else query
    return [word for word in text.split() if len(word) >= min_length]


def calculate_relevance_score(query: str, question_text: str, answer_text: Optional[str]) -> int:
    """
    Score how well a question/answer pair matches a query

    +100 for the whole query inside the question, +50 inside the answer,
    +10/+5 per query word (longer than 2 chars) inside question/answer,
    +5 when the question is shorter than 100 characters.
    """
    query_lower = query.strip().lower()
    question_lower = (question_text or "").lower()
    answer_lower = (answer_text or "").lower()

    score = 0
    if query_lower in question_lower:
        score += 100
    if query_lower in answer_lower:
        score += 50

    for word in query_lower.split():
        if len(word) > 2:
            if word in question_lower:
                score += 10
            if word in answer_lower:
                score += 5

    if len(question_text or "") < 100:
        score += 5

    return score


class SearchStrategy:
    """One stage of the search pipeline"""

    name = "base"

    def __init__(self, store: QuestionStore):
        self.store = store

    def attempt(self, query: str, remaining_limit: int, exclude_ids: Iterable[str]) -> List[SearchResult]:
        try:
            return self._run(query, remaining_limit, list(exclude_ids))
        except QuestionStoreError as e:
            logger.error(f"{self.name} search error: {e.message}")
            return []

    def _run(self, query: str, remaining_limit: int, exclude_ids: List[str]) -> List[SearchResult]:
        raise NotImplementedError


class FullTextStrategy(SearchStrategy):
    """Prefix-matching tsquery over the database full-text function"""

    name = "Full-text"

    @staticmethod
    def build_expression(query: str) -> str:
        return " | ".join(f"{word}:*" for word in _tokens(query, 3, lowercase=False))

    def _run(self, query, remaining_limit, exclude_ids):
        expression = self.build_expression(query)
        if not expression:
            return []
        rows = self.store.fulltext_search(expression, remaining_limit)
        return [SearchResult.from_record(row) for row in rows[:remaining_limit]]


class FuzzyStrategy(SearchStrategy):
    """Substring match on any query word, re-ranked by relevance score"""

    name = "Fuzzy"

    def __init__(self, store: QuestionStore, min_length: int = 3):
        super().__init__(store)
        self.min_length = min_length

    def _run(self, query, remaining_limit, exclude_ids):
        words = _tokens(query, self.min_length)
        if not words:
            return []

        candidates = self.store.find_matching_any(words, exclude_ids, remaining_limit * 2)
        scored = [
            SearchResult.from_record(
                row,
                relevance_score=calculate_relevance_score(query, row.question_text, row.answer_text),
            )
            for row in candidates
        ]
        # sorted() is stable, so equal scores keep the store's newest-first order
        scored = sorted(scored, key=lambda r: r.relevance_score or 0, reverse=True)
        return scored[:remaining_limit]


class KeywordStrategy(FuzzyStrategy):
    """Like fuzzy search, but only words longer than 3 characters"""

    name = "Keyword"

    def __init__(self, store: QuestionStore):
        super().__init__(store, min_length=4)


class LawLensSearch:
    """Layered question search"""

    def __init__(self, store: QuestionStore, strategies: Optional[List[SearchStrategy]] = None):
        self.store = store
        self.strategies = strategies if strategies is not None else [
            FullTextStrategy(store),
            FuzzyStrategy(store),
            KeywordStrategy(store),
        ]

    calculate_relevance_score = staticmethod(calculate_relevance_score)

    def search_questions(self, query: Optional[str], limit: int = settings.SEARCH_DEFAULT_LIMIT) -> List[SearchResult]:
        """Run each strategy until `limit` distinct results are collected"""
        if not query or len(query.strip()) < settings.SEARCH_MIN_QUERY_LENGTH:
            return []

        clean_query = query.strip()
        results: List[SearchResult] = []
        seen = set()

        try:
            for strategy in self.strategies:
                if len(results) >= limit:
                    break
                remaining = limit - len(results)
                for result in strategy.attempt(clean_query, remaining, list(seen)):
                    if result.id in seen:
                        continue
                    seen.add(result.id)
                    results.append(result)
            return results[:limit]
        except Exception as e:
            logger.error(f"Search error: {e}", exc_info=True)
            return self.simple_search(clean_query, limit)

    def simple_search(self, query: str, limit: int) -> List[SearchResult]:
        """Plain substring match on the question text"""
        try:
            rows = self.store.find_by_question_text(query, limit)
            return [SearchResult.from_record(row) for row in rows]
        except Exception as e:
            logger.error(f"Simple search error: {e}")
            return []

    def find_best_match(self, query: str) -> Optional[SearchResult]:
        """Single best result, or None"""
        results = self.search_questions(query, 1)
        return results[0] if results else None

    def search_related_questions(self, query: str, limit: int = settings.SEARCH_DEFAULT_LIMIT) -> List[SearchResult]:
        return self.search_questions(query, limit)
