"""
Validators Module
"""

from typing import Optional
import re
from lawlens.config.settings import settings


def validate_email(email: str) -> bool:
    """Validate an email address"""
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email or ""))


def validate_search_query(query: Optional[str]) -> Optional[str]:
    """Return an error message for an unusable search query, or None when it is acceptable"""
    if not query:
        return "Query parameter is required"
    if len(query.strip()) < settings.SEARCH_MIN_QUERY_LENGTH:
        return f"Query must be at least {settings.SEARCH_MIN_QUERY_LENGTH} characters long"
    if len(query) > settings.SEARCH_MAX_QUERY_LENGTH:
        return "Query is too long"
    return None


def validate_decision_text(text) -> Optional[str]:
    """Return an error message for an unusable decision text, or None when it is acceptable"""
    if not text or not isinstance(text, str) or len(text.strip()) < settings.DECISION_MIN_LENGTH:
        return f"Decision text must be at least {settings.DECISION_MIN_LENGTH} characters long"
    if len(text) > settings.DECISION_MAX_LENGTH:
        return f"Decision text must be less than {settings.DECISION_MAX_LENGTH} characters"
    return None
