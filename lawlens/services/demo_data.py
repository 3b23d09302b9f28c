"""
Demo Data
Sample answers and canned analyses served when the live services are not configured
"""

import random
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from lawlens.config.settings import settings
from lawlens.schemas.question import SearchResult
from lawlens.services.search_service import calculate_relevance_score

_SAMPLE_QUESTIONS = [
    (
        "Can I live in an RV on my own property in Lexington?",
        "You can temporarily park and live in an RV on private property if it is not used as a permanent residence, but zoning laws prohibit long-term habitation.",
        "https://lexingtonky.gov/planning",
    ),
    (
        "Is it legal to have chickens in a residential backyard in Louisville?",
        "Yes, but you must limit flock size and maintain a clean enclosure. Roosters may be prohibited in some zones.",
        "https://louisvilleky.gov/animalservices",
    ),
    (
        "Can I collect rainwater in Kentucky?",
        "Yes. Kentucky does not restrict rainwater collection for personal use.",
        "https://ky.gov/environment",
    ),
    (
        "Do I need a permit to build a fence in Lexington?",
        "Fences over 6 feet require a building permit and must meet setback requirements.",
        "https://lexingtonky.gov/buildingpermits",
    ),
    (
        "Are pocket knives legal to carry in Kentucky?",
        "Yes, there are no length restrictions, but they cannot be carried in schools or government buildings.",
        "https://kentuckystatepolice.org/laws",
    ),
    (
        "Can I run a business out of my home in Kentucky?",
        "Home businesses are allowed if they do not create traffic, noise, or signage. Check local zoning ordinances for specific limits.",
        "https://lexingtonky.gov/zoning",
    ),
    (
        "Is it legal to sleep in your car overnight in Kentucky?",
        "Generally yes, but some cities have ordinances against sleeping in vehicles on public streets.",
        "https://kentucky.gov",
    ),
    (
        "Are fireworks legal in Kentucky?",
        "Consumer fireworks are legal but restricted in certain cities. Always verify local ordinances.",
        "https://kyfiremarshal.ky.gov",
    ),
    (
        "Can I keep bees in urban areas of Kentucky?",
        "Beekeeping is allowed, but hives must be placed a certain distance from property lines and streets.",
        "https://kyagr.com/statevet/bee",
    ),
    (
        "Do I need a fishing license to fish on my own land in Kentucky?",
        "No license is required if fishing on private land that you own, with no access to public waterways.",
        "https://fw.ky.gov",
    ),
    (
        "Can I legally own a pet monkey in New York City?",
        "No, it is illegal to own a monkey as a pet in New York City. According to NYC Health Code Article 161.01, "
        "it is prohibited to possess, sell, or import non-human primates within the five boroughs. This includes all "
        "species of monkeys, apes, and lemurs. Violations can result in fines and the animal being confiscated.",
        "https://www1.nyc.gov/site/doh/about/press/pr2021/health-department-issues-reminder-about-illegal-pets.page",
    ),
    (
        "Is it illegal to carry an ice cream cone in your back pocket in Alabama?",
        "This is actually a myth! While there are various claims about this law online, there is no evidence of any "
        "Alabama state law or municipal ordinance that specifically prohibits carrying ice cream cones in back pockets. "
        "This appears to be an urban legend that has persisted on the internet.",
        "https://www.alabama.gov/portal/secondary.jsp?page=Laws",
    ),
]

# keyword group -> risk added when any keyword appears
_RISK_INDICATORS = [
    (("quit", "invest", "money", "savings"), 20),
    (("illegal", "law", "police"), 25),
    (("tattoo", "ex", "drunk", "naked"), 15),
    (("tiktok", "youtube", "streamer", "influencer"), 30),
]

_BASE_RISK = 40

LOW_RISK_MESSAGES = [
    "Actually, this might not end in disaster. Shocking, I know.",
    "Your risk assessment skills are surprisingly intact. Proceed with caution.",
    "This falls into the 'probably won't ruin your life' category. Rare!",
]

MEDIUM_RISK_MESSAGES = [
    "Red flags are waving, but they're only medium-sized red flags.",
    "Your future self is giving you a concerned look right now.",
    "This has 'seemed like a good idea at the time' written all over it.",
]

HIGH_RISK_MESSAGES = [
    "Darwin Award committee is taking notes. Please reconsider immediately.",
    "This is how people end up on reality TV shows about bad decisions.",
    "Even your bad luck would be embarrassed by this plan.",
    "Your guardian angel just called in sick. That should tell you something.",
]


def is_demo_mode() -> bool:
    """Demo mode when forced by configuration or when no usable OpenAI key is configured"""
    if settings.DEMO_MODE:
        return True
    api_key = settings.OPENAI_API_KEY
    return not api_key or "placeholder" in api_key


def mock_questions() -> List[SearchResult]:
    now = datetime.now(timezone.utc)
    return [
        SearchResult(
            id=str(index),
            question_text=question,
            answer_text=answer,
            source_url=source,
            is_public=True,
            status="answered",
            created_at=now,
        )
        for index, (question, answer, source) in enumerate(_SAMPLE_QUESTIONS, start=1)
    ]


def mock_search(query: str) -> List[SearchResult]:
    """Sample questions matching any query word (or the whole query), best first"""
    query_lower = (query or "").strip().lower()
    words = [word for word in query_lower.split() if len(word) > 2]

    matches = []
    for question in mock_questions():
        question_lower = question.question_text.lower()
        answer_lower = (question.answer_text or "").lower()
        hit = any(word in question_lower or word in answer_lower for word in words)
        if hit or (query_lower and (query_lower in question_lower or query_lower in answer_lower)):
            question.relevance_score = calculate_relevance_score(query_lower, question.question_text, question.answer_text)
            matches.append(question)

    return sorted(matches, key=lambda q: q.relevance_score or 0, reverse=True)


def risk_message(risk_score: int, rng: Optional[random.Random] = None) -> str:
    """Canned message for the score band"""
    rng = rng or random
    if risk_score <= 30:
        return rng.choice(LOW_RISK_MESSAGES)
    if risk_score <= 60:
        return rng.choice(MEDIUM_RISK_MESSAGES)
    return rng.choice(HIGH_RISK_MESSAGES)


def mock_bad_decision_analysis(decision: str, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Keyword-driven risk score with +/-10 jitter, clamped to 0-100"""
    rng = rng or random
    decision_lower = (decision or "").lower()

    base_score = _BASE_RISK
    for keywords, weight in _RISK_INDICATORS:
        if any(keyword in decision_lower for keyword in keywords):
            base_score += weight

    risk_score = min(100, max(0, base_score + rng.randint(0, 19) - 10))
    return {"risk_score": risk_score, "message": risk_message(risk_score, rng)}
