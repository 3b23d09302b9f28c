"""
Test Search Service
"""

from types import SimpleNamespace

import pytest
from lawlens.services.search_service import (
    LawLensSearch,
    FullTextStrategy,
    FuzzyStrategy,
    KeywordStrategy,
    calculate_relevance_score,
)
from lawlens.services.question_store import QuestionStore, QuestionStoreError

CHICKENS = "Is it legal to have chickens in a residential backyard in Louisville?"


def _row(id, question_text, answer_text="", **extra):
    return SimpleNamespace(
        id=id,
        question_text=question_text,
        answer_text=answer_text,
        source_url=None,
        is_public=True,
        status="answered",
        created_at=None,
        **extra
    )


class FakeStore:
    """In-memory stand-in for QuestionStore that records every call"""

    def __init__(self, rows=None, fulltext_rows=None, fail_fulltext=False, fail_matching=False):
        self.rows = rows or []
        self.fulltext_rows = fulltext_rows or []
        self.fail_fulltext = fail_fulltext
        self.fail_matching = fail_matching
        self.calls = []

    def fulltext_search(self, expression, limit):
        self.calls.append(("fulltext", expression, limit))
        if self.fail_fulltext:
            raise QuestionStoreError("function does not exist")
        return [vars(r).copy() for r in self.fulltext_rows][:limit]

    def find_matching_any(self, terms, exclude_ids, limit):
        self.calls.append(("matching", list(terms), list(exclude_ids), limit))
        if self.fail_matching:
            raise QuestionStoreError("connection lost")
        found = [
            r for r in self.rows
            if r.id not in exclude_ids
            and any(t in r.question_text.lower() or t in (r.answer_text or "").lower() for t in terms)
        ]
        return found[:limit]

    def find_by_question_text(self, query, limit):
        self.calls.append(("simple", query, limit))
        return [r for r in self.rows if query.lower() in r.question_text.lower()][:limit]


def test_relevance_score_for_chickens_example():
    """Token overlap plus the short-question bonus"""
    score = calculate_relevance_score("chickens in Louisville", CHICKENS, None)
    assert score == 25


def test_relevance_exact_phrase_beats_scattered_tokens():
    query = "fishing license"
    exact = "Do I need a fishing license on my land?"
    scattered = "Do I need a license for fishing on my land?"
    assert calculate_relevance_score(query, exact, "") > calculate_relevance_score(query, scattered, "")


def test_relevance_answer_matches_weigh_less():
    in_question = calculate_relevance_score("rainwater", "Can I collect rainwater?", "")
    in_answer = calculate_relevance_score("rainwater", "Can I collect water?", "Rainwater is fine.")
    assert in_question == 100 + 10 + 5
    assert in_answer == 50 + 5 + 5


def test_relevance_long_question_gets_no_bonus():
    long_question = "x" * 100
    assert calculate_relevance_score("zzz", long_question, "") == 0


def test_short_query_returns_nothing():
    store = FakeStore(rows=[_row("1", CHICKENS)])
    engine = LawLensSearch(store)
    assert engine.search_questions(" a ") == []
    assert engine.search_questions("") == []
    assert engine.search_questions(None) == []
    assert store.calls == []


def test_fulltext_expression_uses_prefix_tokens():
    assert FullTextStrategy.build_expression("Chickens in Louisville") == "Chickens:* | Louisville:*"
    assert FullTextStrategy.build_expression("is it ok") == ""


def test_chickens_record_ranks_above_backyard_only_record():
    store = FakeStore(rows=[
        _row("shed", "Can I put a shed in my backyard?", "Sheds in a backyard need a permit in Louisville."),
        _row("chickens", CHICKENS, "Yes, but you must limit flock size."),
    ])
    results = LawLensSearch(store).search_questions("chickens in Louisville", 5)
    assert [r.id for r in results][0] == "chickens"
    assert results[0].relevance_score == 25


def test_fuzzy_surfaces_answer_only_match_when_fulltext_is_empty():
    store = FakeStore(
        rows=[_row("rv", "Can I live on my land?", "Living in an RV long-term violates zoning.")],
        fulltext_rows=[],
    )
    results = LawLensSearch(store).search_questions("zoning rules", 5)
    assert [r.id for r in results] == ["rv"]
    assert results[0].relevance_score is not None


def test_fulltext_results_are_not_refetched():
    fulltext_hit = _row("ft", "Are fireworks legal in Kentucky?", "Consumer fireworks are legal.")
    other = _row("other", "Can I sell fireworks at home?", "Only with a permit.")
    store = FakeStore(rows=[fulltext_hit, other], fulltext_rows=[fulltext_hit])

    results = LawLensSearch(store).search_questions("fireworks legal", 5)

    ids = [r.id for r in results]
    assert ids.count("ft") == 1
    assert ids[0] == "ft"
    matching_calls = [c for c in store.calls if c[0] == "matching"]
    assert matching_calls
    assert all("ft" in call[2] for call in matching_calls)


def test_results_never_exceed_limit():
    rows = [_row(str(i), f"Kentucky law question number {i}", "Kentucky answer") for i in range(20)]
    store = FakeStore(rows=rows, fulltext_rows=rows[:2])
    for limit in (1, 3, 7):
        results = LawLensSearch(store).search_questions("Kentucky law", limit)
        assert len(results) <= limit
        assert len({r.id for r in results}) == len(results)


def test_stops_once_limit_reached():
    rows = [_row(str(i), f"Kentucky question {i}", "") for i in range(3)]
    store = FakeStore(rows=rows, fulltext_rows=rows)
    results = LawLensSearch(store).search_questions("Kentucky question", 3)
    assert len(results) == 3
    assert [c[0] for c in store.calls] == ["fulltext"]


def test_fuzzy_requests_twice_the_remaining_limit():
    store = FakeStore(rows=[_row("1", "Can I keep bees?", "")])
    LawLensSearch(store, strategies=[FuzzyStrategy(store)]).search_questions("keep bees", 4)
    assert store.calls[0] == ("matching", ["keep", "bees"], [], 8)


def test_keyword_strategy_ignores_short_words():
    store = FakeStore(rows=[_row("1", "Can I own a pet monkey?", "")])
    strategy = KeywordStrategy(store)
    assert strategy.attempt("own pet", 5, []) == []
    assert store.calls == []
    assert [r.id for r in strategy.attempt("own monkey", 5, [])] == ["1"]


def test_strategy_store_errors_contribute_nothing():
    store = FakeStore(rows=[_row("1", "Are fireworks legal?", "")], fail_fulltext=True)
    results = LawLensSearch(store).search_questions("fireworks", 5)
    assert [r.id for r in results] == ["1"]


def test_all_strategies_failing_returns_empty():
    store = FakeStore(rows=[_row("1", "Are fireworks legal?", "")], fail_fulltext=True, fail_matching=True)
    assert LawLensSearch(store).search_questions("fireworks", 5) == []


def test_unexpected_error_falls_back_to_simple_search():
    class Exploding:
        def attempt(self, query, remaining_limit, exclude_ids):
            raise RuntimeError("boom")

    store = FakeStore(rows=[_row("1", "Are fireworks legal in Kentucky?", "")])
    results = LawLensSearch(store, strategies=[Exploding()]).search_questions("fireworks", 5)
    assert [r.id for r in results] == ["1"]
    assert results[0].relevance_score is None
    assert store.calls[-1] == ("simple", "fireworks", 5)


def test_simple_search_failure_returns_empty():
    class Exploding:
        def attempt(self, query, remaining_limit, exclude_ids):
            raise RuntimeError("boom")

    def broken_simple_search(query, limit):
        raise QuestionStoreError("down")

    store = FakeStore()
    store.find_by_question_text = broken_simple_search
    assert LawLensSearch(store, strategies=[Exploding()]).search_questions("fireworks", 5) == []


def test_find_best_match_and_related():
    store = FakeStore(rows=[
        _row("a", "Can I collect rainwater in Kentucky?", "Yes."),
        _row("b", "Is rainwater safe?", "Rainwater collection is legal."),
    ])
    engine = LawLensSearch(store)
    best = engine.find_best_match("rainwater")
    assert best is not None
    assert len(engine.search_related_questions("rainwater", 5)) == 2
    assert engine.find_best_match("zzzz qqqq") is None


@pytest.fixture
def store(db_session):
    return QuestionStore(db_session)


def test_store_filters_to_public_answered(store, make_question):
    make_question("Can I keep chickens?", "Yes.")
    make_question("Can I keep goats privately?", "Maybe.", is_public=False)
    make_question("Can I keep chickens indoors?", None, status="pending")

    rows = store.find_matching_any(["keep"], [], 10)
    assert [r.question_text for r in rows] == ["Can I keep chickens?"]


def test_store_orders_newest_first_and_excludes(store, make_question):
    first = make_question("Fence height rules?", "Six feet.")
    second = make_question("Fence permit rules?", "Permit required.")
    third = make_question("Fence color rules?", "None.")

    rows = store.find_matching_any(["fence"], [second.id], 10)
    assert [r.id for r in rows] == [third.id, first.id]


def test_store_escapes_like_wildcards(store, make_question):
    make_question("Is 100% of the yard usable?", "Yes.")
    make_question("Is the yard usable?", "Yes.")
    rows = store.find_matching_any(["100%"], [], 10)
    assert len(rows) == 1


def test_store_fulltext_failure_raises_store_error(store):
    # SQLite has no full-text function
    with pytest.raises(QuestionStoreError):
        store.fulltext_search("chickens:*", 5)


def test_engine_over_sqlite_store(db_session, make_question):
    make_question(CHICKENS, "Yes, but you must limit flock size.")
    make_question("Can I put a shed in my backyard?", "Small sheds need no permit.")

    results = LawLensSearch(QuestionStore(db_session)).search_questions("chickens in Louisville", 5)
    assert results[0].question_text == CHICKENS
    assert results[0].relevance_score == 25
