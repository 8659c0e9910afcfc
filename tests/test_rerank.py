"""Tests for retrieval/rerank.py -- proximity, vocabulary and length adjustments."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from retrieval.rerank import (
    length_penalty,
    proximity_bonus,
    query_words,
    semantic_rerank,
    vocabulary_bonus,
)
from retrieval.types import Passage, SearchResult


def _result(content, keyword_score=1, index="x"):
    return SearchResult(passage=Passage(id="GA1/1", index=index, content=content), keyword_score=keyword_score)


def test_query_words_skips_short_words():
    assert query_words("Ich und die Welt") == ["ich", "und", "die", "welt"]
    assert query_words("ob es so ist") == ["ist"]


def test_length_penalty_bounds():
    assert length_penalty(500) == 0
    assert length_penalty(600) == pytest.approx(0.2)
    assert length_penalty(1000) == 0.5
    assert length_penalty(5000) == 0.5
    assert length_penalty(0) == 0.5


def test_proximity_at_window_edge_gives_nothing():
    content = "alpha" + "x" * 95 + "omega"
    assert content.find("omega") == 100
    assert proximity_bonus(content, ["alpha", "omega"]) == 0


def test_proximity_counts_each_ordered_pair():
    content = "alpha" + "x" * 45 + "omega"
    # distance 50 -> 5 per ordered pair
    assert proximity_bonus(content, ["alpha", "omega"]) == 10


def test_proximity_same_position_is_maximal():
    assert proximity_bonus("abcd efgh", ["abc", "abcd"]) == 20


def test_proximity_ignores_missing_words():
    assert proximity_bonus("alpha omega", ["alpha", "zeta"]) == 0


def test_vocabulary_bonus_counts_each_term_once():
    assert vocabulary_bonus("geist geist geist") == 2
    assert vocabulary_bonus("erkenntnis und wahrheit") == 4
    assert vocabulary_bonus("nichts") == 0


def test_ideal_length_without_bonuses_keeps_keyword_score():
    result = _result("x" * 500, keyword_score=7)
    [ranked] = semantic_rerank([result], "zzz")
    assert ranked.final_score == 7
    assert ranked.semantic_score == ranked.final_score
    assert ranked.keyword_score == 7


def test_rerank_sorts_by_final_score():
    short = _result("geist", keyword_score=5, index="short")
    ideal = _result("geist " + "x" * 494, keyword_score=5, index="ideal")
    ranked = semantic_rerank([short, ideal], "zzz")
    assert [r.passage.index for r in ranked] == ["ideal", "short"]
    assert ranked[0].final_score == 7
    assert ranked[1].final_score == pytest.approx((5 + 2) * 0.5)


def test_equal_final_scores_keep_input_order():
    a = _result("seele " + "x" * 100, keyword_score=3, index="a")
    b = _result("seele " + "y" * 100, keyword_score=3, index="b")
    ranked = semantic_rerank([a, b], "seele")
    assert ranked[0].final_score == ranked[1].final_score
    assert [r.passage.index for r in ranked] == ["a", "b"]
    assert [r.passage.index for r in semantic_rerank([b, a], "seele")] == ["b", "a"]
