"""Tests for retrieval/thematic.py -- key-term extraction and merge."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from retrieval.keyword import keyword_search
from retrieval.thematic import extract_key_terms, thematic_search
from retrieval.types import Passage


def _passage(index, content, id="GA1/1"):
    return Passage(id=id, index=index, content=content)


def test_extract_key_terms_drops_stopwords_short_words_and_punctuation():
    terms = extract_key_terms("Wie ist das Verhältnis von Kant und Goethe?")
    assert terms == ["kant", "goethe"]


def test_extract_key_terms_keeps_order_and_duplicates():
    assert extract_key_terms("Seele, Geist; Seele!") == ["seele", "geist", "seele"]


def test_repeat_discovery_adds_half_score():
    passages = [_passage("p1", "alpha alpha beta beta beta")]
    results = thematic_search("alpha beta", passages, {})
    assert len(results) == 1
    # first term scores 2, second term scores 3 and adds half of it
    assert results[0].keyword_score == 2 + 0.5 * 3
    assert results[0].matched_terms == ["alpha", "beta"]


def test_results_from_different_terms_are_merged_by_id_and_index():
    passages = [
        _passage("p1", "alpha"),
        _passage("p2", "beta beta"),
        _passage("p1", "alpha", id="GA2/1"),
    ]
    results = thematic_search("alpha beta", passages, {})
    keys = [r.key for r in results]
    assert len(keys) == len(set(keys)) == 3
    assert keys[0] == ("GA1/1", "p2")


def test_no_key_terms_falls_back_to_whole_query():
    passages = [_passage("p1", "was ist das denn"), _passage("p2", "anderes")]
    results = thematic_search("ist das", passages, {})
    expected = keyword_search("ist das", passages, {})
    assert [r.key for r in results] == [r.key for r in expected]
    assert results[0].keyword_score == 1


def test_merge_does_not_mutate_keyword_results():
    passages = [_passage("p1", "alpha beta")]
    before = keyword_search("alpha", passages, {})[0].keyword_score
    thematic_search("alpha beta", passages, {})
    assert keyword_search("alpha", passages, {})[0].keyword_score == before


def test_equal_merged_scores_keep_corpus_order():
    # "alpha" surfaces p2 before "beta" surfaces p1; both end with score 1
    passages = [_passage("p1", "beta"), _passage("p2", "alpha")]
    results = thematic_search("alpha beta", passages, {})
    assert [r.passage.index for r in results] == ["p1", "p2"]
    assert results[0].keyword_score == results[1].keyword_score
