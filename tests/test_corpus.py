"""Tests for server/corpus.py and build_runtime -- loading data files."""

import json
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from retrieval.synonyms import DEFAULT_SYNONYMS
from server.config import Settings
from server.corpus import CorpusLoadError, find_data_files, load_lectures, load_passages, load_synonyms
from server.runtime import build_runtime
from server.storage import JsonStore


def _write(path: Path, data):
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


def _settings(tmp: Path) -> Settings:
    return Settings(data_dir=tmp, claude_api_key="", load_env_file=False)


def test_file_patterns():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        for name in [
            "steiner-search-052-053.json",
            "steiner-search-001a-010-v2.json",
            "steiner-full-lectures-052-053.json",
            "steiner-search-52-53.json",
            "notes.json",
        ]:
            _write(root / name, {})
        search, lectures = find_data_files(root)
        assert [p.name for p in search] == ["steiner-search-001a-010-v2.json", "steiner-search-052-053.json"]
        assert [p.name for p in lectures] == ["steiner-full-lectures-052-053.json"]


def test_passages_from_all_files_in_name_order():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _write(root / "steiner-search-052-053.json", {"chunks": [{"ID": "GA052/1", "index": "b", "content": "x"}]})
        _write(root / "steiner-search-001-010.json", {"chunks": [{"ID": "GA001/1", "index": "a", "content": "y"}]})
        passages = load_passages(root)
        assert [p.key for p in passages] == [("GA001/1", "a"), ("GA052/1", "b")]


def test_no_search_file_is_fatal():
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(CorpusLoadError):
            load_passages(Path(tmp))
        with pytest.raises(CorpusLoadError):
            build_runtime(_settings(Path(tmp)))


def test_broken_search_file_is_fatal():
    with tempfile.TemporaryDirectory() as tmp:
        (Path(tmp) / "steiner-search-001-002.json").write_text("{", encoding="utf-8")
        with pytest.raises(CorpusLoadError):
            load_passages(Path(tmp))


def test_broken_lecture_file_is_skipped():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "steiner-full-lectures-001-002.json").write_text("{", encoding="utf-8")
        _write(root / "steiner-full-lectures-052-053.json", {"lectures": [
            {"ID": "GA052/7", "paragraphs": [{"index": "a", "content": "Text"}]},
            {"title": "ohne ID"},
        ]})
        lectures = load_lectures(root)
        assert list(lectures) == ["GA052/7"]
        assert lectures["GA052/7"].paragraphs[0].content == "Text"


def test_missing_synonyms_file_is_created_from_defaults():
    with tempfile.TemporaryDirectory() as tmp:
        store = JsonStore(Path(tmp))
        table = load_synonyms(store, "synonyms.json")
        assert table == DEFAULT_SYNONYMS
        assert store.load_json("synonyms.json") == DEFAULT_SYNONYMS


def test_invalid_synonyms_file_is_ignored_as_a_whole():
    with tempfile.TemporaryDirectory() as tmp:
        store = JsonStore(Path(tmp))
        _write(Path(tmp) / "synonyms.json", {"kant": ["kant"], "bad": "string"})
        assert load_synonyms(store, "synonyms.json") == DEFAULT_SYNONYMS


def test_custom_synonyms_replace_defaults():
    with tempfile.TemporaryDirectory() as tmp:
        store = JsonStore(Path(tmp))
        _write(Path(tmp) / "synonyms.json", {"goethe": ["goethe", "goethes"]})
        assert load_synonyms(store, "synonyms.json") == {"goethe": ["goethe", "goethes"]}


def test_runtime_without_lectures_still_starts():
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _write(root / "steiner-search-052-053.json", {"chunks": [{"ID": "GA052/1", "index": "b", "content": "x"}]})
        runtime = build_runtime(_settings(root))
        status = runtime.status()
        assert status["passagesLoaded"] == 1
        assert status["lecturesLoaded"] == 0
        assert status["llmConfigured"] is False
        assert runtime.provider is None
