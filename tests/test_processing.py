from __future__ import annotations

from pathlib import Path

import pytest

from dictlookup.extraction import ExtractionError
from dictlookup.fetch import FetchError
from dictlookup.processing import run_query
from dictlookup.terminology import DELIMITER, CacheStore, CacheStoreError, Record

FIXTURES = Path(__file__).parent / "fixtures"


class DummyFetcher:
    def __init__(self, html: str = "", error: Exception | None = None) -> None:
        self.html = html
        self.error = error
        self.terms: list[str] = []

    def __call__(self, term: str) -> str:
        self.terms.append(term)
        if self.error is not None:
            raise self.error
        return self.html


def _store(tmp_path: Path, records: list[Record] | None = None) -> CacheStore:
    store = CacheStore(tmp_path / "cache.txt")
    store.ensure_exists()
    if records:
        store.merge(records)
    return store


def test_run_query_renders_local_and_remote_and_caches(tmp_path: Path) -> None:
    store = _store(tmp_path, [Record("Haus {n}", "house"), Record("Baum", "tree")])
    fetcher = DummyFetcher((FIXTURES / "dictcc_haus.html").read_text(encoding="utf-8"))
    output: list[str] = []

    outcome = run_query("haus", store=store, fetch_page=fetcher, output=output.append)

    assert fetcher.terms == ["haus"]
    assert outcome.local_lines == [f"Haus {{n}}{DELIMITER}house"]
    assert len(outcome.remote_records) == 3
    assert outcome.records_added == 2
    assert not outcome.failed
    assert output == [
        "Haus {n}.. house",
        "Haus {n}........ house",
        "Heim {n}........ home",
        "Herrenhaus {n}.. master's house",
    ]
    assert f"Herrenhaus {{n}}{DELIMITER}master's house" in store.lines()
    assert len(store.lines()) == 4


def test_hello_bonjour_page(tmp_path: Path) -> None:
    store = _store(tmp_path)
    html = '<script>var c2Arr = new Array("hello","");\nvar c1Arr = new Array("bonjour","");</script>'
    output: list[str] = []

    outcome = run_query("hello", store=store, fetch_page=DummyFetcher(html), output=output.append)

    assert outcome.remote_records == [Record("hello", "bonjour")]
    assert output == ["hello.. bonjour"]
    assert store.lines() == [f"hello{DELIMITER}bonjour"]


def test_empty_response_warns_and_leaves_store_alone(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    store = _store(tmp_path, [Record("Baum", "tree")])
    before = store.path.read_text(encoding="utf-8")
    output: list[str] = []

    with caplog.at_level("INFO", logger="dictlookup"):
        outcome = run_query("xyz", store=store, fetch_page=DummyFetcher(""), output=output.append)

    assert output == []
    assert outcome.remote_records == []
    assert len(outcome.errors) == 1
    assert isinstance(outcome.errors[0], ExtractionError)
    assert store.path.read_text(encoding="utf-8") == before
    messages = [record.getMessage() for record in caplog.records]
    assert "running local query for 'xyz'" in messages
    assert "running remote query for 'xyz'" in messages
    assert "no remote results for 'xyz'" in messages


def test_fetch_failure_degrades_to_no_results(tmp_path: Path) -> None:
    store = _store(tmp_path, [Record("Baum", "tree")])
    output: list[str] = []

    outcome = run_query("baum", store=store, fetch_page=DummyFetcher(error=FetchError("offline")), output=output.append)

    assert output == ["Baum.. tree"]
    assert isinstance(outcome.errors[0], FetchError)
    assert outcome.records_added == 0
    assert store.lines() == [f"Baum{DELIMITER}tree"]


def test_cache_write_failure_still_shows_results(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = _store(tmp_path)
    html = '<script>var c1Arr = new Array("dog"); var c2Arr = new Array("Hund");</script>'

    def failing_merge(records: object) -> int:
        raise CacheStoreError("disk full")

    monkeypatch.setattr(store, "merge", failing_merge)
    output: list[str] = []

    outcome = run_query("hund", store=store, fetch_page=DummyFetcher(html), output=output.append)

    assert output == ["Hund.. dog"]
    assert isinstance(outcome.errors[0], CacheStoreError)


def test_undecodable_cache_fails_only_the_local_step(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / "cache.txt")
    store.path.write_bytes("M\xe4dchen\tgirl\n".encode("latin-1"))
    html = '<script>var c1Arr = new Array("girl"); var c2Arr = new Array("Mädchen");</script>'
    output: list[str] = []

    outcome = run_query("girl", store=store, fetch_page=DummyFetcher(html), output=output.append)

    assert output == ["Mädchen.. girl"]
    assert len(outcome.errors) == 2
    assert all(isinstance(error, CacheStoreError) for error in outcome.errors)


def test_malformed_cache_line_is_skipped(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    store = CacheStore(tmp_path / "cache.txt")
    store.path.write_text("Haus\thouse\textra\nHaus {n}\thouse\n", encoding="utf-8")
    output: list[str] = []

    with caplog.at_level("WARNING", logger="dictlookup"):
        outcome = run_query("haus", store=store, fetch_page=DummyFetcher(""), output=output.append)

    assert output == ["Haus {n}.. house"]
    assert any(isinstance(error, ValueError) and not isinstance(error, ExtractionError) for error in outcome.errors)
    assert "skipping malformed cache line" in caplog.text
