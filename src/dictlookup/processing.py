from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from .display import render
from .extraction import ExtractionError, extract_arrays
from .fetch import FetchError
from .terminology import CacheStore, CacheStoreError, Record, merge_pairs

logger = logging.getLogger(__name__)

OutputFn = Callable[[str], None]
FetchPageFn = Callable[[str], str]


@dataclass(slots=True)
class QueryOutcome:
    term: str
    local_lines: list[str] = field(default_factory=list)
    remote_records: list[Record] = field(default_factory=list)
    records_added: int = 0
    errors: list[Exception] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.errors)


def _emit(lines: list[str], output: OutputFn) -> None:
    for line in lines:
        output(line)


def _local_lookup(term: str, store: CacheStore, outcome: QueryOutcome, output: OutputFn) -> None:
    logger.info("running local query for '%s'", term)
    try:
        outcome.local_lines = store.query(term)
    except CacheStoreError as exc:
        logger.error("local query failed for '%s': %s", term, exc)
        outcome.errors.append(exc)
        return

    records: list[Record] = []
    for line in outcome.local_lines:
        try:
            records.append(Record.from_line(line))
        except ValueError as exc:
            logger.warning("skipping malformed cache line %r: %s", line, exc)
            outcome.errors.append(exc)
    _emit(render(records), output)


def _remote_lookup(term: str, fetch_page: FetchPageFn, outcome: QueryOutcome) -> None:
    logger.info("running remote query for '%s'", term)
    try:
        html = fetch_page(term)
        pair = extract_arrays(html)
    except FetchError as exc:
        logger.error("fetch failed for '%s': %s", term, exc)
        outcome.errors.append(exc)
        return
    except ExtractionError as exc:
        logger.error("could not extract results for '%s': %s", term, exc)
        outcome.errors.append(exc)
        return
    outcome.remote_records = merge_pairs(pair.left_tokens, pair.right_tokens)


def run_query(
    term: str,
    *,
    store: CacheStore,
    fetch_page: FetchPageFn,
    output: OutputFn = print,
) -> QueryOutcome:
    """Look a term up in the cache, then remotely, and cache whatever the remote side returned."""
    outcome = QueryOutcome(term=term)
    _local_lookup(term, store, outcome, output)
    _remote_lookup(term, fetch_page, outcome)

    if not outcome.remote_records:
        logger.warning("no remote results for '%s'", term)
        return outcome

    _emit(render(outcome.remote_records), output)
    try:
        outcome.records_added = store.merge(outcome.remote_records)
    except CacheStoreError as exc:
        logger.error("could not update cache for '%s': %s", term, exc)
        outcome.errors.append(exc)
        return outcome
    logger.debug("cached %d new record(s) for '%s'", outcome.records_added, term)
    return outcome
