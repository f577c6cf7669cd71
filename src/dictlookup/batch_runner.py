from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, TextIO

from .processing import FetchPageFn, OutputFn, run_query
from .terminology import CacheStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunSummary:
    terms_total: int = 0
    terms_with_local_hits: int = 0
    terms_with_remote_results: int = 0
    terms_failed: int = 0
    records_added: int = 0


def iter_terms(arguments: Sequence[str] | None, stream: TextIO) -> Iterator[str]:
    """Yield the command-line terms, or the non-blank lines of ``stream`` when there are none."""
    if arguments:
        yield from arguments
        return
    for line in stream:
        term = line.strip()
        if term:
            yield term


def run_terms(
    terms: Iterable[str],
    *,
    store: CacheStore,
    fetch_page: FetchPageFn,
    output: OutputFn,
) -> RunSummary:
    summary = RunSummary()
    for term in terms:
        outcome = run_query(term, store=store, fetch_page=fetch_page, output=output)
        summary.terms_total += 1
        summary.records_added += outcome.records_added
        if outcome.local_lines:
            summary.terms_with_local_hits += 1
        if outcome.remote_records:
            summary.terms_with_remote_results += 1
        if outcome.failed:
            summary.terms_failed += 1

    logger.info(
        "run complete: %d term(s), %d with remote results, %d failed, %d new cache record(s)",
        summary.terms_total,
        summary.terms_with_remote_results,
        summary.terms_failed,
        summary.records_added,
    )
    return summary
