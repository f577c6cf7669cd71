from __future__ import annotations

import logging
import sys
from typing import List, Optional

import typer

from .batch_runner import iter_terms, run_terms
from .fetch import PageFetcher
from .log import configure_logging
from .settings import get_settings
from .terminology import CacheInitError, CacheStore

logger = logging.getLogger(__name__)

app = typer.Typer(help="Look up words and phrases in an online dictionary, with a local offline cache.")


@app.command()
def lookup(
    terms: Optional[List[str]] = typer.Argument(None, help="Words or phrases to look up (read from stdin, one per line, when omitted)."),
) -> None:
    """Print cached and freshly fetched translations for each term."""
    settings = get_settings()
    configure_logging(settings.log_level, color=settings.color and sys.stderr.isatty())

    store = CacheStore(settings.cache_path)
    try:
        store.ensure_exists()
    except CacheInitError as exc:
        logger.critical("%s", exc)
        raise typer.Exit(code=1) from exc

    fetcher = PageFetcher(settings.search_url, timeout=settings.fetch_timeout)
    run_terms(iter_terms(terms, sys.stdin), store=store, fetch_page=fetcher, output=typer.echo)


if __name__ == "__main__":
    app()
