from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote_plus, urlparse
from urllib.request import url2pathname

import requests

from .settings import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; dictlookup/1.0)"
TERM_FIELD = "{term}"


class FetchError(RuntimeError):
    """The result page could not be retrieved."""


def build_search_url(template: str, term: str) -> str:
    encoded = quote_plus(term)
    if TERM_FIELD in template:
        return template.replace(TERM_FIELD, encoded)
    if urlparse(template).scheme == "file":
        return template
    return f"{template}{encoded}"


def _read_file_url(url: str) -> str:
    parsed = urlparse(url)
    path = Path(url2pathname(parsed.path))
    try:
        return path.read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        raise FetchError(f"Cannot read {path}: {exc}") from exc


def fetch_html(url: str, *, timeout: float = DEFAULT_TIMEOUT) -> str:
    if urlparse(url).scheme == "file":
        return _read_file_url(url)

    logger.debug("GET %s", url)
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as exc:
        raise FetchError(f"Timed out after {timeout:g}s fetching {url}") from exc
    except requests.exceptions.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else "unknown"
        raise FetchError(f"HTTP {status} for {url}") from exc
    except requests.exceptions.RequestException as exc:
        raise FetchError(f"Network error for {url}: {exc}") from exc
    logger.debug("fetched %d bytes from %s", len(response.content), url)
    return response.text


@dataclass(slots=True)
class PageFetcher:
    """Fetches the result page for a term from a URL template."""

    url_template: str
    timeout: float = DEFAULT_TIMEOUT

    def url_for(self, term: str) -> str:
        return build_search_url(self.url_template, term)

    def __call__(self, term: str) -> str:
        return fetch_html(self.url_for(term), timeout=self.timeout)
