"""
Recover the two translation columns embedded in a dictionary result page.

The page ships its results as two parallel JavaScript array literals inside
a ``<script>`` block::

    var c1Arr = new Array("","house","home");
    var c2Arr = new Array("","Haus","Heim");

``c2Arr`` holds the source-language column and ``c1Arr`` the translation
column. Script blocks are located with BeautifulSoup; their text is then walked
with a small set of named states instead of chained text substitutions, so every rule (script
regions, assignment shape, string escapes, empty entries) can be
exercised on its own.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator

from bs4 import BeautifulSoup

from .terminology.record import PLACEHOLDER

logger = logging.getLogger(__name__)

LEFT_ARRAY = "c2Arr"
RIGHT_ARRAY = "c1Arr"

_ASSIGNMENT = re.compile(r"\bvar (c[12]Arr) ?= ?new Array ?\(")
_WHITESPACE = re.compile(r"\s+")
_ESCAPES = {"'": "'", '"': '"', "\\": "\\"}


class ExtractionError(ValueError):
    """The page does not carry the expected array data."""


class MisalignedArraysError(ExtractionError):
    """Both arrays were found but they hold a different number of entries."""


class ScanState(Enum):
    OUTSIDE_SCRIPT = auto()
    INSIDE_SCRIPT = auto()
    SCANNING_ARRAY1 = auto()
    SCANNING_ARRAY2 = auto()


@dataclass(slots=True)
class RawArrayPair:
    left_tokens: list[str] = field(default_factory=list)
    right_tokens: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.left_tokens)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text)


def _skip_spaces(text: str, index: int) -> int:
    while index < len(text) and text[index] == " ":
        index += 1
    return index


def read_string_literal(text: str, index: int) -> tuple[str, int] | None:
    """
    Read a double-quoted literal whose opening quote is at ``index``.

    Returns the unescaped value (the placeholder for an empty or blank
    literal) and the index just past the closing quote, or None when the
    literal is not terminated.
    """
    if index >= len(text) or text[index] != '"':
        return None
    chars: list[str] = []
    index += 1
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            escaped = text[index + 1]
            chars.append(_ESCAPES.get(escaped, char + escaped))
            index += 2
            continue
        if char == '"':
            value = "".join(chars)
            return (value if value.strip() else PLACEHOLDER), index + 1
        chars.append(char)
        index += 1
    return None


def read_array_body(text: str, index: int) -> tuple[list[str], int] | None:
    """
    Parse ``"a", "b", ... );`` starting right after ``new Array(``.

    Returns the tokens and the index past the terminating semicolon, or None
    when the text does not have exactly that shape.
    """
    tokens: list[str] = []
    index = _skip_spaces(text, index)
    if text.startswith(")", index):
        index += 1
    else:
        while True:
            literal = read_string_literal(text, index)
            if literal is None:
                return None
            token, index = literal
            tokens.append(token)
            index = _skip_spaces(text, index)
            if text.startswith(",", index):
                index = _skip_spaces(text, index + 1)
                continue
            if text.startswith(")", index):
                index += 1
                break
            return None
    index = _skip_spaces(text, index)
    if not text.startswith(";", index):
        return None
    return tokens, index + 1


class ArrayScanner:
    """Walks script regions in document order until one yields both arrays."""

    def __init__(self, html: str) -> None:
        self.html = html
        self.state = ScanState.OUTSIDE_SCRIPT
        self._scripts: Iterator[str] | None = None
        self.region = ""
        self.cursor = 0
        self.regions_seen = 0
        self.arrays: dict[str, list[str]] = {}

    @property
    def complete(self) -> bool:
        return LEFT_ARRAY in self.arrays and RIGHT_ARRAY in self.arrays

    def run(self) -> RawArrayPair:
        while not self.complete:
            if self.state is ScanState.OUTSIDE_SCRIPT:
                if not self._enter_script():
                    break
            elif self.state is ScanState.INSIDE_SCRIPT:
                self._find_assignment()
            else:
                self._scan_array()

        left = self.arrays.get(LEFT_ARRAY, []) if self.complete else []
        right = self.arrays.get(RIGHT_ARRAY, []) if self.complete else []
        if not left or not right:
            logger.debug("no array data after scanning %d script region(s)", self.regions_seen)
            raise ExtractionError("no array data")
        if len(left) != len(right):
            raise MisalignedArraysError(
                f"{LEFT_ARRAY} has {len(left)} entries but {RIGHT_ARRAY} has {len(right)}"
            )
        return RawArrayPair(left_tokens=left, right_tokens=right)

    def _script_texts(self) -> Iterator[str]:
        soup = BeautifulSoup(self.html, "html.parser")
        for script in soup.find_all("script"):
            yield str(script.string or "")

    def _enter_script(self) -> bool:
        if self._scripts is None:
            self._scripts = self._script_texts()
        text = next(self._scripts, None)
        if text is None:
            return False
        self.region = collapse_whitespace(text)
        self.cursor = 0
        self.arrays = {}
        self.regions_seen += 1
        self.state = ScanState.INSIDE_SCRIPT
        return True

    def _find_assignment(self) -> None:
        match = _ASSIGNMENT.search(self.region, self.cursor)
        if match is None:
            self.state = ScanState.OUTSIDE_SCRIPT
            return
        self.cursor = match.end()
        self.state = ScanState.SCANNING_ARRAY1 if match.group(1) == RIGHT_ARRAY else ScanState.SCANNING_ARRAY2

    def _scan_array(self) -> None:
        name = RIGHT_ARRAY if self.state is ScanState.SCANNING_ARRAY1 else LEFT_ARRAY
        parsed = read_array_body(self.region, self.cursor)
        self.state = ScanState.INSIDE_SCRIPT
        if parsed is None:
            logger.debug("skipping malformed %s assignment", name)
            return
        tokens, self.cursor = parsed
        self.arrays.setdefault(name, tokens)


def extract_arrays(html: str) -> RawArrayPair:
    """Return the source (``c2Arr``) and translation (``c1Arr``) columns of a result page."""
    return ArrayScanner(html).run()
