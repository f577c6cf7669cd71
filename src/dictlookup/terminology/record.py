from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

PLACEHOLDER = "--------"
DELIMITER = "\t"


def fill_placeholder(field: str) -> str:
    return field if field.strip() else PLACEHOLDER


@dataclass(slots=True, frozen=True)
class Record:
    left: str
    right: str

    def __post_init__(self) -> None:
        for name in ("left", "right"):
            value = getattr(self, name)
            if DELIMITER in value or "\n" in value or "\r" in value:
                raise ValueError(f"Record {name} field may not contain a tab or line break: {value!r}")

    @property
    def line(self) -> str:
        return f"{self.left}{DELIMITER}{self.right}"

    @property
    def is_blank(self) -> bool:
        return self.left == PLACEHOLDER and self.right == PLACEHOLDER

    @classmethod
    def from_line(cls, line: str) -> "Record":
        left, sep, right = line.rstrip("\r\n").partition(DELIMITER)
        if not sep:
            right = PLACEHOLDER
        return cls(left=fill_placeholder(left), right=fill_placeholder(right))


def merge_pairs(left_tokens: Sequence[str], right_tokens: Sequence[str]) -> list[Record]:
    """Pair both columns by position, dropping rows that are empty on both sides."""
    if len(left_tokens) != len(right_tokens):
        logger.warning(
            "column lengths differ (%d left, %d right); pairing the first %d",
            len(left_tokens),
            len(right_tokens),
            min(len(left_tokens), len(right_tokens)),
        )
    records: list[Record] = []
    for left, right in zip(left_tokens, right_tokens):
        record = Record(left=fill_placeholder(left), right=fill_placeholder(right))
        if record.is_blank:
            continue
        records.append(record)
    return records
