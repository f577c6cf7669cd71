from __future__ import annotations

from typing import Iterable

from .terminology.record import Record

LEADER_CHAR = "."
MARGIN = 2


def column_width(records: Iterable[Record]) -> int:
    return max((len(record.left) for record in records), default=0) + MARGIN


def render(records: Iterable[Record]) -> list[str]:
    """Lay records out as ``left.... right`` with every left column the same width."""
    rows = list(records)
    if not rows:
        return []
    width = column_width(rows)
    leader = LEADER_CHAR * width
    return [f"{(record.left + leader)[:width]} {record.right}" for record in rows]
