"""
Data models for normalized duplicated-transaction records.

A DuplicatedTransaction is one transaction (one hash) that the ledger
export observed at several block heights. The first height is the
canonical occurrence; every later height is a replay.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

METHOD_MINT = "tokens.mint"
METHOD_SEND = "ledger.send"


@dataclass(frozen=True)
class DuplicatedTransaction:
    """
    Typed form of one exported duplicated-transaction record.

    Built by normalizer.normalize_record; the argument payload stays an
    opaque JSON string until the aggregation engine knows the method.
    """

    orig_time: datetime
    max_time: datetime
    method: str
    heights: tuple[int, ...]
    """Block heights in export order; heights[0] is the canonical occurrence."""
    hash: bytes
    argument: str | None
    neighborhood: int
    count: int | None = None
    """Occurrence count from the export, if present; informational only."""

    @property
    def canonical_height(self) -> int:
        return self.heights[0]

    @property
    def duplicate_heights(self) -> tuple[int, ...]:
        """Heights of the replayed occurrences (everything after the first)."""
        return self.heights[1:]

    @property
    def hash_hex(self) -> str:
        return "0x" + self.hash.hex()

