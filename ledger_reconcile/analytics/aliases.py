"""
Alias resolver: address -> human-readable display name.

Display only. Aliases never take part in aggregation keys or sums.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping


class AliasResolver:
    """Read-only alias lookup, iterated in ascending address order."""

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._aliases: Mapping[str, str] = MappingProxyType(dict(sorted((aliases or {}).items())))

    def lookup(self, address: str) -> str | None:
        return self._aliases.get(address)

    def label(self, address: str) -> str:
        """Alias for address, or "" when none is known."""
        return self._aliases.get(address) or ""

    def annotate(self, address: str) -> str:
        """Render "address (alias)", or the bare address when no alias is known."""
        alias = self._aliases.get(address)
        return f"{address} ({alias})" if alias else address

    def __contains__(self, address: object) -> bool:
        return address in self._aliases

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._aliases.items())

    def __len__(self) -> int:
        return len(self._aliases)

    def __repr__(self) -> str:
        return f"AliasResolver({len(self._aliases)} aliases)"
