"""
Duplicate aggregation engine.

Turns normalized duplicated-transaction records into the erroneous value
created or moved by replayed occurrences:

- tokens.mint: every duplicate height (heights[1:]) re-executed the mint, so
  each address's amount is added once per duplicate height, keyed by
  (height, address).
- ledger.send: the transfer is counted once per record, keyed by
  (from, to); heights are not part of the key.

heights[0] is the canonical occurrence and never contributes. Records with
any other method are skipped. Aliases are attached for display only.
"""

from __future__ import annotations

import json
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from ledger_reconcile.analytics.aliases import AliasResolver
from ledger_reconcile.core.exceptions import MalformedArgumentError
from ledger_reconcile.ingestion.models import METHOD_MINT, METHOD_SEND, DuplicatedTransaction
from ledger_reconcile.reconcile_logging import get_logger

logger = get_logger(__name__)

SendKey = tuple[str, str]


@dataclass(frozen=True)
class SendArgument:
    """Decoded ledger.send payload. symbol is carried but never aggregated on."""

    sender: str
    receiver: str
    amount: int
    symbol: str | None = None


@dataclass
class AggregationResult:
    """
    All aggregation outputs of one run.

    Every mapping is key-sorted: mint by height then address, sends by
    (from, to), totals by address / height.
    """

    mint: dict[int, dict[str, int]]
    sends: dict[SendKey, int]
    totals_by_address: dict[str, int]
    totals_by_height: dict[int, int]
    aliases: AliasResolver = field(default_factory=AliasResolver)
    records_seen: int = 0
    mint_records: int = 0
    send_records: int = 0
    skipped_records: int = 0

    @property
    def grand_total(self) -> int:
        """Total erroneously minted amount across all heights and addresses."""
        return sum(self.totals_by_address.values())

    @property
    def send_total(self) -> int:
        return sum(self.sends.values())

    def iter_mint_rows(self) -> Iterator[tuple[int, str, int]]:
        """Yield (height, address, amount) ascending by height, then address."""
        for height, by_address in self.mint.items():
            for address, amount in by_address.items():
                yield height, address, amount

    def iter_send_rows(self) -> Iterator[tuple[SendKey, int]]:
        """Yield ((from, to), amount) ascending by pair."""
        yield from self.sends.items()

    def counters(self) -> dict[str, int]:
        return {
            "records_seen": self.records_seen,
            "mint_records": self.mint_records,
            "send_records": self.send_records,
            "skipped_records": self.skipped_records,
        }


def _parse_amount(method: str, value: Any) -> int:
    """Non-negative integer amount from a decimal string or JSON integer."""
    if isinstance(value, bool):
        raise MalformedArgumentError(method, value, "amount is not an unsigned integer")
    if isinstance(value, int):
        if value < 0:
            raise MalformedArgumentError(method, value, "amount is negative")
        return value
    if isinstance(value, str):
        if value.isascii() and value.isdigit():
            return int(value)
    raise MalformedArgumentError(method, value, "amount is not an unsigned integer")


def _load_argument(method: str, argument: str | None) -> Any:
    if argument is None:
        raise MalformedArgumentError(method, None, "missing argument")
    try:
        return json.loads(argument)
    except json.JSONDecodeError as e:
        raise MalformedArgumentError(method, argument, f"invalid JSON: {e}") from e


def decode_mint_argument(argument: str | None) -> dict[str, int]:
    """Decode a tokens.mint argument: {"address": "amount", ...}."""
    payload = _load_argument(METHOD_MINT, argument)
    if not isinstance(payload, dict):
        raise MalformedArgumentError(METHOD_MINT, argument, "expected an object of address -> amount")
    return {address: _parse_amount(METHOD_MINT, amount) for address, amount in payload.items()}


def decode_send_argument(argument: str | None) -> SendArgument:
    """Decode a ledger.send argument: {"from": ..., "to": ..., "amount": ...[, "symbol": ...]}."""
    payload = _load_argument(METHOD_SEND, argument)
    if not isinstance(payload, dict):
        raise MalformedArgumentError(METHOD_SEND, argument, "expected an object")
    sender = payload.get("from")
    receiver = payload.get("to")
    if not isinstance(sender, str) or not isinstance(receiver, str):
        raise MalformedArgumentError(METHOD_SEND, argument, "'from' and 'to' must be strings")
    if "amount" not in payload:
        raise MalformedArgumentError(METHOD_SEND, argument, "missing 'amount'")
    symbol = payload.get("symbol")
    return SendArgument(
        sender=sender,
        receiver=receiver,
        amount=_parse_amount(METHOD_SEND, payload["amount"]),
        symbol=symbol if isinstance(symbol, str) else None,
    )


def _sorted_mint(mint: dict[int, dict[str, int]]) -> dict[int, dict[str, int]]:
    return {height: dict(sorted(mint[height].items())) for height in sorted(mint)}


def aggregate(
    records: Iterable[DuplicatedTransaction],
    aliases: AliasResolver | None = None,
) -> AggregationResult:
    """
    Aggregate the erroneous effect of every duplicated occurrence.

    Raises:
        MalformedArgumentError: a mint/send record's argument does not decode.
            The error carries the record index; no partial result is returned.
    """
    mint: dict[int, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    sends: dict[SendKey, int] = defaultdict(int)
    seen = mint_records = send_records = skipped = 0

    for index, record in enumerate(records):
        seen += 1
        duplicate_heights = record.duplicate_heights
        try:
            if record.method == METHOD_MINT:
                amounts = decode_mint_argument(record.argument)
                mint_records += 1
                for address, amount in amounts.items():
                    for height in duplicate_heights:
                        mint[height][address] += amount
            elif record.method == METHOD_SEND:
                send = decode_send_argument(record.argument)
                send_records += 1
                # once per record, whatever the number of duplicate heights
                if duplicate_heights:
                    sends[(send.sender, send.receiver)] += send.amount
            else:
                skipped += 1
        except MalformedArgumentError as e:
            logger.error(
                "argument_malformed",
                index=index,
                method=record.method,
                hash=record.hash_hex,
                reason=e.reason,
            )
            raise e.at_index(index)

    mint_table = _sorted_mint(mint)
    totals_by_address: dict[str, int] = defaultdict(int)
    totals_by_height: dict[int, int] = {}
    for height, by_address in mint_table.items():
        totals_by_height[height] = sum(by_address.values())
        for address, amount in by_address.items():
            totals_by_address[address] += amount

    result = AggregationResult(
        mint=mint_table,
        sends=dict(sorted(sends.items())),
        totals_by_address=dict(sorted(totals_by_address.items())),
        totals_by_height=totals_by_height,
        aliases=aliases if aliases is not None else AliasResolver(),
        records_seen=seen,
        mint_records=mint_records,
        send_records=send_records,
        skipped_records=skipped,
    )
    logger.info(
        "aggregation_done",
        heights=len(mint_table),
        addresses=len(result.totals_by_address),
        send_pairs=len(result.sends),
        grand_total=str(result.grand_total),
        **result.counters(),
    )
    return result
