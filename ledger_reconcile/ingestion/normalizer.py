"""
Record normalizer — raw exported records to DuplicatedTransaction.

Raw records come from a JSON export with camelCase keys:

    {
        "origTime": "2023-04-01 10:00:00",
        "maxTime": "2023-04-01 10:05:00",
        "method": "tokens.mint",
        "height": "{100,205,310}",
        "hash": "0xdeadbeef",
        "argument": "{\"addr1\": \"50\"}",
        "count": "3",
        "neighborhood": "7"
    }

Parsing is parse-or-fail: any malformed field raises MalformedRecordError
naming the field, and batch normalization stops at the first bad record.
"""

from __future__ import annotations

import binascii
from datetime import datetime
from typing import Any, Iterable, Mapping

from ledger_reconcile.core.exceptions import MalformedRecordError
from ledger_reconcile.ingestion.models import DuplicatedTransaction
from ledger_reconcile.reconcile_logging import get_logger

logger = get_logger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
# Hashes are exported with a two-character prefix ("0x", or "\\x" from Postgres bytea)
HASH_PREFIX_LEN = 2

REQUIRED_FIELDS = ("origTime", "maxTime", "method", "height", "hash", "neighborhood")


def parse_uint(field: str, value: Any) -> int:
    """Parse a non-negative integer from a decimal string (or a plain int)."""
    if isinstance(value, bool):
        raise MalformedRecordError(field, value, "expected an unsigned integer")
    if isinstance(value, int):
        if value < 0:
            raise MalformedRecordError(field, value, "expected an unsigned integer")
        return value
    if not isinstance(value, str):
        raise MalformedRecordError(field, value, "expected a decimal string")
    # no surrounding whitespace or sign, same as the exporter writes them
    if not (value.isascii() and value.isdigit()):
        raise MalformedRecordError(field, value, "expected an unsigned integer")
    return int(value)


def parse_heights(value: Any) -> tuple[int, ...]:
    """Parse "{100,205,310}" into (100, 205, 310), preserving order."""
    if not isinstance(value, str):
        raise MalformedRecordError("height", value, "expected a brace-delimited string")
    inner = value.strip().strip("{}")
    if not inner.strip():
        raise MalformedRecordError("height", value, "empty height list")
    heights: list[int] = []
    for item in inner.split(","):
        item = item.strip()
        if not (item.isascii() and item.isdigit()):
            raise MalformedRecordError("height", value, f"bad height {item!r}")
        heights.append(int(item))
    return tuple(heights)


def parse_hash(value: Any) -> bytes:
    """Strip the two-character prefix and decode the remaining hex."""
    if not isinstance(value, str) or len(value) < HASH_PREFIX_LEN:
        raise MalformedRecordError("hash", value, "expected a prefixed hex string")
    try:
        return binascii.unhexlify(value[HASH_PREFIX_LEN:])
    except ValueError as e:
        raise MalformedRecordError("hash", value, f"invalid hex: {e}") from e


def parse_time(field: str, value: Any) -> datetime:
    """Parse a naive timestamp in YYYY-MM-DD HH:MM:SS form."""
    if not isinstance(value, str):
        raise MalformedRecordError(field, value, f"expected a {TIME_FORMAT} string")
    try:
        return datetime.strptime(value, TIME_FORMAT)
    except ValueError as e:
        raise MalformedRecordError(field, value, str(e)) from e


def normalize_record(raw: Mapping[str, Any]) -> DuplicatedTransaction:
    """
    Convert one raw export record into a DuplicatedTransaction.

    Raises:
        MalformedRecordError: a required field is missing or fails to parse.
    """
    if not isinstance(raw, Mapping):
        raise MalformedRecordError("record", raw, "expected a JSON object")
    for key in REQUIRED_FIELDS:
        if key not in raw:
            raise MalformedRecordError(key, None, "missing field")

    method = raw["method"]
    if not isinstance(method, str):
        raise MalformedRecordError("method", method, "expected a string")

    argument = raw.get("argument")
    if argument is not None and not isinstance(argument, str):
        raise MalformedRecordError("argument", argument, "expected a JSON-encoded string")

    count = raw.get("count")
    return DuplicatedTransaction(
        orig_time=parse_time("origTime", raw["origTime"]),
        max_time=parse_time("maxTime", raw["maxTime"]),
        method=method,
        heights=parse_heights(raw["height"]),
        hash=parse_hash(raw["hash"]),
        argument=argument,
        neighborhood=parse_uint("neighborhood", raw["neighborhood"]),
        count=parse_uint("count", count) if count is not None else None,
    )


def normalize_records(raws: Iterable[Mapping[str, Any]]) -> list[DuplicatedTransaction]:
    """
    Normalize a whole export. Fails fast on the first malformed record;
    the raised error carries that record's index.
    """
    out: list[DuplicatedTransaction] = []
    for index, raw in enumerate(raws):
        try:
            out.append(normalize_record(raw))
        except MalformedRecordError as e:
            logger.error("record_malformed", index=index, field=e.field, reason=e.reason)
            raise e.at_index(index)
    logger.debug("records_normalized", records=len(out))
    return out
