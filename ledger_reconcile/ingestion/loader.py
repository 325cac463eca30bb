"""
Input loader: transactions export and optional aliases file.

Both files are JSON. Any I/O or decode problem is an InputFileError; record
level problems are left to the normalizer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ledger_reconcile.core.exceptions import InputFileError
from ledger_reconcile.ingestion.models import DuplicatedTransaction
from ledger_reconcile.ingestion.normalizer import normalize_records
from ledger_reconcile.reconcile_logging import get_logger

logger = get_logger(__name__)


def _read_json(path: Path) -> Any:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise InputFileError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise InputFileError(path, f"not UTF-8 text: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InputFileError(path, f"invalid JSON: {e}") from e


def load_raw_transactions(path: Path) -> list[dict[str, Any]]:
    """Read the transactions export: a JSON array of raw record objects."""
    data = _read_json(path)
    if not isinstance(data, list):
        raise InputFileError(path, "expected a JSON array of transactions")
    logger.info("transactions_file_loaded", path=str(path), records=len(data))
    return data


def load_transactions(path: Path) -> list[DuplicatedTransaction]:
    """Read and normalize the transactions export. Fails on the first bad record."""
    return normalize_records(load_raw_transactions(path))


def load_aliases(path: Path | None) -> dict[str, str]:
    """
    Read the aliases file: a JSON object of address -> alias.

    Returns an empty mapping when path is None.
    """
    if path is None:
        return {}
    data = _read_json(path)
    if not isinstance(data, dict):
        raise InputFileError(path, "expected a JSON object of address -> alias")
    for address, alias in data.items():
        if not isinstance(alias, str):
            raise InputFileError(path, f"alias for {address!r} is not a string")
    logger.info("aliases_file_loaded", path=str(path), aliases=len(data))
    return data
