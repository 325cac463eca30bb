"""
Ingestion: read exported duplicated-transaction files and normalize raw
records into typed DuplicatedTransaction values.
"""

from ledger_reconcile.ingestion.models import DuplicatedTransaction
from ledger_reconcile.ingestion.normalizer import normalize_record, normalize_records

__all__ = ["DuplicatedTransaction", "normalize_record", "normalize_records"]
