"""
Structured logging for Ledger Reconcile.

Use get_logger() in every module so run events share one format.
"""

from ledger_reconcile.reconcile_logging.logger import get_logger

__all__ = ["get_logger"]
