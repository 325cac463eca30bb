"""
Configuration for a reconciliation run.

A single ReconcileConfig value is built once from CLI arguments (with
environment fallbacks) and passed into the pipeline.
"""

from ledger_reconcile.config.settings import ReconcileConfig, build_config  # noqa: F401

__all__ = ["ReconcileConfig", "build_config"]
