"""
Environment variable loading for Ledger Reconcile.

- RECONCILE_ALIASES_PATH: aliases JSON file used when --aliases is not given
- RECONCILE_OUTPUT_PATH: output file used when no output path is given
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is ledger_reconcile/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"


def load_reconcile_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def _optional_path(name: str) -> Path | None:
    raw = (os.getenv(name) or "").strip()
    return Path(raw) if raw else None


def get_aliases_path() -> Path | None:
    """Return RECONCILE_ALIASES_PATH from env, or None."""
    load_reconcile_env()
    return _optional_path("RECONCILE_ALIASES_PATH")


def get_output_path() -> Path | None:
    """Return RECONCILE_OUTPUT_PATH from env, or None (stdout)."""
    load_reconcile_env()
    return _optional_path("RECONCILE_OUTPUT_PATH")
