"""
Pytest fixtures for reconciliation tests: raw record builders and
temporary input files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest


def make_raw(
    method: str = "tokens.mint",
    height: str = "{100,205,310}",
    argument: Any = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Build one raw export record; argument dicts are JSON-encoded like the export does."""
    if isinstance(argument, dict):
        argument = json.dumps(argument)
    raw = {
        "origTime": "2023-04-01 10:00:00",
        "maxTime": "2023-04-01 10:05:00",
        "method": method,
        "height": height,
        "hash": "0xdeadbeef",
        "argument": argument,
        "count": "3",
        "neighborhood": "7",
    }
    raw.update(overrides)
    return raw


@pytest.fixture
def raw_record() -> Callable[..., dict[str, Any]]:
    return make_raw


@pytest.fixture
def write_json(tmp_path) -> Callable[[str, Any], Path]:
    """Write a JSON document under tmp_path and return its path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def clean_reconcile_env(monkeypatch):
    """Keep RECONCILE_* env from the developer shell out of tests."""
    monkeypatch.delenv("RECONCILE_ALIASES_PATH", raising=False)
    monkeypatch.delenv("RECONCILE_OUTPUT_PATH", raising=False)
