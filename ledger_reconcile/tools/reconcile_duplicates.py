#!/usr/bin/env python3
"""
Reconcile a duplicated-transaction export into erroneous mint/send totals.

Reads the exported JSON array of duplicated transactions, skips the
canonical first occurrence of each, and writes the extra minted amount per
(height, address) as CSV. Totals, per-height sums and duplicated sends go to
stderr.

Usage:
  py -m ledger_reconcile.tools.reconcile_duplicates transactions.json [output.csv]
      [--aliases aliases.json] [--format csv|json] [--no-header] [--quiet]

Env: RECONCILE_ALIASES_PATH, RECONCILE_OUTPUT_PATH, LOG_LEVEL, LOG_FORMAT.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ledger_reconcile.analytics.aggregation import AggregationResult, aggregate
from ledger_reconcile.analytics.aliases import AliasResolver
from ledger_reconcile.analytics.report import write_diagnostics, write_mint_csv, write_mint_json
from ledger_reconcile.config import ReconcileConfig, build_config
from ledger_reconcile.config.settings import OUTPUT_FORMATS
from ledger_reconcile.core.exceptions import ReconcileError
from ledger_reconcile.ingestion.loader import load_aliases, load_transactions
from ledger_reconcile.reconcile_logging import get_logger
from ledger_reconcile.reconcile_logging.logger import bind_run

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Recompute value minted or moved by duplicated ledger transactions",
    )
    ap.add_argument("transactions", type=Path, help="Path to the transactions in JSON format")
    ap.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="Output file (default: RECONCILE_OUTPUT_PATH, else stdout)",
    )
    ap.add_argument(
        "--aliases",
        type=Path,
        default=None,
        help="JSON file of address -> alias (default: RECONCILE_ALIASES_PATH)",
    )
    ap.add_argument("--format", choices=OUTPUT_FORMATS, default="csv", help="Primary output format")
    ap.add_argument("--no-header", action="store_true", help="Omit the CSV header row (csv format only)")
    ap.add_argument("--quiet", action="store_true", help="Do not print diagnostics to stderr")
    return ap


def run(config: ReconcileConfig) -> AggregationResult:
    """
    Load, aggregate and emit for one config. Raises ReconcileError on bad input.

    The primary report is rendered in memory before anything is written, so
    a failing run never leaves a partial output file. Diagnostics follow only
    once the report has been written.
    """
    log = bind_run(str(config.transactions))
    log.info(
        "reconcile_start",
        aliases=str(config.aliases) if config.aliases else None,
        output=str(config.output) if config.output else "stdout",
        format=config.output_format,
    )

    records = load_transactions(config.transactions)
    aliases = AliasResolver(load_aliases(config.aliases))
    result = aggregate(records, aliases)

    if config.output_format == "json":
        write_mint_json(result, aliases, config.output)
    else:
        write_mint_csv(result, aliases, config.output, header=config.header)
    if config.diagnostics:
        write_diagnostics(result, aliases)

    log.info("reconcile_done", rows=sum(len(v) for v in result.mint.values()), grand_total=str(result.grand_total))
    return result


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))
    try:
        run(config)
    except ReconcileError as e:
        logger.error("reconcile_failed", error=str(e), error_kind=type(e).__name__)
        print(f"[reconcile] error: {e}", file=sys.stderr)
        return e.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
