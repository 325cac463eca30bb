"""
Run settings for the reconciliation pipeline.

ReconcileConfig carries everything a run needs: the transactions file, the
optional aliases file, the optional output file, and rendering switches.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

from ledger_reconcile.config.env import get_aliases_path, get_output_path

OUTPUT_FORMATS = ("csv", "json")


@dataclass(frozen=True)
class ReconcileConfig:
    """Explicit configuration for one run; built once, never mutated."""

    transactions: Path
    aliases: Path | None = None
    output: Path | None = None  # None -> stdout
    output_format: str = "csv"
    header: bool = True
    diagnostics: bool = True

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, got {self.output_format!r}"
            )
        if self.output_format != "csv" and not self.header:
            raise ValueError("--no-header only applies to csv output")


def build_config(args: argparse.Namespace) -> ReconcileConfig:
    """
    Build the run config from parsed CLI arguments.

    Aliases and output fall back to RECONCILE_ALIASES_PATH and
    RECONCILE_OUTPUT_PATH when not given on the command line.
    """
    aliases = args.aliases if args.aliases is not None else get_aliases_path()
    output = args.output if args.output is not None else get_output_path()
    return ReconcileConfig(
        transactions=args.transactions,
        aliases=aliases,
        output=output,
        output_format=args.format,
        header=not args.no_header,
        diagnostics=not args.quiet,
    )
