"""
Report rendering for aggregation results.

Primary output is the mint table as CSV (height, address, alias, amount) or
as a height-keyed JSON document. Diagnostics are plain-text tables meant for
stderr: per-address totals with grand total, per-height totals, and the
aggregated send pairs with aliases inline.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import IO

import pandas as pd

from ledger_reconcile.analytics.aggregation import AggregationResult
from ledger_reconcile.analytics.aliases import AliasResolver
from ledger_reconcile.core.exceptions import OutputFileError

MINT_COLUMNS = ["height", "address", "alias", "amount"]

SEP = "=" * 72
SEP_THIN = "-" * 72


def _resolver(result: AggregationResult, aliases: AliasResolver | None) -> AliasResolver:
    return aliases if aliases is not None else result.aliases


def mint_rows_frame(result: AggregationResult, aliases: AliasResolver | None = None) -> pd.DataFrame:
    """
    One row per (height, address) in ascending order.

    amount is kept as object dtype so arbitrarily large ints are written
    exactly.
    """
    resolver = _resolver(result, aliases)
    rows = [
        (height, address, resolver.label(address), amount)
        for height, address, amount in result.iter_mint_rows()
    ]
    return pd.DataFrame(rows, columns=MINT_COLUMNS, dtype=object)


def render_mint_csv(
    result: AggregationResult,
    aliases: AliasResolver | None = None,
    header: bool = True,
) -> str:
    df = mint_rows_frame(result, aliases)
    return df.to_csv(index=False, header=header, lineterminator="\n")


def render_mint_json(result: AggregationResult, aliases: AliasResolver | None = None) -> str:
    """
    Height-keyed JSON: {"205": {"addr1": {"alias": "...", "amount": "50"}}}.

    Amounts are decimal strings so values past 2**53 survive JSON readers.
    """
    resolver = _resolver(result, aliases)
    doc = {
        str(height): {
            address: {"alias": resolver.lookup(address), "amount": str(amount)}
            for address, amount in by_address.items()
        }
        for height, by_address in result.mint.items()
    }
    return json.dumps(doc, indent=2) + "\n"


def write_output(text: str, output: Path | None = None, stream: IO[str] | None = None) -> None:
    """Write the rendered report to output path, or to stream (stdout by default)."""
    if output is not None:
        output = Path(output)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(text, encoding="utf-8")
        except OSError as e:
            raise OutputFileError(output, e.strerror or str(e)) from e
        return
    (stream or sys.stdout).write(text)


def write_mint_csv(
    result: AggregationResult,
    aliases: AliasResolver | None = None,
    output: Path | None = None,
    header: bool = True,
    stream: IO[str] | None = None,
) -> None:
    """Render the mint CSV fully in memory, then write it to output (or stream)."""
    write_output(render_mint_csv(result, aliases, header=header), output, stream)


def write_mint_json(
    result: AggregationResult,
    aliases: AliasResolver | None = None,
    output: Path | None = None,
    stream: IO[str] | None = None,
) -> None:
    write_output(render_mint_json(result, aliases), output, stream)


def format_totals_table(result: AggregationResult, aliases: AliasResolver | None = None) -> list[str]:
    """Bordered table of per-address mint totals, sorted by address, plus grand total."""
    resolver = _resolver(result, aliases)
    rows = [(address, resolver.label(address), str(amount)) for address, amount in result.totals_by_address.items()]
    grand = str(result.grand_total)

    addr_w = max([len("Address"), len("Grand total")] + [len(r[0]) for r in rows])
    alias_w = max([len("Alias")] + [len(r[1]) for r in rows])
    amount_w = max([len("Amount"), len(grand)] + [len(r[2]) for r in rows])

    border = "+" + "-" * (addr_w + 2) + "+" + "-" * (alias_w + 2) + "+" + "-" * (amount_w + 2) + "+"
    lines = [border, f"| {'Address':<{addr_w}} | {'Alias':<{alias_w}} | {'Amount':>{amount_w}} |", border]
    for address, alias, amount in rows:
        lines.append(f"| {address:<{addr_w}} | {alias:<{alias_w}} | {amount:>{amount_w}} |")
    lines.append(border)
    lines.append(f"| {'Grand total':<{addr_w}} | {'':<{alias_w}} | {grand:>{amount_w}} |")
    lines.append(border)
    return lines


def format_height_summary(result: AggregationResult) -> list[str]:
    """Per-height mint totals, ascending by height."""
    rows = [(str(height), str(len(result.mint[height])), str(total)) for height, total in result.totals_by_height.items()]
    height_w = max([len("Height")] + [len(r[0]) for r in rows])
    count_w = max([len("Addresses")] + [len(r[1]) for r in rows])
    amount_w = max([len("Amount")] + [len(r[2]) for r in rows])
    border = "+" + "-" * (height_w + 2) + "+" + "-" * (count_w + 2) + "+" + "-" * (amount_w + 2) + "+"
    lines = [border, f"| {'Height':>{height_w}} | {'Addresses':>{count_w}} | {'Amount':>{amount_w}} |", border]
    for height, count, amount in rows:
        lines.append(f"| {height:>{height_w}} | {count:>{count_w}} | {amount:>{amount_w}} |")
    lines.append(border)
    return lines


def format_send_listing(result: AggregationResult, aliases: AliasResolver | None = None) -> list[str]:
    """One line per (from, to) pair with aliases inline."""
    resolver = _resolver(result, aliases)
    lines = [
        f"{resolver.annotate(sender)} -> {resolver.annotate(receiver)}: {amount}"
        for (sender, receiver), amount in result.iter_send_rows()
    ]
    if not lines:
        lines.append("(no duplicated sends)")
    return lines


def format_diagnostics(result: AggregationResult, aliases: AliasResolver | None = None) -> list[str]:
    counters = result.counters()
    lines = [SEP, "Duplicated transaction reconciliation", SEP]
    lines.append(
        "records={records_seen} mint={mint_records} send={send_records} skipped={skipped_records}".format(**counters)
    )
    lines.append("")
    lines.append("Erroneous mint totals by address")
    lines.extend(format_totals_table(result, aliases))
    lines.append("")
    lines.append("Erroneous mint totals by height")
    lines.extend(format_height_summary(result))
    lines.append("")
    lines.append(f"Duplicated sends (total {result.send_total})")
    lines.append(SEP_THIN)
    lines.extend(format_send_listing(result, aliases))
    lines.append(SEP)
    return lines


def write_diagnostics(
    result: AggregationResult,
    aliases: AliasResolver | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Write the diagnostic report to stream (stderr by default)."""
    out = stream or sys.stderr
    for line in format_diagnostics(result, aliases):
        out.write(line + "\n")
