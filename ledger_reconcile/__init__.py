"""
Ledger Reconcile — duplicated-transaction reconciliation for ledger exports.

Reads an exported log of transactions that were recorded at more than one
block height, discards the canonical first occurrence, and reports the extra
value that was minted or moved by every replayed occurrence.
"""

__version__ = "0.1.0"
