"""
Main entrypoint: reconcile a duplicated-transaction export.

Same as `py -m ledger_reconcile.tools.reconcile_duplicates`; see that module
for arguments and environment variables.
"""

from ledger_reconcile.tools.reconcile_duplicates import main

if __name__ == "__main__":
    raise SystemExit(main())
