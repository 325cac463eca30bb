"""
Application-level exceptions.

Every failure of a reconciliation run is a ReconcileError. Library code
raises; only the CLI turns these into log events and exit codes.
"""

from __future__ import annotations

from typing import Any


class ReconcileError(Exception):
    """Base class for all reconciliation failures."""

    exit_code = 2


class InputFileError(ReconcileError):
    """Input file is missing, unreadable, or not the expected JSON shape."""

    exit_code = 1

    def __init__(self, path: Any, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class MalformedRecordError(ReconcileError):
    """A record field failed to parse per its defined format."""

    def __init__(
        self,
        field: str,
        value: Any,
        reason: str,
        index: int | None = None,
    ) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        self.index = index
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = f"record {self.index}: " if self.index is not None else ""
        return f"{where}field {self.field!r} = {self.value!r}: {self.reason}"

    def at_index(self, index: int) -> "MalformedRecordError":
        """Attach the record position within the input batch."""
        self.index = index
        self.args = (self._describe(),)
        return self


class MalformedArgumentError(MalformedRecordError):
    """The argument payload of a tokens.mint / ledger.send record did not decode."""

    def __init__(
        self,
        method: str,
        value: Any,
        reason: str,
        index: int | None = None,
    ) -> None:
        self.method = method
        super().__init__("argument", value, f"{method}: {reason}", index=index)


class OutputFileError(ReconcileError):
    """Report could not be written to the requested output path."""

    exit_code = 1

    def __init__(self, path: Any, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")
