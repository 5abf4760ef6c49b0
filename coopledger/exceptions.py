"""Exceptions raised at the boundaries of coopledger (loading, models, export)."""


class CoopLedgerError(Exception):
    """Base class for all coopledger errors."""


class ValidationError(CoopLedgerError, ValueError):
    """Raised when a model receives input it cannot represent."""


class SnapshotError(CoopLedgerError):
    """Raised when a ledger snapshot cannot be read or parsed."""


class ExportError(CoopLedgerError):
    """Raised when a report cannot be exported."""
