from .loader import LedgerSnapshot, load_snapshot, parse_snapshot

__all__ = [
    "LedgerSnapshot",
    "load_snapshot",
    "parse_snapshot",
]
