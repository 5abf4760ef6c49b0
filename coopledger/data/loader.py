"""
Snapshot loader.

Reads a JSON document holding the records the calculators work on:

    {
        "accounts": [...],
        "members": [...],
        "loans": [...],
        "transactions": [...]
    }

Any section may be missing. Records are assumed internally consistent; only
their shape is checked.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

from coopledger.exceptions import SnapshotError
from coopledger.models import Account, ChartOfAccounts, Loan, Member, Transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LedgerSnapshot:
    """All records needed to derive the cooperative's reports."""

    accounts: list[Account] = field(default_factory=list)
    members: list[Member] = field(default_factory=list)
    loans: list[Loan] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)

    def chart_of_accounts(self) -> ChartOfAccounts:
        return ChartOfAccounts(self.accounts)

    def get_loan(self, loan_id: str) -> Optional[Loan]:
        for loan in self.loans:
            if loan.id == loan_id:
                return loan
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "accounts": [a.to_dict() for a in self.accounts],
            "members": [m.to_dict() for m in self.members],
            "loans": [loan.to_dict() for loan in self.loans],
            "transactions": [t.to_dict() for t in self.transactions],
        }


def _parse_section(
    data: dict, section: str, factory: Callable[[dict], T]
) -> list[T]:
    records = data.get(section, [])
    if not isinstance(records, list):
        raise SnapshotError(f"Section {section!r} must be a list")

    parsed = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise SnapshotError(f"{section}[{index}] must be an object")
        try:
            parsed.append(factory(record))
        except (ValueError, TypeError, KeyError) as e:
            raise SnapshotError(f"Invalid record {section}[{index}]: {e}") from e
    return parsed


def parse_snapshot(data: Any) -> LedgerSnapshot:
    """Build a LedgerSnapshot from already-decoded JSON."""
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")

    snapshot = LedgerSnapshot(
        accounts=_parse_section(data, "accounts", Account.from_dict),
        members=_parse_section(data, "members", Member.from_dict),
        loans=_parse_section(data, "loans", Loan.from_dict),
        transactions=_parse_section(data, "transactions", Transaction.from_dict),
    )

    codes = [a.code for a in snapshot.accounts]
    if len(codes) != len(set(codes)):
        raise SnapshotError("Account codes must be unique")

    return snapshot


def load_snapshot(path: Union[str, Path]) -> LedgerSnapshot:
    """
    Load a ledger snapshot from a JSON file.

    Args:
        path: Path to the snapshot file

    Returns:
        LedgerSnapshot with parsed records

    Raises:
        SnapshotError: If the file is missing, not JSON, or holds a malformed record
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SnapshotError(f"Snapshot file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e

    snapshot = parse_snapshot(data)
    logger.info(
        f"Loaded snapshot {path}: {len(snapshot.accounts)} accounts, "
        f"{len(snapshot.members)} members, {len(snapshot.loans)} loans, "
        f"{len(snapshot.transactions)} transactions"
    )
    return snapshot
