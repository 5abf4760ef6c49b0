from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from .base import optional_str, parse_amount, parse_enum, pick


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    LOAN_DISBURSEMENT = "LOAN_DISBURSEMENT"
    LOAN_REPAYMENT = "LOAN_REPAYMENT"
    SHARE_PURCHASE = "SHARE_PURCHASE"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    FINE = "FINE"


# Money coming into the cooperative; everything else is an outflow
INFLOW_TYPES = frozenset(
    {
        TransactionType.DEPOSIT,
        TransactionType.SHARE_PURCHASE,
        TransactionType.INCOME,
        TransactionType.LOAN_REPAYMENT,
    }
)


@dataclass(frozen=True)
class Transaction:
    """A recorded cash movement. Immutable once created."""

    id: str
    date: date
    type: TransactionType
    amount: float
    description: str = ""
    category: Optional[str] = None  # account name the amount posts to
    member_id: Optional[str] = None
    receipt_id: Optional[str] = None

    @property
    def is_inflow(self) -> bool:
        return self.type in INFLOW_TYPES

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "type": self.type.value,
            "category": self.category,
            "amount": self.amount,
            "member_id": self.member_id,
            "description": self.description,
            "receipt_id": self.receipt_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Create a Transaction from a plain record."""
        raw_date = pick(data, "date")
        if not isinstance(raw_date, date):
            raw_date = date.fromisoformat(raw_date[:10])
        return cls(
            id=str(pick(data, "id")),
            date=raw_date,
            type=parse_enum(TransactionType, pick(data, "type")),
            amount=parse_amount(pick(data, "amount"), "amount"),
            description=pick(data, "description", default="") or "",
            category=optional_str(pick(data, "category", default=None)),
            member_id=optional_str(pick(data, "member_id", "memberId", default=None)),
            receipt_id=optional_str(
                pick(data, "receipt_id", "receiptId", default=None)
            ),
        )
