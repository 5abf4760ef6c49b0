from dataclasses import dataclass
from enum import Enum

from .base import parse_amount, parse_enum, pick


class MemberStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


@dataclass
class Member:
    """
    A cooperative member.

    ``share_balance`` is the member's share capital (equity side of the
    balance sheet, and the dividend base). ``savings_balance`` is money the
    group owes the member (liability side).
    """

    id: str
    full_name: str
    share_balance: float = 0.0
    savings_balance: float = 0.0
    status: MemberStatus = MemberStatus.ACTIVE

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "share_balance": self.share_balance,
            "savings_balance": self.savings_balance,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Member":
        """Create a Member from a plain record."""
        return cls(
            id=str(pick(data, "id")),
            full_name=pick(data, "full_name", "fullName", default=""),
            share_balance=parse_amount(
                pick(data, "share_balance", "shareBalance", default=0.0),
                "share_balance",
            ),
            savings_balance=parse_amount(
                pick(data, "savings_balance", "savingsBalance", default=0.0),
                "savings_balance",
            ),
            status=parse_enum(MemberStatus, pick(data, "status", default="ACTIVE")),
        )
