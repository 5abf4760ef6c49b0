"""
Loan model.

A loan's remaining balance starts at the principal and is reduced only by
the principal portion of repayments.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .base import parse_amount, parse_enum, pick

if TYPE_CHECKING:
    from coopledger.services.loan_repayment import RepaymentSplit

logger = logging.getLogger(__name__)


class LoanStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"  # approved but not yet disbursed
    ACTIVE = "ACTIVE"  # disbursed and accruing interest
    REJECTED = "REJECTED"
    PAID = "PAID"
    DEFAULTED = "DEFAULTED"


@dataclass
class Loan:
    """
    A member loan.

    Attributes:
        id: Loan identifier
        member_id: Borrowing member
        principal_amount: Amount disbursed
        remaining_balance: Outstanding principal, 0 <= remaining <= principal
        interest_rate: Annual interest rate in percent
        term_months: Repayment term
        status: Lifecycle status
        guarantor_ids: Members guaranteeing the loan
    """

    id: str
    member_id: str
    principal_amount: float
    remaining_balance: float
    interest_rate: float
    term_months: int = 12
    status: LoanStatus = LoanStatus.ACTIVE
    guarantor_ids: list[str] = field(default_factory=list)

    @property
    def is_within_bounds(self) -> bool:
        """Whether the remaining balance sits between zero and the principal."""
        return 0 <= self.remaining_balance <= self.principal_amount

    def apply_repayment(self, split: "RepaymentSplit") -> None:
        """Record a computed repayment split against this loan."""
        self.remaining_balance = split.balance_after
        if self.remaining_balance == 0 and self.status == LoanStatus.ACTIVE:
            self.status = LoanStatus.PAID
            logger.info(f"Loan {self.id} fully repaid")

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "member_id": self.member_id,
            "principal_amount": self.principal_amount,
            "remaining_balance": self.remaining_balance,
            "interest_rate": self.interest_rate,
            "term_months": self.term_months,
            "status": self.status.value,
            "guarantor_ids": list(self.guarantor_ids),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Loan":
        """Create a Loan from a plain record."""
        principal = parse_amount(
            pick(data, "principal_amount", "principalAmount"), "principal_amount"
        )
        return cls(
            id=str(pick(data, "id")),
            member_id=str(pick(data, "member_id", "memberId", default="")),
            principal_amount=principal,
            remaining_balance=parse_amount(
                pick(data, "remaining_balance", "remainingBalance", default=principal),
                "remaining_balance",
            ),
            interest_rate=parse_amount(
                pick(data, "interest_rate", "interestRate"), "interest_rate"
            ),
            term_months=int(pick(data, "term_months", "termMonths", default=12)),
            status=parse_enum(LoanStatus, pick(data, "status", default="ACTIVE")),
            guarantor_ids=[
                str(g) for g in pick(data, "guarantor_ids", "guarantorIds", default=[])
            ],
        )
