"""
Loan repayment split calculator.

A repayment first covers one month of simple interest on the remaining
balance; whatever is left reduces principal. Several overdue months are not
amortised.
"""

import logging
from dataclasses import dataclass

from coopledger.config import MONTHS_PER_YEAR
from coopledger.models import Loan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepaymentSplit:
    """How a tendered amount divides between interest and principal."""

    amount_tendered: float
    monthly_interest: float
    interest_portion: float
    principal_portion: float
    balance_before: float
    balance_after: float
    overpayment: float  # principal beyond the remaining balance

    def to_dict(self) -> dict:
        return {
            "amount_tendered": self.amount_tendered,
            "monthly_interest": self.monthly_interest,
            "interest": self.interest_portion,
            "principal": self.principal_portion,
            "balance_before": self.balance_before,
            "balance_after": self.balance_after,
            "overpayment": self.overpayment,
        }


def monthly_interest(remaining_balance: float, interest_rate: float) -> float:
    """One month of simple interest at an annual percentage rate."""
    return remaining_balance * (interest_rate / 100) / MONTHS_PER_YEAR


def split_repayment(
    remaining_balance: float, interest_rate: float, amount_tendered: float
) -> RepaymentSplit:
    """
    Split a cash repayment into interest and principal.

    Args:
        remaining_balance: Outstanding principal before the payment
        interest_rate: Annual interest rate in percent
        amount_tendered: Cash received

    Returns:
        RepaymentSplit. A non-positive amount yields zero portions and leaves
        the balance unchanged; the balance after never drops below zero.
    """
    interest_due = monthly_interest(remaining_balance, interest_rate)

    if amount_tendered <= 0:
        return RepaymentSplit(
            amount_tendered=amount_tendered,
            monthly_interest=interest_due,
            interest_portion=0.0,
            principal_portion=0.0,
            balance_before=remaining_balance,
            balance_after=remaining_balance,
            overpayment=0.0,
        )

    interest_portion = min(amount_tendered, interest_due)
    principal_portion = max(0.0, amount_tendered - interest_portion)
    balance_after = max(0.0, remaining_balance - principal_portion)
    overpayment = max(0.0, principal_portion - max(remaining_balance, 0.0))

    if overpayment > 0:
        logger.warning(
            f"Repayment of {amount_tendered:,.2f} exceeds balance plus interest "
            f"by {overpayment:,.2f}; excess recorded as overpayment"
        )

    return RepaymentSplit(
        amount_tendered=amount_tendered,
        monthly_interest=interest_due,
        interest_portion=interest_portion,
        principal_portion=principal_portion,
        balance_before=remaining_balance,
        balance_after=balance_after,
        overpayment=overpayment,
    )


def split_for_loan(loan: Loan, amount_tendered: float) -> RepaymentSplit:
    """Split a repayment against a loan's current balance and rate."""
    return split_repayment(loan.remaining_balance, loan.interest_rate, amount_tendered)
