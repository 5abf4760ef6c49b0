"""
Dividend and patronage-refund calculator.

Each member receives a dividend on share capital and a refund proportional
to the loan interest they paid during the year. Interest paid is not taken
from posted journal entries; it is approximated as a fixed fraction of each
loan repayment (``INTEREST_PORTION_OF_REPAYMENT``).
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from coopledger.config import (
    DEFAULT_AVG_RETURN_RATE,
    DEFAULT_DIVIDEND_RATE,
    INTEREST_PORTION_OF_REPAYMENT,
    PAYOUT_RATIO_WARNING,
)
from coopledger.models import Member, Transaction, TransactionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberPayout:
    """One row of the distribution table."""

    member_id: str
    full_name: str
    share_balance: float
    dividend_amount: float
    interest_paid: float
    refund_amount: float
    total_payout: float

    def to_dict(self) -> dict:
        return {
            "id": self.member_id,
            "full_name": self.full_name,
            "share_balance": self.share_balance,
            "dividend_amount": self.dividend_amount,
            "interest_paid": self.interest_paid,
            "return_amount": self.refund_amount,
            "total_payout": self.total_payout,
        }


@dataclass
class DividendReport:
    """Distribution table plus grand totals."""

    dividend_rate: float
    avg_return_rate: float
    net_profit: float
    payouts: list[MemberPayout] = field(default_factory=list)
    total_shares: float = 0.0
    total_dividend: float = 0.0
    total_interest_paid: float = 0.0
    total_refund: float = 0.0
    total_distribution: float = 0.0
    payout_ratio: float = 0.0  # percent of net profit

    @property
    def exceeds_net_profit(self) -> bool:
        return self.payout_ratio > PAYOUT_RATIO_WARNING


class DividendCalculator:
    """Computes the annual profit distribution for a set of members."""

    def __init__(
        self,
        dividend_rate: float = DEFAULT_DIVIDEND_RATE,
        avg_return_rate: float = DEFAULT_AVG_RETURN_RATE,
        interest_portion: float = INTEREST_PORTION_OF_REPAYMENT,
    ):
        """
        Args:
            dividend_rate: Percent paid on share capital
            avg_return_rate: Percent of interest paid refunded to the member
            interest_portion: Fraction of a repayment treated as interest
        """
        self.dividend_rate = dividend_rate
        self.avg_return_rate = avg_return_rate
        self.interest_portion = interest_portion

    def interest_paid_by_member(
        self, transactions: Iterable[Transaction]
    ) -> dict[str, float]:
        """Approximate interest paid per member from their loan repayments."""
        paid: dict[str, float] = defaultdict(float)
        for t in transactions:
            if t.type == TransactionType.LOAN_REPAYMENT and t.member_id:
                paid[t.member_id] += t.amount * self.interest_portion
        return dict(paid)

    def member_payout(self, member: Member, interest_paid: float) -> MemberPayout:
        dividend_amount = member.share_balance * self.dividend_rate / 100
        refund_amount = interest_paid * self.avg_return_rate / 100
        return MemberPayout(
            member_id=member.id,
            full_name=member.full_name,
            share_balance=member.share_balance,
            dividend_amount=dividend_amount,
            interest_paid=interest_paid,
            refund_amount=refund_amount,
            total_payout=dividend_amount + refund_amount,
        )

    def calculate(
        self,
        members: Iterable[Member],
        transactions: Iterable[Transaction],
        net_profit: float,
    ) -> DividendReport:
        """
        Build the distribution table.

        Args:
            members: Members to pay out
            transactions: Recorded transactions; only loan repayments are used
            net_profit: Net profit of the period, for the payout ratio

        Returns:
            DividendReport with one payout per member and grand totals
        """
        interest_paid = self.interest_paid_by_member(transactions)
        payouts = [
            self.member_payout(m, interest_paid.get(m.id, 0.0)) for m in members
        ]

        report = DividendReport(
            dividend_rate=self.dividend_rate,
            avg_return_rate=self.avg_return_rate,
            net_profit=net_profit,
            payouts=payouts,
            total_shares=sum((p.share_balance for p in payouts), 0.0),
            total_dividend=sum((p.dividend_amount for p in payouts), 0.0),
            total_interest_paid=sum((p.interest_paid for p in payouts), 0.0),
            total_refund=sum((p.refund_amount for p in payouts), 0.0),
        )
        report.total_distribution = report.total_dividend + report.total_refund
        report.payout_ratio = (
            report.total_distribution / net_profit * 100 if net_profit > 0 else 0.0
        )

        if report.exceeds_net_profit:
            logger.warning(
                f"Proposed distribution {report.total_distribution:,.2f} exceeds "
                f"net profit {net_profit:,.2f} ({report.payout_ratio:.1f}%)"
            )

        logger.debug(
            f"Calculated dividends for {len(payouts)} members: "
            f"total {report.total_distribution:,.2f}"
        )
        return report
