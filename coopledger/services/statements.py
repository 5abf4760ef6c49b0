"""
Financial statement service.

Provides functionality for:
- Balance sheet aggregation (assets, liabilities, equity, variance check)
- Income statement (revenue, expense, net profit)
- Journal income/expense summary over recorded transactions
- Period closing summary
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from coopledger.config import BALANCE_SHEET_TOLERANCE
from coopledger.models import (
    Account,
    AccountCategory,
    Loan,
    LoanStatus,
    Member,
    Transaction,
)

logger = logging.getLogger(__name__)


@dataclass
class IncomeStatement:
    """Revenue and expense totals for the current period."""

    revenue: float
    expenses: float
    net_profit: float
    revenue_accounts: list[Account] = field(default_factory=list)
    expense_accounts: list[Account] = field(default_factory=list)


@dataclass
class BalanceSheet:
    """Statement of financial position."""

    # Assets
    cash_assets: float  # ASSET accounts
    loans_receivable: float  # outstanding loan principal
    total_assets: float

    # Liabilities
    other_liabilities: float  # LIABILITY accounts
    member_savings: float
    total_liabilities: float

    # Equity
    other_equity: float  # EQUITY accounts
    member_shares: float
    equity_base: float  # before current-period profit
    net_profit: float
    total_equity: float

    variance: float  # assets - liabilities - equity
    is_balanced: bool
    tolerance: float

    asset_accounts: list[Account] = field(default_factory=list)
    liability_accounts: list[Account] = field(default_factory=list)
    equity_accounts: list[Account] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Plain-record view for the export boundary."""
        return {
            "assets": self.total_assets,
            "liabilities": self.total_liabilities,
            "equity": self.total_equity,
            "net_profit": self.net_profit,
            "variance": self.variance,
            "is_balanced": self.is_balanced,
            "accounts": [
                a.to_dict()
                for a in (
                    self.asset_accounts + self.liability_accounts + self.equity_accounts
                )
            ],
        }


@dataclass
class JournalSummary:
    """Income/expense totals over a set of recorded transactions."""

    transactions: list[Transaction]
    total_income: float
    total_expense: float
    net: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class ClosingException:
    loan_id: str
    issue: str
    amount: float


@dataclass
class ClosingSummary:
    """Figures shown on the period-closing report."""

    active_loans: int
    total_income: float
    total_expense: float
    net_balance: float
    brought_forward: float
    carried_forward: float
    exceptions: list[ClosingException] = field(default_factory=list)


def _sum_balances(accounts: Iterable[Account]) -> float:
    return sum((a.balance for a in accounts), 0.0)


def _partition(accounts: Iterable[Account]) -> dict[AccountCategory, list[Account]]:
    groups: dict[AccountCategory, list[Account]] = {c: [] for c in AccountCategory}
    for account in accounts:
        groups[account.category].append(account)
    return groups


class StatementService:
    """Service for deriving financial statements from in-memory records."""

    def __init__(self, tolerance: float = BALANCE_SHEET_TOLERANCE):
        """
        Initialize the statement service.

        Args:
            tolerance: Absolute variance below which the balance sheet
                counts as balanced
        """
        self.tolerance = tolerance

    def build_income_statement(self, accounts: Iterable[Account]) -> IncomeStatement:
        """Sum REVENUE and EXPENSE accounts into net profit."""
        groups = _partition(accounts)
        revenue = _sum_balances(groups[AccountCategory.REVENUE])
        expenses = _sum_balances(groups[AccountCategory.EXPENSE])

        return IncomeStatement(
            revenue=revenue,
            expenses=expenses,
            net_profit=revenue - expenses,
            revenue_accounts=groups[AccountCategory.REVENUE],
            expense_accounts=groups[AccountCategory.EXPENSE],
        )

    def build_balance_sheet(
        self,
        accounts: Iterable[Account],
        members: Iterable[Member] = (),
        loans: Iterable[Loan] = (),
    ) -> BalanceSheet:
        """
        Aggregate accounts, members and loans into a balance sheet.

        Member savings are a liability, member shares and the current
        period's net profit are equity, and outstanding loans are an asset.

        Args:
            accounts: Chart of accounts
            members: Members whose savings and shares are aggregated
            loans: Loans whose remaining balances are receivable

        Returns:
            BalanceSheet with totals and the variance check
        """
        accounts = list(accounts)
        members = list(members)
        groups = _partition(accounts)

        cash_assets = _sum_balances(groups[AccountCategory.ASSET])
        other_liabilities = _sum_balances(groups[AccountCategory.LIABILITY])
        other_equity = _sum_balances(groups[AccountCategory.EQUITY])

        loans_receivable = sum((loan.remaining_balance for loan in loans), 0.0)
        member_savings = sum((m.savings_balance for m in members), 0.0)
        member_shares = sum((m.share_balance for m in members), 0.0)

        income = self.build_income_statement(accounts)

        total_assets = cash_assets + loans_receivable
        total_liabilities = other_liabilities + member_savings
        equity_base = other_equity + member_shares
        total_equity = equity_base + income.net_profit

        variance = total_assets - total_liabilities - total_equity
        is_balanced = abs(variance) < self.tolerance

        if not is_balanced:
            logger.warning(
                f"Balance sheet out of balance: assets={total_assets:,.2f} "
                f"liabilities={total_liabilities:,.2f} equity={total_equity:,.2f} "
                f"variance={variance:,.2f}"
            )

        return BalanceSheet(
            cash_assets=cash_assets,
            loans_receivable=loans_receivable,
            total_assets=total_assets,
            other_liabilities=other_liabilities,
            member_savings=member_savings,
            total_liabilities=total_liabilities,
            other_equity=other_equity,
            member_shares=member_shares,
            equity_base=equity_base,
            net_profit=income.net_profit,
            total_equity=total_equity,
            variance=variance,
            is_balanced=is_balanced,
            tolerance=self.tolerance,
            asset_accounts=groups[AccountCategory.ASSET],
            liability_accounts=groups[AccountCategory.LIABILITY],
            equity_accounts=groups[AccountCategory.EQUITY],
        )

    def summarize_journal(
        self,
        transactions: Iterable[Transaction],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> JournalSummary:
        """
        Total income and expense over recorded transactions.

        Deposits, share purchases, income and loan repayments count as
        income; every other type counts as expense. Date bounds are inclusive.
        """
        selected = [
            t
            for t in transactions
            if (start_date is None or t.date >= start_date)
            and (end_date is None or t.date <= end_date)
        ]
        selected.sort(key=lambda t: (t.date, t.id))

        total_income = sum((t.amount for t in selected if t.is_inflow), 0.0)
        total_expense = sum((t.amount for t in selected if not t.is_inflow), 0.0)

        return JournalSummary(
            transactions=selected,
            total_income=total_income,
            total_expense=total_expense,
            net=total_income - total_expense,
            start_date=start_date,
            end_date=end_date,
        )

    def build_closing_summary(
        self,
        accounts: Iterable[Account],
        loans: Iterable[Loan],
        brought_forward: float = 0.0,
    ) -> ClosingSummary:
        """
        Prepare the period-closing figures.

        Loans whose remaining balance is negative or above the principal are
        listed as exceptions for review before the period is closed.
        """
        loans = list(loans)
        income = self.build_income_statement(accounts)

        exceptions = []
        for loan in loans:
            if loan.remaining_balance < 0:
                exceptions.append(
                    ClosingException(
                        loan.id, "Negative Balance", loan.remaining_balance
                    )
                )
            elif loan.remaining_balance > loan.principal_amount:
                exceptions.append(
                    ClosingException(
                        loan.id, "Balance Exceeds Principal", loan.remaining_balance
                    )
                )

        if exceptions:
            logger.warning(f"Period closing found {len(exceptions)} loan exception(s)")

        return ClosingSummary(
            active_loans=sum(1 for loan in loans if loan.status == LoanStatus.ACTIVE),
            total_income=income.revenue,
            total_expense=income.expenses,
            net_balance=income.net_profit,
            brought_forward=brought_forward,
            carried_forward=brought_forward + income.net_profit,
            exceptions=exceptions,
        )
