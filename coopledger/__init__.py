"""
coopledger - savings cooperative ledger calculations

Derives the balance sheet, income statement, dividend and patronage-refund
distribution, loan repayment splits and cash box reconciliation from
in-memory member, loan, account and transaction records.
"""

from .exceptions import CoopLedgerError, ExportError, SnapshotError, ValidationError
from .models import (
    Account,
    AccountCategory,
    ChartOfAccounts,
    Loan,
    LoanStatus,
    Member,
    MemberStatus,
    Transaction,
    TransactionType,
)
from .services import (
    CashCount,
    DividendCalculator,
    StatementService,
    reconcile,
    split_repayment,
)

__version__ = "0.1.0"

__all__ = [
    "Account",
    "AccountCategory",
    "CashCount",
    "ChartOfAccounts",
    "CoopLedgerError",
    "DividendCalculator",
    "ExportError",
    "Loan",
    "LoanStatus",
    "Member",
    "MemberStatus",
    "SnapshotError",
    "StatementService",
    "Transaction",
    "TransactionType",
    "ValidationError",
    "reconcile",
    "split_repayment",
]
