import json
from datetime import date

import pytest

from coopledger.models import (
    Account,
    AccountCategory,
    Loan,
    LoanStatus,
    Member,
    Transaction,
    TransactionType,
)


@pytest.fixture
def accounts():
    return [
        Account("1001", "Cash on Hand", AccountCategory.ASSET, 40000.0),
        Account("1002", "Bank Deposit", AccountCategory.ASSET, 60000.0),
        Account("2001", "Accrued Expenses", AccountCategory.LIABILITY, 5000.0),
        Account("3001", "Reserve Fund", AccountCategory.EQUITY, 35000.0),
        Account("4001", "Interest Income", AccountCategory.REVENUE, 12000.0),
        Account("4002", "Fines", AccountCategory.REVENUE, 1000.0),
        Account("5001", "Office Supplies", AccountCategory.EXPENSE, 3000.0),
    ]


@pytest.fixture
def members():
    return [
        Member("M001", "Somchai Jaidee", share_balance=20000.0, savings_balance=30000.0),
        Member("M002", "Malee Rakdee", share_balance=10000.0, savings_balance=20000.0),
    ]


@pytest.fixture
def loans():
    return [
        Loan("L001", "M001", 50000.0, 30000.0, 12.0, 24, LoanStatus.ACTIVE, ["M002"]),
        Loan("L002", "M002", 20000.0, 0.0, 12.0, 12, LoanStatus.PAID),
    ]


@pytest.fixture
def transactions():
    return [
        Transaction("T1", date(2023, 10, 1), TransactionType.DEPOSIT, 5000.0, "Savings", member_id="M001"),
        Transaction("T2", date(2023, 10, 3), TransactionType.LOAN_REPAYMENT, 2000.0, "Repay L001", member_id="M001"),
        Transaction("T3", date(2023, 10, 5), TransactionType.LOAN_REPAYMENT, 1000.0, "Repay L001", member_id="M001"),
        Transaction("T4", date(2023, 10, 7), TransactionType.EXPENSE, 300.0, "Paper", category="Office Supplies"),
        Transaction("T5", date(2023, 10, 9), TransactionType.WITHDRAWAL, 1500.0, "Withdrawal", member_id="M002"),
        Transaction("T6", date(2023, 11, 2), TransactionType.INCOME, 800.0, "Fee", category="Interest Income"),
    ]


@pytest.fixture
def snapshot_file(tmp_path, accounts, members, loans, transactions):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "accounts": [a.to_dict() for a in accounts],
                "members": [m.to_dict() for m in members],
                "loans": [loan.to_dict() for loan in loans],
                "transactions": [t.to_dict() for t in transactions],
            }
        ),
        encoding="utf-8",
    )
    return path
