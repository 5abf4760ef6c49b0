from .account import Account, AccountCategory, ChartOfAccounts
from .loan import Loan, LoanStatus
from .member import Member, MemberStatus
from .transaction import INFLOW_TYPES, Transaction, TransactionType

__all__ = [
    "AccountCategory",
    "Account",
    "ChartOfAccounts",
    "Loan",
    "LoanStatus",
    "Member",
    "MemberStatus",
    "INFLOW_TYPES",
    "Transaction",
    "TransactionType",
]
