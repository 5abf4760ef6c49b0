"""
Account models for the cooperative chart of accounts.

Defines account categories, the Account model, and ChartOfAccounts, the
in-memory list of accounts that recorded transactions post into.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

from coopledger.exceptions import ValidationError

from .base import parse_amount, parse_enum, pick
from .transaction import Transaction

logger = logging.getLogger(__name__)


class AccountCategory(str, Enum):
    """
    Standard accounting categories.

    Balance sheet side:
    - ASSET: Cash on hand, bank deposits and other resources held by the group
    - LIABILITY: Amounts owed to others (member savings are added separately)
    - EQUITY: Reserves and funds (member shares are added separately)

    Income statement side:
    - REVENUE: Interest income, fees, fines
    - EXPENSE: Operating costs
    """

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


@dataclass
class Account:
    """
    Represents an account in the chart of accounts.

    Attributes:
        code: Unique account code (e.g. "1001")
        name: Display name; recorded transactions match on it via their category
        category: Account category
        balance: Running total mutated by posted transactions
    """

    code: str
    name: str
    category: AccountCategory
    balance: float = 0.0

    def __post_init__(self):
        """Normalize code and name."""
        self.code = str(self.code).strip()
        self.name = str(self.name).strip() if self.name is not None else ""

    def post(self, amount: float) -> None:
        """Add ``amount`` to the running balance."""
        self.balance += amount

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "code": self.code,
            "name": self.name,
            "category": self.category.value,
            "balance": self.balance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        """Create an Account from a plain record."""
        name = pick(data, "name")
        if not isinstance(name, str):
            raise ValidationError(f"Account name must be text, got {name!r}")
        return cls(
            code=pick(data, "code"),
            name=name,
            category=parse_enum(AccountCategory, pick(data, "category")),
            balance=parse_amount(pick(data, "balance", default=0.0), "balance"),
        )


class ChartOfAccounts:
    """
    In-memory chart of accounts.

    Accounts are kept in insertion order. Removing an account only drops it
    from this list; nothing is deleted anywhere else.
    """

    def __init__(self, accounts: Optional[Iterable[Account]] = None):
        self._accounts: list[Account] = []
        for account in accounts or []:
            self._append(account)

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def _append(self, account: Account) -> None:
        if self.get(account.code) is not None:
            raise ValidationError(f"Duplicate account code: {account.code}")
        self._accounts.append(account)

    def get(self, code: str) -> Optional[Account]:
        for account in self._accounts:
            if account.code == code:
                return account
        return None

    def by_category(self, category: AccountCategory) -> list[Account]:
        return [a for a in self._accounts if a.category == category]

    def add_account(self, code: str, name: str, category: AccountCategory) -> Account:
        """
        Open a new account with a zero balance.

        Raises:
            ValidationError: If the code is already in use
        """
        account = Account(code=code, name=name, category=category, balance=0.0)
        self._append(account)
        logger.info(f"Added account {account.code} ({account.category.value})")
        return account

    def remove_account(self, code: str) -> bool:
        """Remove an account from the list. Returns False if no such code."""
        account = self.get(code)
        if account is None:
            return False
        self._accounts.remove(account)
        logger.info(f"Removed account {code}")
        return True

    def post_transaction(self, transaction: Transaction) -> int:
        """
        Apply a recorded transaction to the accounts it names.

        The transaction's category is matched against account names, and
        its amount is added to every matching balance.

        Returns:
            Number of accounts updated
        """
        if not transaction.category:
            return 0

        touched = 0
        for account in self._accounts:
            if account.name == transaction.category:
                account.post(transaction.amount)
                touched += 1

        if touched == 0:
            logger.debug(
                f"Transaction {transaction.id} category {transaction.category!r} "
                f"matched no account"
            )
        return touched
