"""
Cash box reconciliation.

Compares a physical count of notes and coins against the net cash figure
the system expects to be in the box.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping, Optional

from coopledger.config import CASH_RECONCILIATION_TOLERANCE, DEFAULT_DENOMINATIONS
from coopledger.exceptions import ValidationError
from coopledger.models import Transaction

logger = logging.getLogger(__name__)


def physical_total(pairs: Iterable[tuple[float, int]]) -> float:
    """Sum of denomination * count over ``(denomination, count)`` pairs."""
    return sum((d * c for d, c in pairs), 0.0)


@dataclass
class CashCount:
    """Number of pieces counted per denomination."""

    counts: dict[float, int] = field(
        default_factory=lambda: {d: 0 for d in DEFAULT_DENOMINATIONS}
    )

    def __post_init__(self):
        for denomination, count in self.counts.items():
            self._check(denomination, count)

    @staticmethod
    def _check(denomination: float, count: int) -> None:
        if denomination <= 0:
            raise ValidationError(f"Denomination must be positive: {denomination}")
        if count < 0:
            raise ValidationError(
                f"Count for denomination {denomination} cannot be negative: {count}"
            )

    def set(self, denomination: float, count: int) -> None:
        self._check(denomination, count)
        self.counts[denomination] = count

    @property
    def total(self) -> float:
        return physical_total(self.counts.items())

    @classmethod
    def from_mapping(cls, counts: Mapping[float, int]) -> "CashCount":
        merged = {d: 0 for d in DEFAULT_DENOMINATIONS}
        merged.update(counts)
        return cls(counts=merged)


@dataclass(frozen=True)
class ReconciliationResult:
    physical_total: float
    system_net_cash: float
    variance: float  # physical - system
    is_balanced: bool

    @property
    def direction(self) -> str:
        if self.is_balanced:
            return "balanced"
        return "over" if self.variance > 0 else "short"


def reconcile(
    count: CashCount,
    system_net_cash: float,
    tolerance: Optional[float] = None,
) -> ReconciliationResult:
    """
    Compare a physical cash count with the system net cash.

    Args:
        count: Denomination counts from the cash box
        system_net_cash: Net cash according to recorded transactions
        tolerance: Allowed absolute variance; defaults to
            ``CASH_RECONCILIATION_TOLERANCE`` (exact match)

    Returns:
        ReconciliationResult with the signed variance
    """
    if tolerance is None:
        tolerance = CASH_RECONCILIATION_TOLERANCE

    counted = count.total
    variance = counted - system_net_cash
    is_balanced = abs(variance) <= tolerance

    result = ReconciliationResult(
        physical_total=counted,
        system_net_cash=system_net_cash,
        variance=variance,
        is_balanced=is_balanced,
    )

    if not is_balanced:
        logger.warning(
            f"Cash box {result.direction} by {abs(variance):,.2f} "
            f"(physical {counted:,.2f}, system {system_net_cash:,.2f})"
        )
    return result



@dataclass(frozen=True)
class CashBoxTally:
    """Cash the system expects in the box after one day's transactions."""

    date: date
    total_in: float
    total_out: float
    net_cash: float
    transaction_count: int = 0


def daily_cash_box(transactions: Iterable[Transaction], day: date) -> CashBoxTally:
    """
    Total the cash in and out for ``day``.

    Inflow types (deposits, share purchases, income, loan repayments) count
    as cash in; every other type counts as cash out.
    """
    todays = [t for t in transactions if t.date == day]
    total_in = sum((t.amount for t in todays if t.is_inflow), 0.0)
    total_out = sum((t.amount for t in todays if not t.is_inflow), 0.0)

    logger.debug(
        f"Cash box for {day.isoformat()}: {len(todays)} transactions, "
        f"in {total_in:,.2f}, out {total_out:,.2f}"
    )
    return CashBoxTally(
        date=day,
        total_in=total_in,
        total_out=total_out,
        net_cash=total_in - total_out,
        transaction_count=len(todays),
    )
