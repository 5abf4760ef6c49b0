import logging
from datetime import date

import pytest

from coopledger.exceptions import ValidationError
from coopledger.services import CashCount, daily_cash_box, reconcile


class TestCashCount:
    def test_default_denominations_start_empty(self):
        count = CashCount()
        assert set(count.counts) == {1000, 500, 100, 50, 20, 10, 5, 1}
        assert count.total == 0.0

    def test_total(self):
        count = CashCount.from_mapping({1000: 3, 100: 4, 5: 2})
        assert count.total == 3410.0

    def test_custom_denomination(self):
        count = CashCount.from_mapping({0.5: 4})
        assert count.total == 2.0

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            CashCount.from_mapping({100: -1})

    def test_non_positive_denomination_rejected(self):
        count = CashCount()
        with pytest.raises(ValidationError, match="positive"):
            count.set(0, 3)


class TestReconcile:
    def test_exact_match(self):
        result = reconcile(CashCount.from_mapping({1000: 2, 500: 1}), 2500.0)
        assert result.physical_total == 2500.0
        assert result.variance == 0.0
        assert result.is_balanced
        assert result.direction == "balanced"

    def test_over(self):
        result = reconcile(CashCount.from_mapping({1000: 3}), 2500.0)
        assert result.variance == 500.0
        assert not result.is_balanced
        assert result.direction == "over"

    def test_short_by_one_is_not_balanced(self, caplog):
        with caplog.at_level(logging.WARNING, logger="coopledger.services.reconciliation"):
            result = reconcile(CashCount.from_mapping({1000: 2}), 2001.0)
        assert result.variance == -1.0
        assert not result.is_balanced
        assert result.direction == "short"
        assert "short" in caplog.text

    def test_explicit_tolerance(self):
        result = reconcile(CashCount.from_mapping({1000: 2}), 2001.0, tolerance=1.0)
        assert result.is_balanced


class TestDailyCashBox:
    def test_inflow_day(self, transactions):
        tally = daily_cash_box(transactions, date(2023, 10, 1))
        assert tally.total_in == 5000.0
        assert tally.total_out == 0.0
        assert tally.net_cash == 5000.0
        assert tally.transaction_count == 1

    def test_outflow_day(self, transactions):
        tally = daily_cash_box(transactions, date(2023, 10, 9))
        assert tally.total_in == 0.0
        assert tally.total_out == 1500.0
        assert tally.net_cash == -1500.0

    def test_quiet_day(self, transactions):
        tally = daily_cash_box(transactions, date(2023, 12, 25))
        assert tally.net_cash == 0.0
        assert tally.transaction_count == 0

    def test_reconcile_against_tally(self, transactions):
        tally = daily_cash_box(transactions, date(2023, 10, 1))
        result = reconcile(CashCount.from_mapping({1000: 5}), tally.net_cash)
        assert result.is_balanced
