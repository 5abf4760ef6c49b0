import logging
from datetime import date

import pytest

from coopledger.models import Member, Transaction, TransactionType
from coopledger.services import DividendCalculator


@pytest.fixture
def calculator():
    return DividendCalculator(dividend_rate=4.5, avg_return_rate=12.0)


class TestMemberPayout:
    def test_dividend_on_shares(self, calculator):
        payout = calculator.member_payout(Member("M1", "A", share_balance=20000.0), 0.0)
        assert payout.dividend_amount == pytest.approx(900.0)
        assert payout.refund_amount == 0.0
        assert payout.total_payout == pytest.approx(900.0)

    def test_refund_on_interest(self, calculator):
        payout = calculator.member_payout(Member("M1", "A"), 450.0)
        assert payout.refund_amount == pytest.approx(54.0)


class TestInterestPaid:
    def test_fifteen_percent_of_repayments(self, calculator, transactions):
        paid = calculator.interest_paid_by_member(transactions)
        assert paid == {"M001": pytest.approx(450.0)}

    def test_ignores_other_types_and_anonymous(self, calculator):
        txs = [
            Transaction("T1", date(2023, 1, 1), TransactionType.DEPOSIT, 1000.0, member_id="M1"),
            Transaction("T2", date(2023, 1, 1), TransactionType.LOAN_REPAYMENT, 1000.0),
        ]
        assert calculator.interest_paid_by_member(txs) == {}

    def test_custom_interest_portion(self, transactions):
        calc = DividendCalculator(interest_portion=0.5)
        assert calc.interest_paid_by_member(transactions)["M001"] == pytest.approx(1500.0)


class TestCalculate:
    def test_report(self, calculator, members, transactions):
        report = calculator.calculate(members, transactions, net_profit=10000.0)

        by_id = {p.member_id: p for p in report.payouts}
        assert by_id["M001"].dividend_amount == pytest.approx(900.0)
        assert by_id["M001"].interest_paid == pytest.approx(450.0)
        assert by_id["M001"].refund_amount == pytest.approx(54.0)
        assert by_id["M001"].total_payout == pytest.approx(954.0)
        assert by_id["M002"].total_payout == pytest.approx(450.0)

        assert report.total_shares == 30000.0
        assert report.total_dividend == pytest.approx(1350.0)
        assert report.total_interest_paid == pytest.approx(450.0)
        assert report.total_refund == pytest.approx(54.0)
        assert report.total_distribution == pytest.approx(1404.0)
        assert report.payout_ratio == pytest.approx(14.04)
        assert not report.exceeds_net_profit

    def test_idempotent(self, calculator, members, transactions):
        first = calculator.calculate(members, transactions, 10000.0)
        second = calculator.calculate(members, transactions, 10000.0)
        assert first == second

    def test_order_independent(self, calculator, members, transactions):
        forward = calculator.calculate(members, transactions, 10000.0)
        backward = calculator.calculate(
            list(reversed(members)), list(reversed(transactions)), 10000.0
        )
        assert forward.total_distribution == pytest.approx(backward.total_distribution)
        assert {p.member_id: p for p in forward.payouts} == {
            p.member_id: p for p in backward.payouts
        }

    @pytest.mark.parametrize("net_profit", [0.0, -500.0])
    def test_no_ratio_without_profit(self, calculator, members, transactions, net_profit):
        report = calculator.calculate(members, transactions, net_profit)
        assert report.payout_ratio == 0.0
        assert not report.exceeds_net_profit

    def test_ratio_over_hundred_is_warning(self, calculator, members, transactions, caplog):
        with caplog.at_level(logging.WARNING, logger="coopledger.services.dividend"):
            report = calculator.calculate(members, transactions, net_profit=1000.0)
        assert report.payout_ratio == pytest.approx(140.4)
        assert report.exceeds_net_profit
        assert "exceeds net profit" in caplog.text

    def test_no_members(self, calculator):
        report = calculator.calculate([], [], 1000.0)
        assert report.payouts == []
        assert report.total_distribution == 0.0
        assert report.payout_ratio == 0.0

    def test_payout_to_dict(self, calculator, members, transactions):
        row = calculator.calculate(members, transactions, 10000.0).payouts[0].to_dict()
        assert row["id"] == "M001"
        assert row["return_amount"] == pytest.approx(54.0)
