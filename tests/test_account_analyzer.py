"""
Tests for per-account analysis.

This module tests rate inference wiring, payoff projection, settlement and
utilization figures, risk tiers and input rejection for single accounts.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from debt_engine.models.account import UNBOUNDED, Account, AnalyzedAccount
from debt_engine.models.account_analyzer import AccountAnalyzer, months_between
from debt_engine.models.exceptions import InvalidAccountError
from debt_engine.models.parameters import EngineParameters


class TestMonthsBetween:
    """Test calendar month counting."""

    def test_whole_months(self):
        """Test month difference across years."""
        assert months_between(date(2022, 4, 1), date(2025, 1, 15)) == 33

    def test_day_of_month_is_ignored(self):
        """Test that only calendar months count."""
        assert months_between(date(2020, 1, 31), date(2020, 2, 1)) == 1

    def test_future_date_clamps_to_zero(self):
        """Test that an opening date after as-of gives zero."""
        assert months_between(date(2026, 1, 1), date(2025, 1, 1)) == 0


class TestAccountAnalyzer:
    """Test cases for AccountAnalyzer.analyze."""

    def test_converging_card(self, analyzer, converging_card, as_of):
        """Test a revolving card whose payment covers interest."""
        result = analyzer.analyze(converging_card, as_of)

        assert isinstance(result, AnalyzedAccount)
        assert result.risk_tier == "high"
        assert result.estimated_annual_rate == 20.0
        assert result.rate_source == "stated"
        assert result.payoff_converges
        assert isinstance(result.months_to_payoff_at_minimum, int)
        assert result.months_to_payoff_at_minimum <= 360
        assert result.remaining_interest_at_minimum > 0

    def test_underwater_card_is_unbounded(self, analyzer, underwater_card, as_of):
        """Test that interest above the payment never pays off."""
        result = analyzer.analyze(underwater_card, as_of)

        assert result.months_to_payoff_at_minimum == UNBOUNDED
        assert result.remaining_interest_at_minimum == UNBOUNDED
        assert not result.payoff_converges

    def test_account_fields_are_carried(self, analyzer, converging_card, as_of):
        """Test that input fields appear unchanged on the result."""
        result = analyzer.analyze(converging_card, as_of)

        assert result.creditor == converging_card.creditor
        assert result.balance == converging_card.balance
        assert result.monthly_payment == converging_card.monthly_payment

    def test_installment_rate_and_interest_to_date(self, analyzer, as_of):
        """Test reverse-engineered rate and interest paid so far."""
        account = Account(
            creditor="Wells Fargo",
            account_kind="installment",
            balance=15000.0,
            credit_limit_or_original_amount=20000.0,
            monthly_payment=425.0,
            date_opened=date(2022, 4, 1),
        )

        result = analyzer.analyze(account, as_of)

        assert result.months_since_opened == 33
        assert result.rate_source == "payment_history"
        assert result.estimated_annual_rate == pytest.approx(18.75, abs=0.01)
        assert result.interest_paid_to_date == 9025.0
        assert result.utilization_percent == 75.0
        assert result.risk_tier == "medium"

    def test_installment_payment_held_fixed(self, analyzer, as_of):
        """Test that non-revolving accounts use their stated payment."""
        account = Account(
            creditor="Bank",
            account_kind="installment",
            balance=1000.0,
            monthly_payment=100.0,
            stated_annual_rate=0.0,
        )

        result = analyzer.analyze(account, as_of)

        assert result.months_to_payoff_at_minimum == 10
        assert result.remaining_interest_at_minimum == 0.0
        assert result.risk_tier == "low"

    def test_no_opening_date(self, analyzer, converging_card, as_of):
        """Test that a missing opening date degrades to zero months."""
        result = analyzer.analyze(converging_card, as_of)

        assert result.months_since_opened == 0
        assert result.interest_paid_to_date == 0.0

    def test_zero_balance_account(self, analyzer, as_of):
        """Test that a paid-off account converges in zero months."""
        account = Account(
            creditor="Paid Off",
            account_kind="revolving",
            balance=0.0,
            monthly_payment=0.0,
            credit_limit_or_original_amount=5000.0,
        )

        result = analyzer.analyze(account, as_of)

        assert result.months_to_payoff_at_minimum == 0
        assert result.remaining_interest_at_minimum == 0.0
        assert result.settlement_estimate == 0.0
        assert result.utilization_percent == 0.0
        assert not result.is_active

    def test_settlement_and_savings(self, analyzer, converging_card, as_of):
        """Test default 50% settlement."""
        result = analyzer.analyze(converging_card, as_of)

        assert result.settlement_estimate == 2500.0
        assert result.savings_if_settled == 2500.0

    def test_custom_settlement_percent(self, converging_card, as_of):
        """Test settlement honors engine parameters."""
        analyzer = AccountAnalyzer(EngineParameters(settlement_percent=40))
        result = analyzer.analyze(converging_card, as_of)

        assert result.settlement_estimate == 2000.0
        assert result.savings_if_settled == 3000.0

    def test_lower_simulation_cap(self, converging_card, as_of):
        """Test that the iteration cap comes from engine parameters."""
        analyzer = AccountAnalyzer(EngineParameters(max_simulation_months=12))
        result = analyzer.analyze(converging_card, as_of)

        assert result.months_to_payoff_at_minimum == UNBOUNDED

    def test_utilization_without_limit(self, analyzer, converging_card, as_of):
        """Test zero utilization when no limit is known."""
        result = analyzer.analyze(converging_card, as_of)
        assert result.utilization_percent == 0.0

    def test_analysis_is_deterministic(self, analyzer, as_of):
        """Test that analyzing the same input twice gives identical output."""
        account = Account(
            creditor="Capital One",
            account_kind="revolving",
            balance=8200.0,
            credit_limit_or_original_amount=10000.0,
            monthly_payment=246.0,
            date_opened=date(2020, 6, 20),
        )

        assert analyzer.analyze(account, as_of) == analyzer.analyze(account, as_of)

    def test_result_is_frozen(self, analyzer, converging_card, as_of):
        """Test that analyzed accounts cannot be mutated."""
        result = analyzer.analyze(converging_card, as_of)

        with pytest.raises(ValidationError):
            result.balance = 1.0

    def test_non_negativity(self, analyzer, as_of):
        """Test derived money figures stay within bounds across kinds."""
        accounts = [
            Account(
                creditor="Card",
                account_kind="revolving",
                balance=900.0,
                credit_limit_or_original_amount=500.0,
                monthly_payment=40.0,
                date_opened=date(2015, 5, 1),
            ),
            Account(
                creditor="Auto",
                account_kind="auto",
                balance=18000.0,
                credit_limit_or_original_amount=15000.0,
                monthly_payment=10.0,
                date_opened=date(2024, 12, 1),
            ),
            Account(
                creditor="Home",
                account_kind="mortgage",
                balance=250000.0,
                monthly_payment=1800.0,
            ),
        ]

        for result in analyzer.analyze_accounts(accounts, as_of):
            assert result.interest_paid_to_date >= 0
            assert result.settlement_estimate >= 0
            assert result.savings_if_settled <= result.balance

    def test_analyze_accounts_preserves_order(self, analyzer, as_of, converging_card, underwater_card):
        """Test batch analysis keeps input order."""
        results = analyzer.analyze_accounts([underwater_card, converging_card], as_of)

        assert [r.monthly_payment for r in results] == [80.0, 150.0]

    def test_payoff_schedule(self, analyzer, converging_card, as_of):
        """Test the month-by-month schedule for an account."""
        schedule = analyzer.payoff_schedule(converging_card, as_of)
        result = analyzer.analyze(converging_card, as_of)

        assert len(schedule) == result.months_to_payoff_at_minimum
        assert schedule[0].beginning_balance == 5000.0
        assert schedule[-1].ending_balance == 0

    def test_payoff_schedule_unbounded_is_empty(self, analyzer, underwater_card, as_of):
        """Test that a non-convergent account has no schedule."""
        assert analyzer.payoff_schedule(underwater_card, as_of) == []


class TestMonotonicity:
    """Test that paying more never lengthens payoff."""

    @pytest.mark.parametrize("kind", ["revolving", "installment"])
    def test_months_non_increasing_in_payment(self, analyzer, as_of, kind):
        """Test payoff months against increasing payments at a fixed rate."""
        months = []
        for payment in [150, 175, 250, 400, 800]:
            account = Account(
                creditor="Lender",
                account_kind=kind,
                balance=6000.0,
                monthly_payment=float(payment),
                stated_annual_rate=19.0,
            )
            result = analyzer.analyze(account, as_of)
            assert result.payoff_converges
            months.append(result.months_to_payoff_at_minimum)

        assert months == sorted(months, reverse=True)


class TestRiskTier:
    """Test the rate-only risk tiering."""

    @pytest.mark.parametrize(
        "rate,tier",
        [(29.99, "high"), (20.0, "high"), (19.99, "medium"), (10.0, "medium"), (9.99, "low"), (0.0, "low")],
    )
    def test_thresholds(self, rate, tier):
        """Test tier boundaries."""
        assert AccountAnalyzer.calculate_risk_tier(rate) == tier


class TestAccountValidation:
    """Test rejection of malformed account input."""

    def test_negative_balance_rejected(self):
        """Test negative balances raise InvalidAccountError."""
        with pytest.raises(InvalidAccountError) as exc_info:
            Account.from_record(
                {
                    "creditor": "Bad",
                    "account_kind": "revolving",
                    "balance": -10.0,
                    "monthly_payment": 25.0,
                }
            )

        assert exc_info.value.creditor == "Bad"
        assert any("balance" in message for message in exc_info.value.errors)

    def test_negative_payment_rejected(self):
        """Test negative payments raise InvalidAccountError."""
        with pytest.raises(InvalidAccountError):
            Account.from_record(
                {
                    "creditor": "Bad",
                    "account_kind": "revolving",
                    "balance": 100.0,
                    "monthly_payment": -1.0,
                }
            )

    def test_non_numeric_money_rejected(self):
        """Test that numeric strings are not coerced into money."""
        with pytest.raises(InvalidAccountError):
            Account.from_record(
                {
                    "creditor": "Bad",
                    "account_kind": "revolving",
                    "balance": "5000",
                    "monthly_payment": 25.0,
                }
            )

    def test_missing_required_field_rejected(self):
        """Test that a missing balance is rejected."""
        with pytest.raises(InvalidAccountError):
            Account.from_record(
                {"creditor": "Bad", "account_kind": "revolving", "monthly_payment": 25.0}
            )

    def test_unknown_kind_rejected(self):
        """Test that unknown account kinds are rejected."""
        with pytest.raises(InvalidAccountError):
            Account.from_record(
                {
                    "creditor": "Bad",
                    "account_kind": "payday",
                    "balance": 100.0,
                    "monthly_payment": 25.0,
                }
            )

    def test_invalid_account_error_is_value_error(self):
        """Test the domain error can be caught as ValueError."""
        with pytest.raises(ValueError):
            Account.from_record({"creditor": "Bad"})

    def test_analyze_record(self, analyzer, as_of):
        """Test analyzing an untyped record end to end."""
        result = analyzer.analyze_record(
            {
                "creditor": "Discover",
                "account_kind": "revolving",
                "balance": 3200,
                "credit_limit_or_original_amount": 5000,
                "monthly_payment": 96,
                "date_opened": "2018-11-05",
            },
            as_of,
        )

        assert result.estimated_annual_rate == 20.24
        assert result.rate_source == "issuer_table"
        assert result.utilization_percent == 64.0
        assert result.months_since_opened == 74

    def test_optional_fields_default(self):
        """Test that optional fields degrade to documented defaults."""
        account = Account(
            creditor="Card", account_kind="revolving", balance=10.0, monthly_payment=0.0
        )

        assert account.credit_limit_or_original_amount is None
        assert account.date_opened is None
        assert account.stated_annual_rate is None
        assert account.payment_history_text == ""
