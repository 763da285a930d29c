"""
Pytest configuration and shared fixtures for the debt engine tests.
"""

from datetime import date

import pytest

from debt_engine.config import Settings
from debt_engine.models.account import Account
from debt_engine.models.account_analyzer import AccountAnalyzer


@pytest.fixture
def as_of():
    """Fixed analysis date so month counts never depend on the clock."""
    return date(2025, 1, 15)


@pytest.fixture
def analyzer():
    """Account analyzer with default parameters."""
    return AccountAnalyzer()


@pytest.fixture
def engine_settings():
    """Settings built without reading the environment or a .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def converging_card():
    """Revolving card whose payment covers the first month's interest."""
    return Account(
        creditor="Test Card",
        account_kind="revolving",
        balance=5000.0,
        monthly_payment=150.0,
        stated_annual_rate=20.0,
    )


@pytest.fixture
def underwater_card():
    """Revolving card whose payment is below the monthly interest charge."""
    return Account(
        creditor="Test Card",
        account_kind="revolving",
        balance=5000.0,
        monthly_payment=80.0,
        stated_annual_rate=24.0,
    )


@pytest.fixture
def sample_client_record():
    """Untyped client record as the web layer would pass it."""
    return {
        "name": "Sample Client",
        "credit_score": 610,
        "monthly_income": 4500.0,
        "accounts": [
            {
                "creditor": "AMEX",
                "account_kind": "revolving",
                "balance": 12500.0,
                "credit_limit_or_original_amount": 15000.0,
                "monthly_payment": 375.0,
                "stated_annual_rate": 18.99,
                "date_opened": "2019-03-15",
                "payment_history_text": "Current",
            },
            {
                "creditor": "Capital One",
                "account_kind": "revolving",
                "balance": 8200.0,
                "credit_limit_or_original_amount": 10000.0,
                "monthly_payment": 246.0,
                "stated_annual_rate": 24.99,
                "date_opened": "2020-06-20",
            },
            {
                "creditor": "Chase Bank",
                "account_kind": "revolving",
                "balance": 5400.0,
                "credit_limit_or_original_amount": 7000.0,
                "monthly_payment": 162.0,
                "date_opened": "2021-01-10",
                "payment_history_text": "30 days late (2 times in last 12 months)",
            },
            {
                "creditor": "Wells Fargo",
                "account_kind": "installment",
                "balance": 15000.0,
                "credit_limit_or_original_amount": 20000.0,
                "monthly_payment": 425.0,
                "date_opened": "2022-04-01",
            },
            {
                "creditor": "Discover",
                "account_kind": "revolving",
                "balance": 3200.0,
                "credit_limit_or_original_amount": 5000.0,
                "monthly_payment": 96.0,
                "date_opened": "2018-11-05",
            },
            {
                "creditor": "Best Buy Credit",
                "account_kind": "revolving",
                "balance": 1800.0,
                "credit_limit_or_original_amount": 3000.0,
                "monthly_payment": 54.0,
                "stated_annual_rate": 27.99,
                "date_opened": "2021-09-15",
            },
            {
                "creditor": "Ford Motor Credit",
                "account_kind": "auto",
                "balance": 22000.0,
                "credit_limit_or_original_amount": 28000.0,
                "monthly_payment": 485.0,
                "stated_annual_rate": 6.5,
                "date_opened": "2022-08-01",
            },
            {
                "creditor": "Synchrony Bank",
                "account_kind": "revolving",
                "balance": 4500.0,
                "credit_limit_or_original_amount": 6000.0,
                "monthly_payment": 135.0,
                "stated_annual_rate": 26.99,
                "date_opened": "2020-12-10",
                "payment_history_text": "60 days late (1 time in last 12 months)",
            },
        ],
    }
