"""
Portfolio aggregation module.

This module folds analyzed accounts into portfolio-level metrics (totals,
balance-weighted rate, debt-to-income) and produces the staged credit score
projection shown alongside them.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .account import UNBOUNDED, AnalyzedAccount
from .parameters import EngineParameters

logger = logging.getLogger(__name__)

# Stand-in for a non-convergent account when averaging payoff months
UNBOUNDED_PAYOFF_MONTHS = 120

# Program length assumed by the portfolio view of settlement
SETTLEMENT_PROGRAM_MONTHS = 30

SCORE_PROJECTION_DISCLAIMER = (
    "Illustrative floors and ceilings anchored to the current score; "
    "not a predictive credit model."
)


class PortfolioMetrics(BaseModel):
    """Portfolio-level totals and ratios."""

    model_config = ConfigDict(frozen=True)

    total_debt: float = Field(..., ge=0, description="Sum of active balances")
    secured_debt: float = Field(..., ge=0, description="Auto and mortgage balances")
    unsecured_debt: float = Field(..., ge=0, description="All other balances")
    total_monthly_payments: float = Field(
        ..., ge=0, description="Sum of active monthly payments"
    )
    weighted_average_rate: float = Field(
        ..., ge=0, description="Balance-weighted annual rate in percent"
    )
    total_interest_paid: float = Field(
        ..., ge=0, description="Interest paid to date across active accounts"
    )
    total_remaining_interest: float = Field(
        ..., ge=0, description="Remaining interest at minimums (unbounded count as 0)"
    )
    total_settlement_estimate: float = Field(
        ..., ge=0, description="Settlement estimate over settlement-eligible accounts"
    )
    total_savings: float = Field(
        ..., description="Balance forgiven over settlement-eligible accounts"
    )
    average_payoff_months: float = Field(
        ..., ge=0, description="Mean payoff months (unbounded capped at 120)"
    )
    debt_to_income_percent: Optional[float] = Field(
        default=None, ge=0, description="Monthly payments over income (None if unknown)"
    )
    settlement_months: int = Field(
        default=SETTLEMENT_PROGRAM_MONTHS, ge=1, description="Assumed program length"
    )
    interest_savings: float = Field(
        ..., ge=0, description="Remaining interest avoided by settling"
    )
    payment_savings: float = Field(
        ..., description="Monthly payment reduction under settlement"
    )
    months_saved: float = Field(
        ..., description="Average payoff months less the program length"
    )
    monthly_income: Optional[float] = Field(
        default=None, ge=0, description="Monthly income used for ratios"
    )
    credit_score: int = Field(..., ge=300, le=850, description="Client credit score")
    active_accounts_count: int = Field(..., ge=0, description="Accounts with a balance")
    total_accounts_count: int = Field(..., ge=0, description="All accounts")


class ScoreBand(BaseModel):
    """Projected score over one time band."""

    model_config = ConfigDict(frozen=True)

    start_month: int = Field(..., ge=0, description="First month of the band")
    end_month: Optional[int] = Field(
        default=None, description="Month the band ends (None for open-ended)"
    )
    label: str = Field(..., description="Human-readable band label")
    projected_score: int = Field(..., description="Projected credit score")
    description: str = Field(..., description="Qualitative description")


class ScoreProjection(BaseModel):
    """Staged credit score recovery projection (informational only)."""

    model_config = ConfigDict(frozen=True)

    current_score: int = Field(..., description="Score at the start of the program")
    bands: List[ScoreBand] = Field(..., description="Ordered, non-overlapping bands")
    disclaimer: str = Field(
        default=SCORE_PROJECTION_DISCLAIMER, description="Model limitations"
    )


class PortfolioAggregator:
    """Aggregator for analyzed account portfolios."""

    def __init__(self, parameters: Optional[EngineParameters] = None):
        """Initialize the aggregator.

        Args:
            parameters: Engine parameters (defaults apply when omitted)
        """
        self.parameters = parameters or EngineParameters()

    def aggregate(
        self,
        accounts: Sequence[AnalyzedAccount],
        credit_score: int,
        monthly_income: Optional[float] = None,
    ) -> PortfolioMetrics:
        """
        Fold analyzed accounts into portfolio metrics.

        Zero-balance accounts are counted in ``total_accounts_count`` but
        excluded from every sum. ``monthly_income`` is never inferred here; when
        it is None the debt-to-income ratio is left unknown.

        Args:
            accounts: Analyzed accounts
            credit_score: Client credit score
            monthly_income: Client monthly income, if known

        Returns:
            PortfolioMetrics for the portfolio
        """
        active = [account for account in accounts if account.is_active]

        balances = np.array([a.balance for a in active], dtype=np.float64)
        rates = np.array([a.estimated_annual_rate for a in active], dtype=np.float64)
        secured_mask = np.array([a.is_secured for a in active], dtype=bool)

        total_debt = float(balances.sum())
        secured_debt = float(balances[secured_mask].sum()) if active else 0.0
        unsecured_debt = float(balances[~secured_mask].sum()) if active else 0.0
        total_monthly_payments = float(sum(a.monthly_payment for a in active))

        if total_debt > 0:
            weighted_average_rate = float(np.dot(rates, balances) / total_debt)
        else:
            weighted_average_rate = 0.0

        total_interest_paid = float(sum(a.interest_paid_to_date for a in active))
        total_remaining_interest = float(
            sum(
                a.remaining_interest_at_minimum
                for a in active
                if a.remaining_interest_at_minimum != UNBOUNDED
            )
        )

        eligible = [
            a
            for a in active
            if self.parameters.include_secured_in_settlement or not a.is_secured
        ]
        total_settlement_estimate = float(sum(a.settlement_estimate for a in eligible))
        total_savings = float(sum(a.savings_if_settled for a in eligible))

        payoff_months = [
            UNBOUNDED_PAYOFF_MONTHS
            if a.months_to_payoff_at_minimum == UNBOUNDED
            else a.months_to_payoff_at_minimum
            for a in active
        ]
        average_payoff_months = float(np.mean(payoff_months)) if payoff_months else 0.0

        debt_to_income = self.calculate_debt_to_income(
            total_monthly_payments, monthly_income
        )

        metrics = PortfolioMetrics(
            total_debt=round(total_debt, 2),
            secured_debt=round(secured_debt, 2),
            unsecured_debt=round(unsecured_debt, 2),
            total_monthly_payments=round(total_monthly_payments, 2),
            weighted_average_rate=round(weighted_average_rate, 2),
            total_interest_paid=round(total_interest_paid, 2),
            total_remaining_interest=round(total_remaining_interest, 2),
            total_settlement_estimate=round(total_settlement_estimate, 2),
            total_savings=round(total_savings, 2),
            average_payoff_months=round(average_payoff_months, 2),
            debt_to_income_percent=debt_to_income,
            settlement_months=SETTLEMENT_PROGRAM_MONTHS,
            interest_savings=round(total_remaining_interest, 2),
            payment_savings=round(
                total_monthly_payments
                - total_settlement_estimate / SETTLEMENT_PROGRAM_MONTHS,
                2,
            ),
            months_saved=round(average_payoff_months - SETTLEMENT_PROGRAM_MONTHS, 2),
            monthly_income=monthly_income,
            credit_score=credit_score,
            active_accounts_count=len(active),
            total_accounts_count=len(accounts),
        )
        logger.debug(
            f"Aggregated {metrics.active_accounts_count}/{metrics.total_accounts_count} "
            f"active accounts, total debt {metrics.total_debt:.2f}"
        )
        return metrics

    @staticmethod
    def calculate_debt_to_income(
        total_monthly_payments: float, monthly_income: Optional[float]
    ) -> Optional[float]:
        """Debt-to-income percentage; None if income is unknown, 0 if income is 0."""
        if monthly_income is None:
            return None
        if monthly_income <= 0:
            return 0.0
        return round(total_monthly_payments / monthly_income * 100, 2)

    @staticmethod
    def project_credit_score(credit_score: int) -> ScoreProjection:
        """
        Staged credit score projection for a settlement program.

        Each band applies a fixed offset from the current score with a floor
        (or, for the last band, a ceiling). The result is illustrative and is
        not fed into any other calculation.
        """
        bands = [
            ScoreBand(
                start_month=0,
                end_month=6,
                label="0-6 months",
                projected_score=max(500, credit_score - 100),
                description="Initial drop as accounts become delinquent",
            ),
            ScoreBand(
                start_month=6,
                end_month=12,
                label="6-12 months",
                projected_score=max(520, credit_score - 80),
                description="Stabilization as settlements begin",
            ),
            ScoreBand(
                start_month=12,
                end_month=24,
                label="12-24 months",
                projected_score=max(580, credit_score - 50),
                description="Gradual recovery as settlements complete",
            ),
            ScoreBand(
                start_month=24,
                end_month=None,
                label="24+ months",
                projected_score=min(750, credit_score - 20),
                description=(
                    "Strong recovery with clean payment history on remaining accounts"
                ),
            ),
        ]
        return ScoreProjection(current_score=credit_score, bands=bands)
