"""
Payoff scenario comparison.

This module projects three competing strategies for a debt portfolio
(minimum payments, a negotiated-settlement program and a consolidation loan),
lays them side by side and applies a fixed rule-based policy to recommend one.
The comparator works on portfolio totals only, never on individual accounts.
"""

import logging
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .amortization import MinimumPaymentCalculator
from .parameters import EngineParameters
from .portfolio import PortfolioMetrics
from .rate_estimation import (
    CURRENT_PATH_FALLBACK_RATE,
    CURRENT_PATH_RATE_TIERS,
    LOAN_FALLBACK_RATE,
    LOAN_RATE_TIERS,
    lookup_tier,
)

logger = logging.getLogger(__name__)

ScenarioKey = Literal["current", "resolution", "loan"]

# Assumed aggregate minimum payment when none is supplied
DEFAULT_PAYMENT_PERCENT_OF_DEBT = 0.025

# (minimum total debt, program months) pairs, highest threshold first
PROGRAM_LENGTH_TIERS: Tuple[Tuple[float, int], ...] = (
    (75000, 48),
    (50000, 42),
    (30000, 36),
    (15000, 30),
)
DEFAULT_PROGRAM_MONTHS = 24

LOAN_TERM_MONTHS = 60
LOAN_MIN_CREDIT_SCORE = 640
LOAN_MAX_DTI_PERCENT = 43.0
LOAN_MAX_DEBT = 100000.0

CURRENT_PATH_INFEASIBLE_REASON = "minimum payments will not eliminate this debt"


class DebtProfile(BaseModel):
    """Portfolio totals the comparator works from."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_debt: float = Field(..., ge=0, allow_inf_nan=False, description="Total debt")
    credit_score: int = Field(..., ge=300, le=850, description="Client credit score")
    monthly_income: Optional[float] = Field(
        default=None, ge=0, description="Monthly income, if known"
    )
    current_monthly_payment: Optional[float] = Field(
        default=None,
        ge=0,
        description="Aggregate monthly payment (defaults to 2.5% of debt)",
    )
    number_of_creditors: int = Field(default=1, ge=0, description="Creditor count")

    @classmethod
    def from_metrics(
        cls, metrics: PortfolioMetrics, use_current_payments: bool = True
    ) -> "DebtProfile":
        """Build a profile from aggregated portfolio metrics."""
        return cls(
            total_debt=metrics.total_debt,
            credit_score=metrics.credit_score,
            monthly_income=metrics.monthly_income,
            current_monthly_payment=(
                metrics.total_monthly_payments if use_current_payments else None
            ),
            number_of_creditors=metrics.active_accounts_count,
        )


class ScenarioResult(BaseModel):
    """Projection of one payoff strategy."""

    model_config = ConfigDict(frozen=True)

    scenario: ScenarioKey = Field(..., description="Strategy key")
    feasible: bool = Field(..., description="Whether the strategy can be followed")
    months: Optional[int] = Field(default=None, ge=0, description="Months to debt-free")
    years: Optional[float] = Field(default=None, ge=0, description="Years to debt-free")
    monthly_payment: Optional[float] = Field(
        default=None, ge=0, description="Monthly payment"
    )
    total_paid: Optional[float] = Field(default=None, ge=0, description="Total cost")
    interest_or_fees_paid: Optional[float] = Field(
        default=None, description="Interest (current/loan) or program fee (resolution)"
    )
    savings_vs_baseline: Optional[float] = Field(
        default=None, description="Cost saved against the baseline (resolution/loan)"
    )
    annual_rate: Optional[float] = Field(
        default=None, ge=0, description="Annual rate applied, in percent"
    )
    settlement_amount: Optional[float] = Field(
        default=None, ge=0, description="Negotiated settlement (resolution)"
    )
    program_fee: Optional[float] = Field(
        default=None, ge=0, description="Program fee (resolution)"
    )
    balance_forgiven: Optional[float] = Field(
        default=None, description="Debt less settlement (resolution)"
    )
    savings_percent: Optional[float] = Field(
        default=None, description="Balance forgiven as a percent of debt (resolution)"
    )
    rationale: str = Field(..., description="Human-readable explanation")
    reason: Optional[str] = Field(
        default=None, description="Why the strategy is infeasible"
    )


class ComparisonRow(BaseModel):
    """One feasible strategy in the comparison table."""

    model_config = ConfigDict(frozen=True)

    scenario: ScenarioKey
    months: int
    total_cost: float
    monthly_payment: float


class ScenarioComparison(BaseModel):
    """Side-by-side comparison of feasible strategies."""

    model_config = ConfigDict(frozen=True)

    rows: List[ComparisonRow] = Field(..., description="Feasible strategies in order")
    fastest: ScenarioKey = Field(..., description="Fewest months to debt-free")
    lowest_total_cost: ScenarioKey = Field(..., description="Lowest total cost")
    lowest_monthly_payment: ScenarioKey = Field(
        ..., description="Lowest monthly payment"
    )
    interest_vs_minimum_payments: float = Field(
        default=0.0, description="Interest paid on the current path (0 if infeasible)"
    )
    interest_vs_loan: float = Field(
        default=0.0, description="Interest paid on the loan path (0 if infeasible)"
    )


class Recommendation(BaseModel):
    """Rule-based strategy recommendation."""

    model_config = ConfigDict(frozen=True)

    recommended: ScenarioKey = Field(..., description="Recommended strategy")
    reason: str = Field(..., description="Justification")
    action: str = Field(..., description="Suggested next step")
    projected_savings: Optional[float] = Field(
        default=None, description="Savings against the current path"
    )
    months_saved: Optional[int] = Field(
        default=None, description="Months saved against the current path"
    )


class ScenarioReport(BaseModel):
    """All three strategies plus comparison and recommendation."""

    model_config = ConfigDict(frozen=True)

    profile: DebtProfile
    current: ScenarioResult
    resolution: ScenarioResult
    loan: ScenarioResult
    comparison: ScenarioComparison
    recommendation: Recommendation

    def summary_text(self) -> str:
        """Short plain-text summary of the current and resolution paths."""
        lines = [f"Total Debt: ${self.profile.total_debt:,.2f}", ""]

        if self.current.feasible:
            lines.extend(
                [
                    "CURRENT PATH (Minimum Payments):",
                    f"   Time to debt-free: {self.current.years} years",
                    f"   Total interest paid: ${self.current.interest_or_fees_paid:,.2f}",
                    f"   Total cost: ${self.current.total_paid:,.2f}",
                    "",
                ]
            )
        else:
            lines.extend(
                ["CURRENT PATH (Minimum Payments):", f"   {self.current.reason}", ""]
            )

        lines.extend(
            [
                "DEBT RESOLUTION PATH:",
                f"   Time to debt-free: {self.resolution.years} years",
                f"   Monthly payment: ${self.resolution.monthly_payment:,.2f}",
                f"   Total cost: ${self.resolution.total_paid:,.2f}",
                f"   SAVINGS: ${self.resolution.balance_forgiven:,.2f} "
                f"({self.resolution.savings_percent:g}%)",
            ]
        )
        return "\n".join(lines)


class ScenarioComparator:
    """Comparator for minimum-payment, settlement and consolidation strategies."""

    def __init__(self, parameters: Optional[EngineParameters] = None):
        """Initialize the comparator.

        Args:
            parameters: Engine parameters (defaults apply when omitted)
        """
        self.parameters = parameters or EngineParameters()

    def compare(self, profile: DebtProfile) -> ScenarioReport:
        """
        Project all three strategies and recommend one.

        Args:
            profile: Portfolio totals and client metadata

        Returns:
            ScenarioReport with every strategy, the comparison and recommendation
        """
        current = self.calculate_current_path(profile)
        resolution = self.calculate_resolution_path(profile, baseline=current)
        loan = self.calculate_loan_path(profile, baseline=current)

        comparison = self.build_comparison(current, resolution, loan)
        recommendation = self.recommend(profile, current, resolution, loan)

        logger.info(
            f"Compared strategies for debt {profile.total_debt:.2f}: "
            f"recommended {recommendation.recommended}"
        )
        return ScenarioReport(
            profile=profile,
            current=current,
            resolution=resolution,
            loan=loan,
            comparison=comparison,
            recommendation=recommendation,
        )

    def calculate_current_path(self, profile: DebtProfile) -> ScenarioResult:
        """Minimum payments held at the aggregate payment, at a score-tiered rate."""
        annual_rate = self.estimate_average_rate(profile.credit_score)
        monthly_payment = profile.current_monthly_payment
        if monthly_payment is None or monthly_payment <= 0:
            monthly_payment = profile.total_debt * DEFAULT_PAYMENT_PERCENT_OF_DEBT

        projection = MinimumPaymentCalculator.simulate_payoff(
            balance=profile.total_debt,
            annual_rate_percent=annual_rate,
            monthly_payment=monthly_payment,
            max_months=self.parameters.max_simulation_months,
        )

        if not projection.converged:
            logger.warning(
                f"Current path does not converge ({projection.reason}) "
                f"at {monthly_payment:.2f}/month and {annual_rate}%"
            )
            return ScenarioResult(
                scenario="current",
                feasible=False,
                monthly_payment=round(monthly_payment, 2),
                annual_rate=annual_rate,
                rationale="Minimum payments will not eliminate this debt",
                reason=CURRENT_PATH_INFEASIBLE_REASON,
            )

        years = round(projection.months / 12, 1)
        return ScenarioResult(
            scenario="current",
            feasible=True,
            months=projection.months,
            years=years,
            monthly_payment=round(monthly_payment, 2),
            total_paid=projection.total_paid,
            interest_or_fees_paid=projection.total_interest,
            annual_rate=annual_rate,
            rationale=f"It will take {years:g} years to become debt-free",
        )

    def calculate_resolution_path(
        self, profile: DebtProfile, baseline: Optional[ScenarioResult] = None
    ) -> ScenarioResult:
        """Settlement program: settle plus program fee, spread over a tiered length."""
        total_debt = profile.total_debt
        program_months = self.estimate_program_length(total_debt)

        settlement_amount = total_debt * self.parameters.settlement_percent / 100
        program_fee = total_debt * self.parameters.program_fee_percent / 100
        total_cost = settlement_amount + program_fee
        balance_forgiven = total_debt - settlement_amount
        savings_percent = balance_forgiven / total_debt * 100 if total_debt > 0 else 0.0
        years = round(program_months / 12, 1)

        return ScenarioResult(
            scenario="resolution",
            feasible=True,
            months=program_months,
            years=years,
            monthly_payment=round(total_cost / program_months, 2),
            total_paid=round(total_cost, 2),
            interest_or_fees_paid=round(program_fee, 2),
            savings_vs_baseline=self._savings_vs_baseline(
                total_cost, total_debt, baseline
            ),
            settlement_amount=round(settlement_amount, 2),
            program_fee=round(program_fee, 2),
            balance_forgiven=round(balance_forgiven, 2),
            savings_percent=round(savings_percent, 2),
            rationale=f"Become debt-free in {years:g} years",
        )

    def calculate_loan_path(
        self, profile: DebtProfile, baseline: Optional[ScenarioResult] = None
    ) -> ScenarioResult:
        """Consolidation loan over 60 months at a score-tiered rate, if it qualifies."""
        qualifies, reason = self.check_loan_qualification(profile)
        if not qualifies:
            logger.info(f"Consolidation loan not available: {reason}")
            return ScenarioResult(
                scenario="loan", feasible=False, rationale=reason, reason=reason
            )

        annual_rate = self.estimate_loan_rate(profile.credit_score)
        monthly_payment = MinimumPaymentCalculator.calculate_installment_payment(
            profile.total_debt, annual_rate, LOAN_TERM_MONTHS
        )
        total_paid = monthly_payment * LOAN_TERM_MONTHS
        interest_paid = max(0.0, total_paid - profile.total_debt)

        return ScenarioResult(
            scenario="loan",
            feasible=True,
            months=LOAN_TERM_MONTHS,
            years=round(LOAN_TERM_MONTHS / 12, 1),
            monthly_payment=monthly_payment,
            total_paid=round(total_paid, 2),
            interest_or_fees_paid=round(interest_paid, 2),
            savings_vs_baseline=self._savings_vs_baseline(
                total_paid, profile.total_debt, baseline
            ),
            annual_rate=annual_rate,
            rationale=reason,
        )

    @staticmethod
    def build_comparison(
        current: ScenarioResult, resolution: ScenarioResult, loan: ScenarioResult
    ) -> ScenarioComparison:
        """Table of feasible strategies and the winner on each axis."""
        rows = [
            ComparisonRow(
                scenario=result.scenario,
                months=result.months,
                total_cost=result.total_paid,
                monthly_payment=result.monthly_payment,
            )
            for result in (current, resolution, loan)
            if result.feasible
        ]

        # min() keeps the first of equal rows, so ties favor table order
        return ScenarioComparison(
            rows=rows,
            fastest=min(rows, key=lambda row: row.months).scenario,
            lowest_total_cost=min(rows, key=lambda row: row.total_cost).scenario,
            lowest_monthly_payment=min(
                rows, key=lambda row: row.monthly_payment
            ).scenario,
            interest_vs_minimum_payments=(
                current.interest_or_fees_paid if current.feasible else 0.0
            ),
            interest_vs_loan=loan.interest_or_fees_paid if loan.feasible else 0.0,
        )

    @staticmethod
    def recommend(
        profile: DebtProfile,
        current: ScenarioResult,
        resolution: ScenarioResult,
        loan: ScenarioResult,
    ) -> Recommendation:
        """
        Apply the fixed recommendation policy.

        Rules are evaluated in order:
        1. score >= 700 with a feasible loan under 10% -> loan
        2. score < 650 or debt >= 25,000 -> resolution
        3. debt < 15,000 and score >= 650 -> current (accelerated)
        4. otherwise -> resolution
        """
        score = profile.credit_score
        total_debt = profile.total_debt

        if score >= 700 and loan.feasible and loan.annual_rate < 10:
            return Recommendation(
                recommended="loan",
                reason="Your excellent credit qualifies you for a low-rate consolidation loan",
                action="Apply for debt consolidation loan",
                projected_savings=loan.savings_vs_baseline,
            )

        if score < 650 or total_debt >= 25000:
            return Recommendation(
                recommended="resolution",
                reason="Debt resolution will save you the most money and time",
                action="Schedule free consultation",
                projected_savings=resolution.savings_vs_baseline,
                months_saved=(
                    current.months - resolution.months if current.feasible else None
                ),
            )

        if total_debt < 15000 and score >= 650:
            return Recommendation(
                recommended="current",
                reason="Your debt is manageable - consider accelerated payments",
                action="Create payoff plan",
            )

        return Recommendation(
            recommended="resolution",
            reason="Debt resolution offers the best balance of savings and timeline",
            action="Schedule free consultation",
            projected_savings=resolution.savings_vs_baseline,
        )

    @staticmethod
    def check_loan_qualification(profile: DebtProfile) -> Tuple[bool, str]:
        """
        Gate consolidation loan eligibility.

        The debt-to-income check uses an estimated payment of 2.5% of debt and
        is skipped when income is unknown; a known income of 0 fails it.
        """
        if profile.credit_score < LOAN_MIN_CREDIT_SCORE:
            return False, "Credit score too low for favorable loan terms"

        if profile.monthly_income is not None:
            estimated_payment = profile.total_debt * DEFAULT_PAYMENT_PERCENT_OF_DEBT
            if profile.monthly_income <= 0:
                return False, "Debt-to-income ratio too high"
            dti = estimated_payment / profile.monthly_income * 100
            if dti > LOAN_MAX_DTI_PERCENT:
                return False, "Debt-to-income ratio too high"

        if profile.total_debt > LOAN_MAX_DEBT:
            return False, "Debt amount exceeds typical loan limits"

        if profile.monthly_income is None:
            return (
                True,
                "You may qualify for a consolidation loan "
                "(income not provided; debt-to-income not checked)",
            )
        return True, "You may qualify for a consolidation loan"

    @staticmethod
    def estimate_average_rate(credit_score: int) -> float:
        """Average revolving rate assumed for the current path."""
        return lookup_tier(credit_score, CURRENT_PATH_RATE_TIERS, CURRENT_PATH_FALLBACK_RATE)

    @staticmethod
    def estimate_loan_rate(credit_score: int) -> float:
        """Consolidation loan rate by credit tier."""
        return lookup_tier(credit_score, LOAN_RATE_TIERS, LOAN_FALLBACK_RATE)

    @staticmethod
    def estimate_program_length(total_debt: float) -> int:
        """Settlement program length in months, tiered by debt size."""
        return int(lookup_tier(total_debt, PROGRAM_LENGTH_TIERS, DEFAULT_PROGRAM_MONTHS))

    @staticmethod
    def _savings_vs_baseline(
        total_cost: float, total_debt: float, baseline: Optional[ScenarioResult]
    ) -> float:
        # Baseline is the current path's total cost, or the bare debt if it never pays off
        if baseline is not None and baseline.feasible:
            baseline_cost = baseline.total_paid
        else:
            baseline_cost = total_debt
        return round(baseline_cost - total_cost, 2)
