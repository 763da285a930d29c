"""
Per-account analysis.

Turns one Account into one AnalyzedAccount: infers the annual rate, simulates
payoff under the account's minimum-payment policy, and derives settlement,
utilization and risk figures. Analysis is a pure function of the account, the
engine parameters and the supplied as-of date; the system clock is never read.
"""

import logging
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from .account import Account, AnalyzedAccount, RiskTier
from .amortization import MinimumPaymentCalculator, PaymentBreakdown, PayoffProjection
from .parameters import EngineParameters
from .rate_estimation import RateEstimator

logger = logging.getLogger(__name__)

HIGH_RISK_RATE = 20.0
MEDIUM_RISK_RATE = 10.0


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end``, never negative."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    return max(0, months)


class AccountAnalyzer:
    """Analyzer for individual credit accounts."""

    def __init__(self, parameters: Optional[EngineParameters] = None):
        """Initialize the analyzer.

        Args:
            parameters: Engine parameters (defaults apply when omitted)
        """
        self.parameters = parameters or EngineParameters()

    def analyze(self, account: Account, as_of: date) -> AnalyzedAccount:
        """
        Analyze a single account.

        The estimated annual rate is the stated rate when the account reports
        one and otherwise a best-effort heuristic (see RateEstimator).

        Args:
            account: Account to analyze
            as_of: Date the analysis is evaluated at

        Returns:
            AnalyzedAccount with all derived figures
        """
        months_since_opened = (
            months_between(account.date_opened, as_of) if account.date_opened else 0
        )
        annual_rate, rate_source = RateEstimator.estimate(account, months_since_opened)
        projection = self.payoff_projection(account, annual_rate)

        if not projection.converged:
            logger.warning(
                f"Minimum payments never clear {account.creditor} "
                f"({projection.reason}, balance {account.balance:.2f} at {annual_rate}%)"
            )

        settlement_estimate = self.calculate_settlement(
            account.balance, self.parameters.settlement_percent
        )

        analyzed = AnalyzedAccount(
            **account.model_dump(),
            months_since_opened=months_since_opened,
            estimated_annual_rate=annual_rate,
            rate_source=rate_source,
            interest_paid_to_date=self.calculate_interest_paid_to_date(
                account, months_since_opened
            ),
            remaining_interest_at_minimum=projection.interest_or_unbounded,
            months_to_payoff_at_minimum=projection.months_or_unbounded,
            settlement_estimate=settlement_estimate,
            savings_if_settled=round(account.balance - settlement_estimate, 2),
            utilization_percent=self.calculate_utilization(account),
            risk_tier=self.calculate_risk_tier(annual_rate),
        )
        logger.debug(
            f"Analyzed {account.creditor}: rate {annual_rate}% ({rate_source}), "
            f"payoff {analyzed.months_to_payoff_at_minimum} months"
        )
        return analyzed

    def analyze_record(self, record: Mapping[str, Any], as_of: date) -> AnalyzedAccount:
        """Validate an untyped account record and analyze it.

        Raises:
            InvalidAccountError: If the record is malformed
        """
        return self.analyze(Account.from_record(record), as_of)

    def analyze_accounts(
        self, accounts: Iterable[Account], as_of: date
    ) -> List[AnalyzedAccount]:
        """Analyze accounts in order; each analysis is independent."""
        return [self.analyze(account, as_of) for account in accounts]

    def payoff_projection(
        self, account: Account, annual_rate: float, include_schedule: bool = False
    ) -> PayoffProjection:
        """
        Project payoff at minimum payments.

        Revolving accounts recompute their minimum every month; other kinds
        hold the stated monthly payment fixed.
        """
        return MinimumPaymentCalculator.simulate_payoff(
            balance=account.balance,
            annual_rate_percent=annual_rate,
            monthly_payment=account.monthly_payment,
            dynamic_minimum=account.account_kind == "revolving",
            max_months=self.parameters.max_simulation_months,
            include_schedule=include_schedule,
        )

    def payoff_schedule(self, account: Account, as_of: date) -> List[PaymentBreakdown]:
        """Month-by-month payoff rows at minimum payments (empty if unbounded)."""
        months_since_opened = (
            months_between(account.date_opened, as_of) if account.date_opened else 0
        )
        annual_rate, _ = RateEstimator.estimate(account, months_since_opened)
        return self.payoff_projection(
            account, annual_rate, include_schedule=True
        ).schedule

    @staticmethod
    def calculate_interest_paid_to_date(
        account: Account, months_since_opened: int
    ) -> float:
        """
        Interest implied by payments made since the account opened.

        Total paid so far minus principal reduction, where principal reduction
        is the original amount (or the balance, if unknown) less the balance.
        """
        if account.monthly_payment <= 0 or months_since_opened <= 0:
            return 0.0

        total_paid = account.monthly_payment * months_since_opened
        original_amount = account.credit_limit_or_original_amount
        if original_amount is None:
            original_amount = account.balance
        principal_paid = original_amount - account.balance

        return round(max(0.0, total_paid - principal_paid), 2)

    @staticmethod
    def calculate_settlement(balance: float, settlement_percent: float = 50.0) -> float:
        """Estimated negotiated settlement for a balance."""
        return round(balance * settlement_percent / 100, 2)

    @staticmethod
    def calculate_utilization(account: Account) -> float:
        """Balance as a percentage of the limit or original amount (0 if unknown)."""
        limit = account.credit_limit_or_original_amount
        if not limit:
            return 0.0
        return round(account.balance / limit * 100, 2)

    @staticmethod
    def calculate_risk_tier(annual_rate: float) -> RiskTier:
        """Risk tier from the annual rate alone."""
        if annual_rate >= HIGH_RISK_RATE:
            return "high"
        if annual_rate >= MEDIUM_RISK_RATE:
            return "medium"
        return "low"
