"""Data models and calculators for debt portfolio analysis."""

from .account import (
    UNBOUNDED,
    Account,
    AnalyzedAccount,
    ClientRecord,
)
from .account_analyzer import AccountAnalyzer, months_between
from .amortization import MinimumPaymentCalculator, PaymentBreakdown, PayoffProjection
from .exceptions import DebtEngineError, InvalidAccountError, InvalidClientError
from .parameters import EngineParameters
from .portfolio import PortfolioAggregator, PortfolioMetrics, ScoreBand, ScoreProjection
from .rate_estimation import RateEstimator
from .scenarios import (
    DebtProfile,
    Recommendation,
    ScenarioComparator,
    ScenarioComparison,
    ScenarioReport,
    ScenarioResult,
)

__all__ = [
    "UNBOUNDED",
    "Account",
    "AnalyzedAccount",
    "ClientRecord",
    "AccountAnalyzer",
    "months_between",
    "MinimumPaymentCalculator",
    "PaymentBreakdown",
    "PayoffProjection",
    "DebtEngineError",
    "InvalidAccountError",
    "InvalidClientError",
    "EngineParameters",
    "PortfolioAggregator",
    "PortfolioMetrics",
    "ScoreBand",
    "ScoreProjection",
    "RateEstimator",
    "DebtProfile",
    "Recommendation",
    "ScenarioComparator",
    "ScenarioComparison",
    "ScenarioReport",
    "ScenarioResult",
]
