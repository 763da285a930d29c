"""
Analysis service for debt portfolios.

This service is the library entry point used by the web layer. It runs the
account analyzer over every account, folds the results into portfolio metrics
and a score projection, and compares payoff strategies from those totals.
"""

import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from debt_engine.config import Settings, get_global_settings
from debt_engine.models.account import AnalyzedAccount, ClientRecord
from debt_engine.models.account_analyzer import AccountAnalyzer
from debt_engine.models.exceptions import DebtEngineError, InvalidClientError
from debt_engine.models.parameters import EngineParameters
from debt_engine.models.portfolio import (
    PortfolioAggregator,
    PortfolioMetrics,
    ScoreProjection,
)
from debt_engine.models.scenarios import DebtProfile, ScenarioComparator, ScenarioReport

logger = logging.getLogger(__name__)


class ClientAnalysis(BaseModel):
    """Per-account analysis with portfolio metrics and score projection."""

    model_config = ConfigDict(frozen=True)

    client_name: str = Field(..., description="Client display name")
    as_of: date = Field(..., description="Date the analysis is evaluated at")
    accounts: List[AnalyzedAccount] = Field(..., description="Analyzed accounts")
    metrics: PortfolioMetrics = Field(..., description="Portfolio metrics")
    score_projection: ScoreProjection = Field(
        ..., description="Illustrative credit score projection"
    )
    income_estimated: bool = Field(
        default=False, description="Whether monthly income came from the configured estimate"
    )


class FullAnalysis(BaseModel):
    """Client analysis together with the strategy comparison built from it."""

    model_config = ConfigDict(frozen=True)

    analysis: ClientAnalysis
    scenarios: ScenarioReport


class DebtAnalysisService:
    """Service for running debt portfolio analyses."""

    def __init__(
        self,
        parameters: Optional[EngineParameters] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the analysis service.

        Args:
            parameters: Engine parameters; built from settings when omitted
            settings: Engine settings; the global settings when omitted
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings or get_global_settings()
        self.parameters = parameters or EngineParameters.from_settings(self.settings)
        self.analyzer = AccountAnalyzer(self.parameters)
        self.aggregator = PortfolioAggregator(self.parameters)
        self.comparator = ScenarioComparator(self.parameters)

    def analyze_client(
        self,
        client: Union[ClientRecord, Mapping[str, Any]],
        as_of: date,
        use_estimated_income: bool = False,
    ) -> ClientAnalysis:
        """Analyze every account of a client and aggregate the portfolio.

        Args:
            client: Client record, typed or untyped
            as_of: Date the analysis is evaluated at
            use_estimated_income: Fall back to DEFAULT_MONTHLY_INCOME when the
                client has no income on record

        Returns:
            ClientAnalysis for the client

        Raises:
            InvalidAccountError: If an account record is malformed
            InvalidClientError: If the client record is malformed, or an
                estimated income is requested but none is configured
        """
        try:
            record = (
                client
                if isinstance(client, ClientRecord)
                else ClientRecord.from_record(client)
            )
            self.logger.info(
                f"Starting analysis for {record.name} "
                f"({len(record.accounts)} accounts, as of {as_of.isoformat()})"
            )

            monthly_income, income_estimated = self._resolve_income(
                record, use_estimated_income
            )

            accounts = self.analyzer.analyze_accounts(record.accounts, as_of)
            metrics = self.aggregator.aggregate(
                accounts,
                credit_score=record.credit_score,
                monthly_income=monthly_income,
            )
            projection = self.aggregator.project_credit_score(record.credit_score)

            self.logger.info(
                f"Completed analysis for {record.name}: total debt {metrics.total_debt:.2f}"
            )
            return ClientAnalysis(
                client_name=record.name,
                as_of=as_of,
                accounts=accounts,
                metrics=metrics,
                score_projection=projection,
                income_estimated=income_estimated,
            )

        except DebtEngineError as e:
            self.logger.error(f"Client analysis failed: {str(e)}")
            raise

    def compare_scenarios(self, profile: DebtProfile) -> ScenarioReport:
        """Compare payoff strategies for portfolio totals."""
        return self.comparator.compare(profile)

    def run_full_analysis(
        self,
        client: Union[ClientRecord, Mapping[str, Any]],
        as_of: date,
        use_estimated_income: bool = False,
    ) -> FullAnalysis:
        """Analyze a client and compare strategies from the resulting metrics.

        The aggregate monthly payment of the active accounts is carried into
        the current-path projection.
        """
        analysis = self.analyze_client(client, as_of, use_estimated_income)
        profile = DebtProfile.from_metrics(analysis.metrics)
        return FullAnalysis(analysis=analysis, scenarios=self.compare_scenarios(profile))

    def _resolve_income(
        self, record: ClientRecord, use_estimated_income: bool
    ) -> Tuple[Optional[float], bool]:
        if record.monthly_income is not None or not use_estimated_income:
            return record.monthly_income, False

        estimate = self.settings.default_monthly_income
        if estimate is None:
            raise InvalidClientError(
                "Estimated income requested but DEFAULT_MONTHLY_INCOME is not configured"
            )
        self.logger.warning(
            f"No income on record for {record.name}; using configured estimate {estimate:.2f}"
        )
        return estimate, True
