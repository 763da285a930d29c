"""Debt portfolio modeling engine."""

from debt_engine.services.analysis_service import DebtAnalysisService

__all__ = ["DebtAnalysisService"]
