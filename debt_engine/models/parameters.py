"""Per-call engine parameters."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from debt_engine.config import Settings


class EngineParameters(BaseModel):
    """Tunable assumptions shared by the analyzer, aggregator and comparator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    settlement_percent: float = Field(
        default=50.0, gt=0, le=100, description="Settlement as a percent of balance"
    )
    program_fee_percent: float = Field(
        default=25.0, ge=0, le=100, description="Program fee as a percent of enrolled debt"
    )
    max_simulation_months: int = Field(
        default=360, ge=1, le=360, description="Hard cap on amortization iterations"
    )
    include_secured_in_settlement: bool = Field(
        default=False,
        description="Whether auto/mortgage accounts count toward settlement totals",
    )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "EngineParameters":
        """Build parameters from environment-backed settings."""
        return cls(
            settlement_percent=settings.settlement_percent,
            program_fee_percent=settings.program_fee_percent,
            max_simulation_months=settings.max_simulation_months,
        )
