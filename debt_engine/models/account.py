"""
Pydantic models for credit accounts and client records.

This module defines the input records consumed by the engine (accounts and the
client they belong to) and the per-account analysis result. All models are
frozen: derived values are computed once and never mutated afterwards.
"""

from datetime import date
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidAccountError, InvalidClientError

AccountKind = Literal["revolving", "installment", "auto", "mortgage"]
RiskTier = Literal["low", "medium", "high"]
RateSource = Literal["stated", "payment_history", "issuer_table", "kind_default"]

# Tagged marker for amortizations that never reach a zero balance
UNBOUNDED = "unbounded"
Unbounded = Literal["unbounded"]

SECURED_KINDS = frozenset({"auto", "mortgage"})


def _error_messages(exc: ValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}")
    return messages


class Account(BaseModel):
    """A single credit account as reported for a client."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    creditor: str = Field(..., min_length=1, description="Creditor name")
    account_kind: AccountKind = Field(..., description="Kind of credit account")
    balance: float = Field(
        ..., ge=0, strict=True, allow_inf_nan=False, description="Current balance owed"
    )
    credit_limit_or_original_amount: Optional[float] = Field(
        default=None,
        ge=0,
        strict=True,
        allow_inf_nan=False,
        description="Credit limit (revolving) or original loan amount (installment)",
    )
    monthly_payment: float = Field(
        ...,
        ge=0,
        strict=True,
        allow_inf_nan=False,
        description="Current monthly payment",
    )
    date_opened: Optional[date] = Field(
        default=None, description="Date the account was opened"
    )
    stated_annual_rate: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        strict=True,
        allow_inf_nan=False,
        description="Stated APR in percent; authoritative when present",
    )
    payment_history_text: str = Field(
        default="", description="Free-text payment history (advisory only)"
    )

    @property
    def is_active(self) -> bool:
        """Whether the account still carries a balance."""
        return self.balance > 0

    @property
    def is_secured(self) -> bool:
        """Auto loans and mortgages are secured debt."""
        return self.account_kind in SECURED_KINDS

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Account":
        """
        Build an account from an untyped record, rejecting malformed input.

        Args:
            record: Mapping of account fields

        Returns:
            Validated Account

        Raises:
            InvalidAccountError: If required fields are missing or money values
                are non-numeric or negative
        """
        creditor = record.get("creditor") if isinstance(record, Mapping) else None
        try:
            return cls.model_validate(record)
        except ValidationError as e:
            errors = _error_messages(e)
            raise InvalidAccountError(
                f"Invalid account record for {creditor or 'unknown creditor'}: "
                + "; ".join(errors),
                creditor=creditor,
                errors=errors,
            ) from e


class AnalyzedAccount(Account):
    """An account together with its derived rate, payoff and settlement figures."""

    months_since_opened: int = Field(..., ge=0, description="Whole months since opening")
    estimated_annual_rate: float = Field(
        ..., ge=0, description="Stated or best-effort estimated APR in percent"
    )
    rate_source: RateSource = Field(
        ..., description="How the annual rate was obtained"
    )
    interest_paid_to_date: float = Field(
        ..., ge=0, description="Interest implied by payments made so far"
    )
    remaining_interest_at_minimum: Union[float, Unbounded] = Field(
        ..., description="Interest still to pay at minimum payments, or 'unbounded'"
    )
    months_to_payoff_at_minimum: Union[int, Unbounded] = Field(
        ..., description="Months to payoff at minimum payments, or 'unbounded'"
    )
    settlement_estimate: float = Field(..., ge=0, description="Estimated settlement")
    savings_if_settled: float = Field(
        ..., description="Balance forgiven if settled at the estimate"
    )
    utilization_percent: float = Field(
        ..., ge=0, description="Balance as a percentage of limit (0 if unknown)"
    )
    risk_tier: RiskTier = Field(..., description="Tier derived from the annual rate")

    @property
    def payoff_converges(self) -> bool:
        """Whether minimum payments eventually clear the balance."""
        return self.months_to_payoff_at_minimum != UNBOUNDED


class ClientRecord(BaseModel):
    """A client and the accounts on their credit report."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default="Client", description="Client display name")
    credit_score: int = Field(..., ge=300, le=850, description="Current credit score")
    monthly_income: Optional[float] = Field(
        default=None, ge=0, allow_inf_nan=False, description="Gross monthly income"
    )
    accounts: List[Account] = Field(
        default_factory=list, description="Accounts on the credit report"
    )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ClientRecord":
        """
        Build a client record from untyped input.

        Account entries are validated one by one so the failing creditor is
        reported with an InvalidAccountError.

        Raises:
            InvalidAccountError: If any account is malformed
            InvalidClientError: If the client-level fields are malformed
        """
        if not isinstance(record, Mapping):
            raise InvalidClientError("Client record must be a mapping")

        raw_accounts = record.get("accounts", [])
        if not isinstance(raw_accounts, list):
            raise InvalidClientError("accounts must be a list")
        accounts = [
            account if isinstance(account, Account) else Account.from_record(account)
            for account in raw_accounts
        ]

        data: Dict[str, Any] = {k: v for k, v in record.items() if k != "accounts"}
        data["accounts"] = accounts
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors = _error_messages(e)
            raise InvalidClientError(
                "Invalid client record: " + "; ".join(errors), errors=errors
            ) from e
