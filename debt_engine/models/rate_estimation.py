"""
Interest rate heuristics.

Rates produced here are best-effort estimates for accounts that do not report
an APR. They are simple documented approximations, not quotes: a stated rate on
the account always wins, and everything else falls back to fixed defaults.
"""

import logging
from typing import Optional, Sequence, Tuple

from .account import Account, RateSource

logger = logging.getLogger(__name__)

# Known issuer APRs, matched case-insensitively as substrings of the creditor.
# First match wins.
ISSUER_RATE_TABLE: Tuple[Tuple[Tuple[str, ...], float], ...] = (
    (("amex",), 18.99),
    (("discover",), 20.24),
    (("chase", "jpmcb"), 19.49),
    (("capital one",), 24.99),
    (("citi",), 18.74),
)

DEFAULT_REVOLVING_RATE = 21.99
DEFAULT_AUTO_RATE = 6.5
DEFAULT_INSTALLMENT_RATE = 12.0
DEFAULT_OTHER_RATE = 15.0

# (minimum credit score, rate) pairs, highest threshold first
CURRENT_PATH_RATE_TIERS: Tuple[Tuple[int, float], ...] = (
    (750, 15.0),
    (700, 18.0),
    (650, 22.0),
    (600, 25.0),
)
CURRENT_PATH_FALLBACK_RATE = 28.0

LOAN_RATE_TIERS: Tuple[Tuple[int, float], ...] = (
    (750, 7.0),
    (700, 10.0),
    (650, 14.0),
)
LOAN_FALLBACK_RATE = 18.0


def lookup_tier(value: float, tiers: Sequence[Tuple[float, float]], default: float) -> float:
    """Return the value paired with the first threshold that ``value`` meets."""
    for threshold, result in tiers:
        if value >= threshold:
            return result
    return default


def issuer_rate(creditor: str) -> Optional[float]:
    """Look up a known issuer's typical APR, if the creditor matches one."""
    name = creditor.lower()
    for needles, rate in ISSUER_RATE_TABLE:
        if any(needle in name for needle in needles):
            return rate
    return None


class RateEstimator:
    """Infers an account's annual rate when none is stated."""

    @staticmethod
    def estimate(account: Account, months_since_opened: int) -> Tuple[float, RateSource]:
        """
        Estimate the effective annual rate of an account.

        Installment and auto loans are reverse-engineered from payments made
        against the original amount when both the original amount and the
        elapsed months are known. Revolving accounts use the issuer table.

        Args:
            account: Account to estimate
            months_since_opened: Whole months since the account opened

        Returns:
            Tuple of (annual rate in percent, source of the rate)
        """
        if account.stated_annual_rate is not None:
            return account.stated_annual_rate, "stated"

        kind = account.account_kind

        if kind in ("installment", "auto"):
            implied = RateEstimator._rate_from_payment_history(
                account, months_since_opened
            )
            if implied is not None:
                return implied, "payment_history"
            default = DEFAULT_AUTO_RATE if kind == "auto" else DEFAULT_INSTALLMENT_RATE
            logger.debug(
                f"No usable payment history for {account.creditor}, "
                f"using {kind} default {default}%"
            )
            return default, "kind_default"

        if kind == "revolving":
            rate = issuer_rate(account.creditor)
            if rate is not None:
                return rate, "issuer_table"
            return DEFAULT_REVOLVING_RATE, "kind_default"

        return DEFAULT_OTHER_RATE, "kind_default"

    @staticmethod
    def _rate_from_payment_history(
        account: Account, months_since_opened: int
    ) -> Optional[float]:
        original_amount = account.credit_limit_or_original_amount
        if (
            original_amount is None
            or months_since_opened <= 0
            or account.monthly_payment <= 0
            or account.balance <= 0
        ):
            return None

        total_paid = account.monthly_payment * months_since_opened
        principal_paid = original_amount - account.balance
        interest_paid = total_paid - principal_paid
        if interest_paid <= 0:
            return None

        average_balance = (original_amount + account.balance) / 2
        annual_interest = interest_paid / months_since_opened * 12
        return round(annual_interest / average_balance * 100, 2)
