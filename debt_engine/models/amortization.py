"""
Amortization calculations for consumer debt.

This module provides the month-by-month payoff simulation shared by the account
analyzer and the scenario comparator, including the dynamic minimum-payment
formula used by revolving accounts, plus the standard level-payment formula for
installment loans.

A simulation that can never clear its balance is reported as an "unbounded"
projection rather than an exception or a floating-point infinity.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .account import UNBOUNDED, Unbounded

# Typical card-issuer minimum: interest + $25, 2% of balance, or $25
REVOLVING_MINIMUM_FLOOR = 25.0
REVOLVING_MINIMUM_PERCENT = 0.02

MAX_SIMULATION_MONTHS = 360


class PaymentBreakdown(BaseModel):
    """Breakdown of a single monthly payment."""

    model_config = ConfigDict(frozen=True)

    payment_number: int = Field(..., ge=1, description="Payment number (1-based)")
    beginning_balance: float = Field(
        ..., ge=0, description="Balance at beginning of period"
    )
    payment_amount: float = Field(..., ge=0, description="Total payment amount")
    interest_payment: float = Field(
        ..., ge=0, description="Interest portion of payment"
    )
    principal_payment: float = Field(
        ..., ge=0, description="Principal portion of payment"
    )
    ending_balance: float = Field(..., ge=0, description="Balance at end of period")
    cumulative_interest: float = Field(
        ..., ge=0, description="Cumulative interest paid"
    )


class PayoffProjection(BaseModel):
    """Outcome of a capped payoff simulation."""

    model_config = ConfigDict(frozen=True)

    status: Literal["converged", "unbounded"] = Field(
        ..., description="Whether the balance reaches zero within the cap"
    )
    months: Optional[int] = Field(
        default=None, ge=0, description="Months to payoff (converged only)"
    )
    total_interest: Optional[float] = Field(
        default=None, ge=0, description="Interest paid until payoff (converged only)"
    )
    total_paid: Optional[float] = Field(
        default=None, ge=0, description="Principal plus interest (converged only)"
    )
    reason: Optional[Literal["payment_below_interest", "max_months_reached"]] = Field(
        default=None, description="Why the simulation did not converge"
    )
    schedule: List[PaymentBreakdown] = Field(
        default_factory=list, description="Month-by-month rows, when requested"
    )

    @property
    def converged(self) -> bool:
        return self.status == "converged"

    @property
    def months_or_unbounded(self) -> Union[int, Unbounded]:
        return self.months if self.converged else UNBOUNDED

    @property
    def interest_or_unbounded(self) -> Union[float, Unbounded]:
        return self.total_interest if self.converged else UNBOUNDED


class MinimumPaymentCalculator:
    """Calculator for minimum-payment payoff simulations and loan payments."""

    @staticmethod
    def calculate_monthly_rate(annual_rate_percent: float) -> float:
        """
        Convert an annual percentage rate to a monthly decimal rate.

        Args:
            annual_rate_percent: Annual rate in percent (e.g., 21.99)

        Returns:
            Monthly rate as a decimal
        """
        return annual_rate_percent / 100 / 12

    @staticmethod
    def revolving_minimum_payment(balance: float, interest_charge: float) -> float:
        """
        Minimum payment a card issuer would require this month.

        Args:
            balance: Balance at the start of the month
            interest_charge: Interest accrued this month

        Returns:
            The larger of interest + $25, 2% of balance, and $25
        """
        return max(
            interest_charge + REVOLVING_MINIMUM_FLOOR,
            balance * REVOLVING_MINIMUM_PERCENT,
            REVOLVING_MINIMUM_FLOOR,
        )

    @staticmethod
    def simulate_payoff(
        balance: float,
        annual_rate_percent: float,
        monthly_payment: float,
        dynamic_minimum: bool = False,
        max_months: int = MAX_SIMULATION_MONTHS,
        include_schedule: bool = False,
    ) -> PayoffProjection:
        """
        Simulate month-by-month payoff of a balance.

        With ``dynamic_minimum`` the payment is recomputed every month from the
        revolving minimum-payment formula, limited to ``monthly_payment`` (the
        client pays the minimum due, or what they currently pay if that is
        less); otherwise ``monthly_payment`` is held fixed. The loop stops as
        soon as a payment fails to cover the month's interest, and never runs
        more than ``max_months`` iterations.

        Args:
            balance: Starting balance
            annual_rate_percent: Annual rate in percent
            monthly_payment: Fixed monthly payment, or the cap when dynamic
            dynamic_minimum: Recompute the payment each month
            max_months: Iteration cap
            include_schedule: Also return each month's breakdown

        Returns:
            PayoffProjection, converged or unbounded
        """
        if balance <= 0:
            return PayoffProjection(
                status="converged", months=0, total_interest=0.0, total_paid=0.0
            )

        monthly_rate = MinimumPaymentCalculator.calculate_monthly_rate(
            annual_rate_percent
        )
        starting_balance = balance
        payment = monthly_payment
        total_interest = 0.0
        months = 0
        schedule: List[PaymentBreakdown] = []

        while balance > 0 and months < max_months:
            interest_charge = balance * monthly_rate

            if dynamic_minimum:
                payment = min(
                    monthly_payment,
                    MinimumPaymentCalculator.revolving_minimum_payment(
                        balance, interest_charge
                    ),
                )

            principal_payment = payment - interest_charge
            if principal_payment <= 0:
                return PayoffProjection(
                    status="unbounded", reason="payment_below_interest"
                )

            total_interest += interest_charge
            months += 1

            if include_schedule:
                applied_principal = min(principal_payment, balance)
                schedule.append(
                    PaymentBreakdown(
                        payment_number=months,
                        beginning_balance=round(balance, 2),
                        payment_amount=round(interest_charge + applied_principal, 2),
                        interest_payment=round(interest_charge, 2),
                        principal_payment=round(applied_principal, 2),
                        ending_balance=round(max(0.0, balance - principal_payment), 2),
                        cumulative_interest=round(total_interest, 2),
                    )
                )

            balance -= principal_payment

        if balance > 0:
            return PayoffProjection(status="unbounded", reason="max_months_reached")

        return PayoffProjection(
            status="converged",
            months=months,
            total_interest=round(total_interest, 2),
            total_paid=round(starting_balance + total_interest, 2),
            schedule=schedule,
        )

    @staticmethod
    def calculate_installment_payment(
        principal: float, annual_rate_percent: float, term_months: int
    ) -> float:
        """
        Calculate the level monthly payment of a fixed-rate installment loan.

        Args:
            principal: Loan principal amount
            annual_rate_percent: Annual rate in percent
            term_months: Number of monthly payments

        Returns:
            Monthly payment amount
        """
        if principal <= 0 or term_months <= 0:
            return 0.0

        monthly_rate = MinimumPaymentCalculator.calculate_monthly_rate(
            annual_rate_percent
        )
        if monthly_rate <= 0:
            return round(principal / term_months, 2)

        # Standard amortizing loan payment formula
        growth = (1 + monthly_rate) ** term_months
        payment = principal * (monthly_rate * growth) / (growth - 1)

        # Round to nearest cent
        return round(payment, 2)
