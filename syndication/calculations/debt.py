"""Acquisition loan amortization on an annual schedule."""

from dataclasses import dataclass
from typing import List

import numpy_financial as npf

from ..errors import InvalidInputError


@dataclass(frozen=True)
class DebtServiceYear:
    """Debt service for a single hold year."""

    year: int
    beginning_balance: float
    interest: float
    principal: float
    ending_balance: float
    is_interest_only: bool = False

    @property
    def debt_service(self) -> float:
        """Total P&I paid this year."""
        return self.interest + self.principal


def calculate_annual_payment(
    balance: float,
    annual_rate: float,
    years: int,
) -> float:
    """Level annual P&I payment that fully amortizes a balance.

    Args:
        balance: Principal to amortize.
        annual_rate: Annual interest rate (e.g., 0.06).
        years: Amortization period in years.

    Returns:
        Annual payment (positive).
    """
    if balance <= 0 or years <= 0:
        return 0.0
    # numpy_financial.pmt returns a negative payment for a positive pv
    return float(-npf.pmt(rate=annual_rate, nper=years, pv=balance, fv=0))


def build_debt_schedule(
    loan_amount: float,
    annual_rate: float,
    amortization_years: int,
    term_years: int,
    hold_years: int,
    interest_only_years: int = 0,
) -> List[DebtServiceYear]:
    """Build the year-by-year debt schedule over the hold period.

    During the interest-only window the balance is unchanged and only
    interest is paid. At the end of the window a level annual payment is
    computed once from the remaining balance over the remaining
    amortization years (amortization_years - interest_only_years).

    The term only bounds the interest-only window. Hold years past the term
    continue on the same payment; refinancing is not modeled.

    A zero loan amount is an all-cash deal and yields all-zero rows.

    Args:
        loan_amount: Acquisition loan principal.
        annual_rate: Annual interest rate (e.g., 0.065).
        amortization_years: Full amortization period in years.
        term_years: Loan term in years.
        hold_years: Number of hold years to schedule.
        interest_only_years: Interest-only years at the start of the loan.

    Returns:
        One DebtServiceYear per hold year.

    Raises:
        InvalidInputError: Negative rate, non-positive amortization, or an
            interest-only period outside the loan term.

    Example:
        >>> schedule = build_debt_schedule(3_750_000, 0.06, 30, 10, 5)
        >>> round(schedule[0].debt_service)
        272435
    """
    errors = []
    if annual_rate < 0:
        errors.append(f"interest rate must be >= 0, got {annual_rate:.2%}")
    if amortization_years <= 0:
        errors.append(f"amortization years must be > 0, got {amortization_years}")
    if interest_only_years < 0 or interest_only_years > term_years:
        errors.append(
            f"interest-only years must be between 0 and the {term_years}-year term, "
            f"got {interest_only_years}"
        )
    if loan_amount < 0:
        errors.append(f"loan amount must be >= 0, got {loan_amount:,.0f}")
    if errors:
        raise InvalidInputError(errors)

    if loan_amount > 0 and interest_only_years >= amortization_years:
        raise InvalidInputError([
            f"interest-only years ({interest_only_years}) must be shorter than "
            f"amortization years ({amortization_years})"
        ])

    schedule: List[DebtServiceYear] = []
    balance = float(loan_amount)
    payment = 0.0

    for year in range(1, hold_years + 1):
        beginning = balance
        interest_only = year <= interest_only_years

        if balance <= 0:
            schedule.append(DebtServiceYear(year, 0.0, 0.0, 0.0, 0.0, interest_only))
            continue

        interest = balance * annual_rate

        if interest_only:
            principal = 0.0
        else:
            if year == interest_only_years + 1:
                # Recast once, at the end of the interest-only window
                payment = calculate_annual_payment(
                    balance, annual_rate, amortization_years - interest_only_years,
                )
            principal = min(payment - interest, balance)

        balance = max(0.0, balance - principal)
        schedule.append(DebtServiceYear(
            year=year,
            beginning_balance=beginning,
            interest=interest,
            principal=principal,
            ending_balance=balance,
            is_interest_only=interest_only,
        ))

    return schedule


def remaining_balance(schedule: List[DebtServiceYear], original_principal: float = 0.0) -> float:
    """Loan balance at the end of the schedule.

    Args:
        schedule: Debt schedule from build_debt_schedule().
        original_principal: Balance to report for an empty schedule.

    Returns:
        Ending balance of the last scheduled year.
    """
    if not schedule:
        return original_principal
    return schedule[-1].ending_balance


def annual_debt_service(schedule: List[DebtServiceYear]) -> List[float]:
    """Debt service per year, in schedule order."""
    return [row.debt_service for row in schedule]


def total_debt_service(schedule: List[DebtServiceYear]) -> float:
    """Sum of interest and principal paid over the schedule."""
    return sum(row.debt_service for row in schedule)
