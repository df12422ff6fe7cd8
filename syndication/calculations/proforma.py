"""Pro forma operating projection: rent, vacancy, expenses and NOI by year."""

from dataclasses import dataclass
from typing import List

from ..models.deal import DealAssumptions


@dataclass(frozen=True)
class OperatingYear:
    """One year of property operations.

    For NOI-shortcut projections only ``noi`` is populated; the income and
    expense lines are zero.
    """

    year: int
    gross_potential_rent: float
    vacancy_loss: float
    other_income: float
    effective_gross_income: float
    operating_expenses: float
    noi: float

    @property
    def operating_margin(self) -> float:
        """NOI as a share of EGI (0 when there is no EGI)."""
        if self.effective_gross_income <= 0:
            return 0.0
        return self.noi / self.effective_gross_income


def escalate(base_value: float, annual_rate: float, years_elapsed: int) -> float:
    """Grow a year-1 value by ``years_elapsed`` years of annual compounding.

    Example:
        >>> escalate(100_000, 0.03, 2)
        106090.0
    """
    return base_value * (1 + annual_rate) ** years_elapsed


def calculate_egi(gross_potential_rent: float, vacancy_rate: float, other_income: float) -> float:
    """Effective Gross Income.

    EGI = GPR x (1 - vacancy rate) + other income
    """
    return gross_potential_rent * (1 - vacancy_rate) + other_income


def project_operations(assumptions: DealAssumptions, years: int) -> List[OperatingYear]:
    """Project property operations for ``years`` years.

    Year-1 operating expenses are set from the expense ratio; afterwards
    income grows at the rent growth rate and expenses at the expense growth
    rate, so the margin drifts when the two rates differ.

    When ``assumptions.year1_noi`` is set the rent/expense build-up is
    skipped and NOI grows flat at ``noi_growth_rate``.

    Args:
        assumptions: Deal assumptions.
        years: Number of years to project. Ask for hold + 1 so the exit
            can be valued on forward NOI.

    Returns:
        One OperatingYear per year, year 1 first.
    """
    if assumptions.year1_noi is not None:
        return project_noi(assumptions.year1_noi, assumptions.noi_growth_rate, years)

    year1_egi = calculate_egi(
        assumptions.gross_potential_rent,
        assumptions.vacancy_rate,
        assumptions.other_income,
    )
    year1_opex = year1_egi * assumptions.operating_expense_ratio

    projection = []
    for year in range(1, years + 1):
        elapsed = year - 1
        gpr = escalate(assumptions.gross_potential_rent, assumptions.rent_growth_rate, elapsed)
        other = escalate(assumptions.other_income, assumptions.rent_growth_rate, elapsed)
        vacancy_loss = gpr * assumptions.vacancy_rate
        egi = gpr - vacancy_loss + other
        opex = escalate(year1_opex, assumptions.expense_growth_rate, elapsed)

        projection.append(OperatingYear(
            year=year,
            gross_potential_rent=gpr,
            vacancy_loss=vacancy_loss,
            other_income=other,
            effective_gross_income=egi,
            operating_expenses=opex,
            noi=egi - opex,
        ))

    return projection


def project_noi(year1_noi: float, growth_rate: float, years: int) -> List[OperatingYear]:
    """Project NOI directly: NOI_t = year-1 NOI x (1 + g)^(t-1)."""
    return [
        OperatingYear(
            year=year,
            gross_potential_rent=0.0,
            vacancy_loss=0.0,
            other_income=0.0,
            effective_gross_income=0.0,
            operating_expenses=0.0,
            noi=escalate(year1_noi, growth_rate, year - 1),
        )
        for year in range(1, years + 1)
    ]
