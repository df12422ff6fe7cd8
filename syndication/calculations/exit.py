"""Exit valuation: sale price from forward NOI and the exit cap rate."""

import logging
from dataclasses import dataclass

from ..errors import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiquidationEvent:
    """Sale of the property at the end of the hold."""

    year: int
    forward_noi: float  # NOI of the year after the sale
    exit_cap_rate: float
    sale_price: float
    disposition_fee: float
    loan_payoff: float
    net_sale_proceeds: float

    @property
    def is_underwater(self) -> bool:
        return self.net_sale_proceeds < 0


def value_exit(
    year: int,
    forward_noi: float,
    exit_cap_rate: float,
    disposition_fee_rate: float,
    loan_balance: float,
) -> LiquidationEvent:
    """Value the sale at the end of the hold.

    Sale price = forward NOI / exit cap rate
    Net proceeds = sale price - disposition fee - loan payoff

    Net proceeds may be negative when the loan balance exceeds what the
    sale clears; that is reported, not clamped.

    Args:
        year: Hold year in which the sale closes.
        forward_noi: Projected NOI for the year after the sale.
        exit_cap_rate: Exit cap rate as decimal (e.g., 0.06).
        disposition_fee_rate: Disposition fee as a share of sale price.
        loan_balance: Outstanding loan balance repaid at closing.

    Returns:
        LiquidationEvent.

    Raises:
        InvalidInputError: exit_cap_rate <= 0.
    """
    if exit_cap_rate <= 0:
        raise InvalidInputError([f"exit cap rate must be > 0, got {exit_cap_rate:.2%}"])

    sale_price = forward_noi / exit_cap_rate
    disposition_fee = sale_price * disposition_fee_rate
    net_sale_proceeds = sale_price - disposition_fee - loan_balance

    if net_sale_proceeds < 0:
        logger.warning(
            "Underwater exit at %.2f%% cap: sale $%s does not cover loan payoff $%s",
            exit_cap_rate * 100, f"{sale_price:,.0f}", f"{loan_balance:,.0f}",
        )

    return LiquidationEvent(
        year=year,
        forward_noi=forward_noi,
        exit_cap_rate=exit_cap_rate,
        sale_price=sale_price,
        disposition_fee=disposition_fee,
        loan_payoff=loan_balance,
        net_sale_proceeds=net_sale_proceeds,
    )
