"""Error types raised by the syndication engine."""

from typing import Iterable, List


class SyndicationError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(SyndicationError, ValueError):
    """Deal assumptions violate one or more input constraints.

    All violations are collected before raising so a caller can render a
    complete validation report instead of fixing one field at a time.
    """

    def __init__(self, violations: Iterable[str]):
        self.violations: List[str] = list(violations)
        if len(self.violations) == 1:
            message = f"Invalid deal assumptions: {self.violations[0]}"
        else:
            details = "\n".join(f"  - {v}" for v in self.violations)
            message = f"Invalid deal assumptions ({len(self.violations)} violations):\n{details}"
        super().__init__(message)


class UndefinedMetricError(SyndicationError):
    """A return metric has no value (e.g. IRR of a same-sign cash flow stream).

    Callers must treat this as "no value", never as 0%.
    """


class ReconciliationError(SyndicationError):
    """The distribution ledger is not self-consistent.

    Raised when cash is left unallocated after the residual tier or when a
    period allocates more cash than it had. Indicates a defect in tier
    configuration or solver logic, not a user input problem.
    """

    def __init__(self, message: str, year: int | None = None, difference: float = 0.0):
        self.year = year
        self.difference = difference
        super().__init__(message)
