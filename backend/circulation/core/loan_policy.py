"""Loan Policy — the configurable numbers behind fines and borrowing limits.

Invariants:
    - daily_fine_rate is a non-negative Decimal (currency units per day)
    - max_active_borrows >= 1, loan_period_days >= 1

Design Decisions:
    - Frozen dataclass injected into the engine at construction, built from
      Settings.loan_policy(); nothing in core hard-codes the rate or the limit
"""

from dataclasses import dataclass
from decimal import Decimal


DEFAULT_DAILY_FINE_RATE = Decimal("5.00")
DEFAULT_MAX_ACTIVE_BORROWS = 5
DEFAULT_LOAN_PERIOD_DAYS = 14


@dataclass(frozen=True)
class LoanPolicy:
    """Fine rate, borrowing ceiling and default loan length."""
    daily_fine_rate: Decimal = DEFAULT_DAILY_FINE_RATE
    max_active_borrows: int = DEFAULT_MAX_ACTIVE_BORROWS
    loan_period_days: int = DEFAULT_LOAN_PERIOD_DAYS

    def __post_init__(self):
        if self.daily_fine_rate < 0:
            raise ValueError("daily_fine_rate must be non-negative")
        if self.max_active_borrows < 1:
            raise ValueError("max_active_borrows must be at least 1")
        if self.loan_period_days < 1:
            raise ValueError("loan_period_days must be at least 1")
