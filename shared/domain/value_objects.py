"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- InstantRange: Represents a half-open range of absolute instants
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = ('NGN', 'USD', 'EUR', 'GBP')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    """
    amount: Decimal
    currency: str = 'NGN'

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class InstantRange(ValueObject):
    """
    Range of timezone-aware instants, start inclusive and end exclusive.

    Used for slot windows and for the daily booking window of a vendor.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("InstantRange requires timezone-aware datetimes")
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})")

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"
