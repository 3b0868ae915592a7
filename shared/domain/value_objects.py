"""
Common Value Objects

- Money: Monetary amount with currency, always held to cents
- TimeWindow: Half-open interval between two instants (start to end)
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from shared.domain.base import ValueObject

CENT = Decimal('0.01')
SUPPORTED_CURRENCIES = ('INR', 'USD', 'EUR')


def to_decimal(value) -> Decimal:
    """Convert ints, floats and strings to Decimal without float artefacts"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    The amount is rounded half-up to cents on construction, so two
    Money objects built from the same inputs always compare equal.
    """
    amount: Decimal
    currency: str = 'INR'

    def __post_init__(self):
        amount = to_decimal(self.amount).quantize(CENT, rounding=ROUND_HALF_UP)
        if amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")
        object.__setattr__(self, 'amount', amount)

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def to_dict(self) -> dict:
        return {'amount': str(self.amount), 'currency': self.currency}

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class TimeWindow(ValueObject):
    """
    Time window value object

    Covers [start, end). Both ends must be of the same kind (both aware
    or both naive) and start must be strictly before end.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Window start ({self.start}) must be before end ({self.end})")

    def overlaps_with(self, other: 'TimeWindow') -> bool:
        """
        Adjacent windows do not overlap: a window ending at 11:00 and
        one starting at 11:00 are both allowed.
        """
        if not isinstance(other, TimeWindow):
            raise TypeError("Can only check overlap with another TimeWindow")
        return self.start < other.end and self.end > other.start

    def has_ended(self, now: datetime) -> bool:
        return now > self.end

    @property
    def duration_hours(self) -> Decimal:
        """Exact length in hours, (end - start) / 3600 seconds"""
        delta = self.end - self.start
        seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(1_000_000)
        return seconds / Decimal(3600)

    def to_dict(self) -> dict:
        return {'start': self.start.isoformat(), 'end': self.end.isoformat()}

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"TimeWindow({self.start!r}, {self.end!r})"
