"""
Pure domain entities (POPOs).
No dependency on Django.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, localcontext
from enum import Enum
from typing import Optional, Tuple, Union


def _check_code(value: str, label: str) -> str:
    if not isinstance(value, str) or len(value) != 3 or not value.isalpha():
        raise ValueError(f"{label} must be a 3-letter currency code, got '{value}'")
    return value.upper()


class RateType(str, Enum):
    HISTORIC = "HISTORIC"


@dataclass(frozen=True)
class RateEntry:
    """1 unit of base_currency = factor units of currency."""

    base_currency: str
    currency: str
    factor: Decimal

    def __post_init__(self):
        object.__setattr__(self, "base_currency", _check_code(self.base_currency, "base_currency"))
        object.__setattr__(self, "currency", _check_code(self.currency, "currency"))
        if not isinstance(self.factor, Decimal):
            raise ValueError(f"factor must be a Decimal, got {type(self.factor).__name__}")
        if not self.factor.is_finite() or self.factor <= 0:
            raise ValueError(f"factor must be positive, got {self.factor}")


@dataclass(frozen=True)
class ConversionRequest:

    base_currency: str
    target_currency: str
    day: Optional[Union[date, datetime]] = None

    def __post_init__(self):
        object.__setattr__(self, "base_currency", _check_code(self.base_currency, "base_currency"))
        object.__setattr__(self, "target_currency", _check_code(self.target_currency, "target_currency"))


@dataclass(frozen=True)
class RateContext:

    provider: str
    rate_type: RateType
    day_key: int
    timestamp: datetime

    @property
    def day(self) -> date:
        return self.timestamp.date()


@dataclass(frozen=True)
class ResolvedRate:

    base_currency: str
    target_currency: str
    factor: Decimal
    context: RateContext
    chain: Tuple["ResolvedRate", ...] = field(default=())

    @property
    def is_derived(self) -> bool:
        return bool(self.chain)

    def convert(self, amount: Decimal) -> Decimal:
        # exact product, and room for its integer part plus six decimal places
        exact_digits = len(amount.as_tuple().digits) + len(self.factor.as_tuple().digits)
        integer_digits = amount.adjusted() + self.factor.adjusted() + 2
        with localcontext() as ctx:
            ctx.prec = max(28, exact_digits, integer_digits + 6)
            return (amount * self.factor).quantize(Decimal("0.000001"))
