"""
Decimal arithmetic used by the resolver.
"""

from decimal import Context, Decimal, ROUND_HALF_UP

from apps.rates.domain.models import RateEntry


# 16 significant digits, round half up (decimal64 equivalent).
REVERSAL_CONTEXT = Context(prec=16, rounding=ROUND_HALF_UP)

ONE = Decimal(1)


def invert(entry: RateEntry | None) -> RateEntry:
    """
    Reverse a base-relative entry: base->X becomes X->base with factor 1/factor.
    """
    if entry is None:
        raise ValueError("Rate None is not reversible.")
    return RateEntry(
        base_currency=entry.currency,
        currency=entry.base_currency,
        factor=REVERSAL_CONTEXT.divide(ONE, entry.factor),
    )


def multiply(left: Decimal, right: Decimal) -> Decimal:
    """Exact product; the precision grows to hold every digit of both operands."""
    digits = len(left.as_tuple().digits) + len(right.as_tuple().digits)
    return Context(prec=digits).multiply(left, right)
