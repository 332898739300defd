"""
Money helpers.

All payouts are whole PKR. Rounding is half-up, so 1.5 becomes 2.
"""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal


WHOLE_PKR = Decimal("1")


def round_pkr(amount: Decimal | int) -> int:
    """
    Round an amount to whole PKR, half away from zero.

    Args:
        amount: Amount in PKR

    Returns:
        Rounded integer amount

    Example:
        >>> round_pkr(Decimal("1.5"))
        2
        >>> round_pkr(Decimal("2.5"))
        3
    """
    return int(Decimal(amount).quantize(WHOLE_PKR, rounding=ROUND_HALF_UP))


def floor_points(amount: Decimal | int) -> int:
    """Points awarded for a reward (floor of the PKR amount)."""
    return int(Decimal(amount).quantize(WHOLE_PKR, rounding=ROUND_FLOOR))
