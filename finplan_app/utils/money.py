"""Currency rounding helpers."""

from decimal import ROUND_HALF_UP, Decimal


def round_currency(value: float, places: int = 2) -> float:
    """
    Round a monetary amount half-up to a fixed number of decimal places.

    Rounding goes through the shortest decimal representation of the float,
    so 0.125 rounds to 0.13 rather than to the binary neighbour 0.12.

    Args:
        value: Amount to round
        places: Decimal places to keep

    Returns:
        Rounded amount as a float
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
