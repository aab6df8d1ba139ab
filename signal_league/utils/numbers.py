from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int) -> float:
    """Round like Postgres ``ROUND(numeric, n)``: halves go away from zero.

    The builtin ``round`` rounds halves to even and works on the binary
    value, so ``round(4.25, 1)`` gives 4.2 and ``round(2.675, 2)`` 2.67.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
