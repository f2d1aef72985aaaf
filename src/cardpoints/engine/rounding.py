from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal

Number = Decimal | float | int

_HALF = Decimal("0.5")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps the shortest repr, so 1.6 stays 1.6 instead of 1.600000000000000088...
    return Decimal(str(value))


def round_amount(amount: Number, strategy: str, block: Number = 5) -> Decimal:
    """Round a spend amount before any multiplier math."""
    value = to_decimal(amount)

    if strategy == "floor":
        return value.to_integral_value(rounding=ROUND_FLOOR)
    if strategy == "ceiling":
        return value.to_integral_value(rounding=ROUND_CEILING)
    if strategy == "nearest":
        return (value + _HALF).to_integral_value(rounding=ROUND_FLOOR)
    if strategy == "floor-to-block":
        size = to_decimal(block)
        return (value / size).to_integral_value(rounding=ROUND_FLOOR) * size
    return value


def round_points(points: Number, strategy: str) -> Decimal:
    """Round computed points; halves go up toward positive infinity for ``nearest``."""
    value = to_decimal(points)

    if strategy == "ceiling":
        return value.to_integral_value(rounding=ROUND_CEILING)
    if strategy == "nearest":
        return (value + _HALF).to_integral_value(rounding=ROUND_FLOOR)
    return value.to_integral_value(rounding=ROUND_FLOOR)


def block_points(amount: Number, block_size: Number, multiplier: Number, strategy: str) -> Decimal:
    return round_points((to_decimal(amount) / to_decimal(block_size)) * to_decimal(multiplier), strategy)
