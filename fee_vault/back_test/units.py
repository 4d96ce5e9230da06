from decimal import Decimal, ROUND_DOWN


def to_base_units(amount: float, decimals: int) -> int:
    # go through the decimal string so 0.1 stays 0.1
    scaled = Decimal(str(amount)) * (Decimal(10) ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_base_units(amount: int, decimals: int) -> float:
    return float(Decimal(amount) / (Decimal(10) ** decimals))
