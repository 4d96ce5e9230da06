from enum import Enum

from fee_vault.constants import MAX_UINT256
from fee_vault.errors import InvalidAmount


class Rounding(Enum):
    DOWN = "down"
    UP = "up"


def mul_div_down(x: int, y: int, denominator: int) -> int:
    return x * y // denominator


def mul_div_up(x: int, y: int, denominator: int) -> int:
    return (x * y + denominator - 1) // denominator


def mul_div(x: int, y: int, denominator: int, rounding: Rounding) -> int:
    if rounding is Rounding.UP:
        return mul_div_up(x, y, denominator)
    return mul_div_down(x, y, denominator)


def check_amount(value, label: str = "amount") -> int:
    # bool is an int subclass but never a valid amount
    if not isinstance(value, int) or isinstance(value, bool) or value < 0 or value > MAX_UINT256:
        raise InvalidAmount(label, value)
    return value
