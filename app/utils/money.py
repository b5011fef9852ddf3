"""Money and weight formatting for Indian-locale documents"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any

RUPEE = "₹"
EM_DASH = "—"
TWO_PLACES = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce DB numerics, floats, strings and None to Decimal (None -> 0)."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def group_indian(digits: str) -> str:
    """
    Group an integer digit string the Indian way: last three digits, then
    pairs. 1234567 -> 12,34,567
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(value: Any) -> str:
    """Indian grouping with exactly two decimals, no currency symbol."""
    amount = to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer, _, fraction = f"{abs(amount):.2f}".partition(".")
    return f"{sign}{group_indian(integer)}.{fraction}"


def format_inr(value: Any) -> str:
    """
    Format a rupee amount.

    >>> format_inr(123456.5)
    '₹1,23,456.50'
    """
    text = format_amount(value)
    if text.startswith("-"):
        return f"-{RUPEE}{text[1:]}"
    return f"{RUPEE}{text}"


def format_weight(value: Any) -> str:
    """Weight in kg with up to two decimals, or an em dash when not positive."""
    weight = to_decimal(value)
    if weight <= 0:
        return EM_DASH
    weight = weight.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    integer, _, fraction = f"{weight:.2f}".partition(".")
    fraction = fraction.rstrip("0")
    grouped = group_indian(integer)
    return f"{grouped}.{fraction}" if fraction else grouped
