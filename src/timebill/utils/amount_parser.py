"""Amount and hour parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money amount string into a Decimal in the major unit.

    Handles various formats:
    - "1234.56"
    - "R$ 1.234,56" / "1.234,56" (comma as decimal separator)
    - "$1,234.56" (comma as thousands separator)
    - "-123.45" and "(123.45)" (negative)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"R\$|[$€£]", "", amount_str).strip()
    amount_str = _normalize_separators(amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")
    return -amount if is_negative else amount


def parse_hours(hours_str: str) -> Decimal:
    """Parse an hour quantity such as "1.5", "1,5" or "2h".

    Raises:
        ValueError: If the value cannot be parsed or is negative
    """
    if not hours_str or not hours_str.strip():
        raise ValueError("Empty hours string")
    cleaned = hours_str.strip().lower().removesuffix("h").strip()
    try:
        hours = Decimal(cleaned.replace(",", "."))
    except InvalidOperation:
        raise ValueError(f"Could not parse hours '{hours_str}'")
    if not hours.is_finite() or hours < 0:
        raise ValueError(f"Hours must be a non-negative number (got '{hours_str}')")
    return hours


def _normalize_separators(value: str) -> str:
    """Turn locale-formatted digits into a plain Decimal literal."""
    if "," in value and "." in value:
        # Whichever separator comes last is the decimal one
        if value.rfind(",") > value.rfind("."):
            return value.replace(".", "").replace(",", ".")
        return value.replace(",", "")
    if "," in value:
        head, _, tail = value.rpartition(",")
        if len(tail) == 3 and head.lstrip("-").isdigit() and len(head.lstrip("-")) <= 3:
            # "1,234" reads as a thousands separator
            return head + tail
        return value.replace(",", ".")
    return value
