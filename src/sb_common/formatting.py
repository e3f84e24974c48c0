"""Display helpers for spreads, stakes and names.

Stakes and spreads are real numbers (spreads move in half points), so
unlike cents-based ledgers these work on floats.
"""


def format_spread(spread: float) -> str:
    """+3.5 -> '+3.5', -7.0 -> '-7', 0 -> '0'."""
    text = f"{spread:g}"
    return f"+{text}" if spread > 0 else text


def format_amount(amount: float) -> str:
    """25 -> '$25.00', 1234.5 -> '$1,234.50', -12 -> '-$12.00'."""
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def display_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}".strip()
