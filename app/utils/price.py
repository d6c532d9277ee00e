from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOL = "₹"


def format_price(paise: int) -> str:
    """Render an amount in paise for display, e.g. 12345 -> '₹123.45'."""
    rupees = Decimal(paise) / Decimal(100)
    return f"{CURRENCY_SYMBOL}{rupees.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"


def rupees_to_paise(rupees) -> int:
    return int((Decimal(str(rupees)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def paise_to_rupees(paise: int) -> Decimal:
    return Decimal(paise) / Decimal(100)
