# storefront/utils/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

Money = Decimal

# display conversion applied to cart prices in confirmation emails
DISPLAY_RATE = Decimal("390")


def D(x) -> Money:
    """Lenient Decimal: anything unparsable or non-finite (Infinity, NaN) counts as zero."""
    if not isinstance(x, Decimal):
        try:
            x = Decimal(str(x or "0"))
        except InvalidOperation:
            return Decimal("0")
    return x if x.is_finite() else Decimal("0")


def round_money(x: Money) -> Money:
    return D(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_display_amount(x) -> str:
    """Whole amounts print without decimals ("3900"), others rounded to cents."""
    x = D(x)
    try:
        if x == x.to_integral_value():
            return format(x.to_integral_value(), "f")
        return str(round_money(x))
    except ArithmeticError:
        # more digits than the decimal context can round
        return str(x)


def line_display_price(unit_price, quantity) -> str:
    try:
        amount = D(unit_price) * D(quantity) * DISPLAY_RATE
    except ArithmeticError:
        amount = Decimal("0")
    return to_display_amount(amount)
