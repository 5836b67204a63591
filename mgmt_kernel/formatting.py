"""Console formatting: money, percentages, dates, banners."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext

CENT = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half-up.  Precision widens so large products still fit."""
    with localcontext() as ctx:
        if value.is_finite():
            ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def fmt_amount(value: Decimal) -> str:
    """Fixed two decimals, no grouping (e.g. 23000.00)."""
    return f"{quantize_money(Decimal(str(value))):.2f}"


def fmt_money(value: Decimal, prefix: str = "$") -> str:
    """Amount with a currency prefix: ``$720.00`` or ``RWF 23000.00``."""
    sep = "" if prefix == "$" else " "
    return f"{prefix}{sep}{fmt_amount(value)}"


def fmt_percent(value: Decimal, places: int = 1) -> str:
    """``15`` -> ``15.0%``."""
    return f"{Decimal(str(value)):.{places}f}%"


def fmt_date_dmy(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def fmt_date_iso(value: date) -> str:
    return value.isoformat()


def yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def banner(title: str, char: str = "=") -> str:
    return f"{char * 5} {title} {char * 5}"
