import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def to_slug(text: Optional[str]) -> str:
    """
    "Merry Christmas!" -> "merry-christmas". Runs of anything that is not
    [a-z0-9] collapse to one hyphen; no leading or trailing hyphen.
    """
    lowered = (text or "").lower().strip()
    return _NON_ALNUM.sub("-", lowered).strip("-")


def hash_string(value: str) -> int:
    # 32-bit signed rolling hash (h * 31 + c), absolute value of the result
    h = 0
    for ch in value:
        h = (h << 5) - h + ord(ch)
        h &= 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def format_price(price_cents: int) -> str:
    """Storefront price: USD, up to two decimals, trailing zeros dropped."""
    amount = (Decimal(int(price_cents or 0)) / 100).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    whole, _, frac = f"{amount:,.2f}".partition(".")
    frac = frac.rstrip("0")
    return f"${whole}.{frac}" if frac else f"${whole}"


def format_money(price_cents: int) -> str:
    """Admin price: always two decimals, no grouping."""
    return f"${(price_cents or 0) / 100:.2f}"


def format_event_time(value: Optional[datetime]) -> Optional[str]:
    # e.g. "Dec 1, 2025, 12:00 AM"
    if value is None:
        return None
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value:%b} {value.day}, {value.year}, {hour}:{value:%M} {meridiem}"


def parse_price_to_cents(raw: Optional[str]) -> int:
    """
    "28.50" -> 2850. Blank input is zero, negative input clamps to zero.
    Raises ValueError for text that is not a number.
    """
    text = (raw or "").strip() or "0"
    cents = Decimal(str(float(text))) * 100
    return max(0, int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))
