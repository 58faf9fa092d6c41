"""Numeric token parsing shared by the rate normalizer and ingestion."""
from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation

NUMBER_PATTERN = re.compile(r"\d+(?:[.,]\d+)*")


def parse_number(token: str) -> Decimal:
    """Parse a numeric token written in Brazilian or English notation.

    A comma followed by at most two digits is the decimal separator
    ("12,5", "1.250,75"); otherwise commas group thousands and the dot is
    the decimal separator ("1,250.75"). Unparseable input yields 0.
    """
    s = (token or "").strip()
    if not s:
        return Decimal("0")
    if "," in s:
        head, _, tail = s.rpartition(",")
        if len(tail) <= 2:
            s = head.replace(".", "").replace(",", "") + "." + tail
        else:
            s = s.replace(",", "")
    elif s.count(".") > 1:
        s = s.replace(".", "")
    try:
        return Decimal(s)
    except InvalidOperation:
        return Decimal("0")


def to_decimal(value: object) -> Decimal | None:
    """Finite Decimal for a number or numeric string, else ``None``."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else None
    s = str(value).strip()
    negative = s.startswith("-")
    if negative:
        s = s[1:].strip()
    if not NUMBER_PATTERN.fullmatch(s):
        return None
    result = parse_number(s)
    return -result if negative else result
