"""Shared parsing utilities for spreadsheet ingestion."""
from __future__ import annotations

import math
import unicodedata
from decimal import Decimal
from io import BytesIO
from pathlib import Path

from portfolio_metrics.domain.numbers import NUMBER_PATTERN, parse_number


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def clean_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    s = str(value).strip()
    if s.upper() in {"NAN", "NONE", "NULL"}:
        return ""
    return s


def parse_decimal(value: object) -> Decimal | None:
    """Parse a spreadsheet cell into a Decimal; blank cells give ``None``."""
    if isinstance(value, (int, Decimal)) and not isinstance(value, bool):
        return Decimal(value)
    if isinstance(value, float):
        return None if math.isnan(value) else Decimal(str(value))
    s = clean_text(value)
    if not s:
        return None
    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]
    elif s.startswith("-"):
        negative = True
        s = s[1:]
    for token in ("R$", "$", "%", " ", "\xa0"):
        s = s.replace(token, "")
    if not NUMBER_PATTERN.fullmatch(s):
        return None
    result = parse_number(s)
    return -result if negative else result


def normalize_header(name: object) -> str:
    """Lower-case, accent-free, underscore-separated column name."""
    text = unicodedata.normalize("NFKD", clean_text(name))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return "_".join(text.lower().replace("-", " ").split())
