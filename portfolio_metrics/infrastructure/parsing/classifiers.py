"""Classify free-text asset fields into the engine's enums and month sets.

Spreadsheets and the asset catalogue spell indexers, coupon frequencies and
coupon months in Portuguese or English with inconsistent punctuation. These
helpers run once at ingestion so the metrics engine only sees
:class:`IndexerKind`, :class:`PaymentFrequency` and ``frozenset[int]``.
"""
from __future__ import annotations

import re
import unicodedata

from portfolio_metrics.domain.models import ALL_MONTHS, IndexerKind, PaymentFrequency

ALL_MONTHS_SENTINELS = {"ALL", "TODOS", "TODOS OS MESES"}
MONTH_SEPARATORS = re.compile(r"[,;/\s]+|\bE\b", re.IGNORECASE)

# Checked in order: "semiannual" must win over "annual".
FREQUENCY_KEYWORDS: tuple[tuple[PaymentFrequency, tuple[str, ...]], ...] = (
    (PaymentFrequency.MONTHLY, ("mensal", "monthly")),
    (PaymentFrequency.QUARTERLY, ("trimestral", "quarterly")),
    (PaymentFrequency.SEMIANNUAL, ("semestral", "semiannual", "semi-annual", "semi annual")),
    (PaymentFrequency.ANNUAL, ("anual", "annual", "yearly")),
)


def _fold(text: str | None) -> str:
    folded = unicodedata.normalize("NFKD", text or "")
    return "".join(ch for ch in folded if not unicodedata.combining(ch)).strip().upper()


def classify_indexer(text: str | None) -> IndexerKind:
    """Map an indexer label ("IPCA+", "% CDI", "Prefixada", ...) to its kind."""
    label = re.sub(r"\s+", "", _fold(text))
    if not label:
        return IndexerKind.UNKNOWN
    if "IPCA" in label:
        return IndexerKind.IPCA
    if label.startswith("PRE") or label in {"FIXED", "FIXO"}:
        return IndexerKind.PREFIXADO
    if "CDI" in label:
        if "+" in label:
            return IndexerKind.CDI_PLUS
        if "%" in label:
            return IndexerKind.PCT_CDI
    return IndexerKind.UNKNOWN


def classify_frequency(text: str | None) -> PaymentFrequency | None:
    lowered = _fold(text).lower()
    if not lowered:
        return None
    for frequency, keywords in FREQUENCY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return frequency
    return None


def parse_payment_months(text: object) -> frozenset[int] | None:
    """Parse coupon months such as "03 E 09", "3,9" or "TODOS" into 1-based months.

    Invalid or out-of-range tokens are dropped; ``None`` means no usable
    month was found.
    """
    if text is None:
        return None
    folded = _fold(str(text))
    if not folded:
        return None
    if folded in ALL_MONTHS_SENTINELS:
        return ALL_MONTHS
    months = set()
    for token in MONTH_SEPARATORS.split(folded):
        token = token.strip()
        if not token.isdigit():
            continue
        month = int(token)
        if 1 <= month <= 12:
            months.add(month)
    return frozenset(months) or None
