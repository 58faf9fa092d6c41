"""Rate normalizer: free-text yield descriptions to an annual percentage."""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Mapping

from portfolio_metrics.config import SETTINGS

from .models import IndexerKind, ReferenceRateTable
from .numbers import NUMBER_PATTERN, parse_number

PERCENT_PATTERN = re.compile(rf"({NUMBER_PATTERN.pattern})\s*%")
SPREAD_PATTERN = re.compile(rf"\+\s*({NUMBER_PATTERN.pattern})")

CDI_KINDS = (IndexerKind.PCT_CDI, IndexerKind.CDI_PLUS)


def first_number(text: str) -> Decimal | None:
    match = NUMBER_PATTERN.search(text or "")
    if match is None:
        return None
    return parse_number(match.group(0))


def normalize_rate(
    rate_text: str | None,
    indexer_kind: IndexerKind = IndexerKind.UNKNOWN,
    reference_rates: ReferenceRateTable | Mapping[str, object] | None = None,
) -> Decimal:
    """Turn a rate description into a comparable annual percentage.

    Examples: ``"12,5%"`` -> 12.5, ``"108% CDI"`` -> 10.8,
    ``"CDI + 1.25%"`` -> 11.25, ``"IPCA + 6.25%"`` -> 10.25.

    CDI and IPCA descriptions are approximated with the fixed bases in
    ``SETTINGS``; ``reference_rates`` is not consulted here. Never raises.
    """
    if not rate_text:
        return Decimal("0")
    text = str(rate_text)
    upper = text.upper()
    mentions_cdi = "CDI" in upper
    mentions_ipca = "IPCA" in upper

    if not (mentions_cdi or mentions_ipca):
        match = PERCENT_PATTERN.search(text)
        if match:
            return parse_number(match.group(1))

    if mentions_cdi or indexer_kind in CDI_KINDS:
        leading = first_number(text)
        if leading is not None:
            if leading > SETTINGS.cdi_heuristic_threshold:
                return leading / SETTINGS.cdi_heuristic_divisor
            return leading + SETTINGS.cdi_heuristic_base

    if mentions_ipca or indexer_kind is IndexerKind.IPCA:
        match = SPREAD_PATTERN.search(text)
        if match:
            return parse_number(match.group(1)) + SETTINGS.ipca_heuristic_offset

    return first_number(text) or Decimal("0")
