"""Diversification score and compact portfolio summary."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Mapping

from portfolio_metrics.config import SETTINGS

from .results import ZERO, ConcentrationEntry, DiversificationSummary, MetricsResult

CENT = Decimal("0.01")
MAX_SCORE = Decimal("100")


def top_concentrations(
    concentration: Mapping[str, Decimal],
    limit: int | None = SETTINGS.top_concentration_limit,
) -> list[ConcentrationEntry]:
    """Largest entries first, percentages rounded to two decimals.

    Rounding happens before ranking; entries equal after rounding keep
    their original order.
    """
    entries = [
        ConcentrationEntry(name=name, percentage=percentage.quantize(CENT, rounding=ROUND_HALF_UP))
        for name, percentage in concentration.items()
    ]
    ranked = sorted(entries, key=lambda entry: entry.percentage, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def _shortfall_penalty(count: int, minimum: int, penalty: Decimal) -> Decimal:
    return (minimum - count) * penalty if count < minimum else ZERO


def _excess_penalty(largest: Decimal, limit: Decimal, penalty: Decimal) -> Decimal:
    return (largest - limit) * penalty if largest > limit else ZERO


def calculate_diversification_score(metrics: MetricsResult) -> Decimal:
    issuers = metrics.concentration_by_issuer_percent
    sectors = metrics.concentration_by_sector_percent
    indexers = metrics.concentration_by_indexer_percent

    with localcontext(SETTINGS.decimal_context):
        score = MAX_SCORE
        score -= _shortfall_penalty(len(issuers), SETTINGS.min_issuers, SETTINGS.missing_issuer_penalty)
        score -= _shortfall_penalty(len(sectors), SETTINGS.min_sectors, SETTINGS.missing_sector_penalty)
        score -= _shortfall_penalty(len(indexers), SETTINGS.min_indexers, SETTINGS.missing_indexer_penalty)
        score -= _excess_penalty(
            max(issuers.values(), default=ZERO),
            SETTINGS.issuer_concentration_limit,
            SETTINGS.issuer_concentration_penalty,
        )
        score -= _excess_penalty(
            max(sectors.values(), default=ZERO),
            SETTINGS.sector_concentration_limit,
            SETTINGS.sector_concentration_penalty,
        )
    return max(ZERO, min(MAX_SCORE, score))


def build_summary(metrics: MetricsResult) -> DiversificationSummary:
    return DiversificationSummary(
        diversification_score=calculate_diversification_score(metrics),
        top_issuers=tuple(top_concentrations(metrics.concentration_by_issuer_percent, SETTINGS.summary_top_limit)),
        top_sectors=tuple(top_concentrations(metrics.concentration_by_sector_percent, SETTINGS.summary_top_limit)),
        annual_coupon_total=sum(metrics.monthly_coupon_totals, ZERO),
        total_holdings_count=metrics.total_holdings_count,
        total_value=metrics.total_value,
        weighted_rate_percent=metrics.weighted_rate_percent,
        total_commission_value=metrics.total_commission_value,
    )
