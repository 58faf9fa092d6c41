"""Metrics aggregator: weighted rates, concentrations and commissions."""
from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal, localcontext
from typing import Callable, Mapping, Sequence

from portfolio_metrics.config import SETTINGS

from .coupons import project_monthly_coupons
from .models import Holding, ReferenceRateTable
from .rates import normalize_rate
from .results import ZERO, MetricsResult

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def _sector_key(holding: Holding) -> str:
    return holding.asset.sector or SETTINGS.unspecified_sector


def _issuer_key(holding: Holding) -> str:
    return holding.asset.issuer


def _indexer_key(holding: Holding) -> str:
    return holding.asset.indexer_key


def concentration_by(
    holdings: Sequence[Holding],
    total_value: Decimal,
    key: Callable[[Holding], str],
) -> dict[str, Decimal]:
    """Share of ``total_value`` (in %) held under each key, in first-seen order."""
    concentration: dict[str, Decimal] = {}
    for holding in holdings:
        weight = holding.value / total_value * HUNDRED if total_value > 0 else ZERO
        name = key(holding)
        concentration[name] = concentration.get(name, ZERO) + weight
    return concentration


def weighted_rate_by_indexer(holdings: Sequence[Holding], rates: Sequence[Decimal]) -> dict[str, Decimal]:
    weighted: dict[str, Decimal] = defaultdict(lambda: ZERO)
    value_by_indexer: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for holding, rate in zip(holdings, rates):
        indexer = _indexer_key(holding)
        weighted[indexer] += rate * holding.value
        value_by_indexer[indexer] += holding.value
    return {
        indexer: (weighted[indexer] / value_by_indexer[indexer]) if value_by_indexer[indexer] > 0 else ZERO
        for indexer in weighted
    }


def total_commission(holdings: Sequence[Holding]) -> Decimal:
    commission = ZERO
    for holding in holdings:
        percent = holding.asset.commission_percent
        if percent:
            commission += holding.value * (percent / HUNDRED)
    return commission


def compute_metrics(
    holdings: Sequence[Holding],
    reference_rates: ReferenceRateTable | Mapping[str, object] | None = None,
) -> MetricsResult:
    """Aggregate a portfolio's holdings into a :class:`MetricsResult`.

    Pure function: no I/O, no shared state. An empty portfolio yields the
    all-zero result.
    """
    holdings = tuple(holdings)
    if not holdings:
        return MetricsResult.empty()

    table = ReferenceRateTable.coerce(reference_rates)
    with localcontext(SETTINGS.decimal_context):
        total_value = sum((h.value for h in holdings), ZERO)
        rates = [normalize_rate(h.asset.rate_text, h.asset.indexer_kind, table) for h in holdings]

        weighted_rate = ZERO
        if total_value > 0:
            weighted_rate = sum((h.value * r for h, r in zip(holdings, rates)), ZERO) / total_value

        cdi_rate = table.resolve("CDI", SETTINGS.default_cdi_rate)
        projection = project_monthly_coupons(holdings, cdi_rate)

        result = MetricsResult(
            total_holdings_count=len(holdings),
            total_value=total_value,
            weighted_rate_percent=weighted_rate,
            weighted_rate_percent_by_indexer=weighted_rate_by_indexer(holdings, rates),
            concentration_by_issuer_percent=concentration_by(holdings, total_value, _issuer_key),
            concentration_by_sector_percent=concentration_by(holdings, total_value, _sector_key),
            concentration_by_indexer_percent=concentration_by(holdings, total_value, _indexer_key),
            monthly_coupon_totals=projection.totals,
            monthly_coupon_detail=projection.details,
            total_commission_value=total_commission(holdings),
        )
    logger.debug(
        "Computed metrics for %d holdings (total %s, weighted rate %s)",
        result.total_holdings_count,
        result.total_value,
        result.weighted_rate_percent,
    )
    return result
