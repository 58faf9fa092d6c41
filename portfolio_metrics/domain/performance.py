"""Forward-looking performance projection and cross-portfolio overview."""
from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Iterable, Mapping, Sequence

from portfolio_metrics.config import SETTINGS

from .models import AssetDescriptor, Holding, IndexerKind, ReferenceRateTable
from .rates import first_number
from .results import MONTHS_IN_YEAR, ZERO, MetricsResult, OverviewMetrics, PerformancePoint

HUNDRED = Decimal("100")


def indexed_annual_rate(asset: AssetDescriptor, cdi_rate: Decimal, ipca_rate: Decimal) -> Decimal:
    """Annual % for an asset once its indexer is applied to the stated rate."""
    stated = first_number(asset.rate_text) or ZERO
    if asset.indexer_kind is IndexerKind.IPCA:
        return stated + ipca_rate
    if asset.indexer_kind is IndexerKind.PCT_CDI:
        return stated / HUNDRED * cdi_rate
    if asset.indexer_kind is IndexerKind.CDI_PLUS:
        return cdi_rate + stated
    return stated


def project_performance(
    holdings: Sequence[Holding],
    reference_rates: ReferenceRateTable | Mapping[str, object] | None = None,
    months: int = MONTHS_IN_YEAR,
) -> list[PerformancePoint]:
    """Compound the portfolio's monthly return against CDI for ``months`` months."""
    table = ReferenceRateTable.coerce(reference_rates)
    cdi_rate = table.resolve("CDI", SETTINGS.default_cdi_rate)
    ipca_rate = table.resolve("IPCA", SETTINGS.projection_ipca_rate)

    with localcontext(SETTINGS.decimal_context):
        total_value = sum((h.value for h in holdings), ZERO)
        portfolio_monthly = ZERO
        if total_value > 0:
            for holding in holdings:
                weight = holding.value / total_value
                portfolio_monthly += weight * (indexed_annual_rate(holding.asset, cdi_rate, ipca_rate) / 12)
        cdi_monthly = cdi_rate / 12

        return [
            PerformancePoint(
                month=month,
                portfolio_index=(1 + portfolio_monthly / HUNDRED) ** month * HUNDRED,
                cdi_index=(1 + cdi_monthly / HUNDRED) ** month * HUNDRED,
                portfolio_monthly_return=portfolio_monthly,
                cdi_monthly_return=cdi_monthly,
            )
            for month in range(1, months + 1)
        ]


def aggregate_overview(portfolio_metrics: Iterable[MetricsResult]) -> OverviewMetrics:
    """Combine per-portfolio metrics into dashboard overview figures."""
    active = 0
    holdings = 0
    volume = ZERO
    weighted = ZERO
    with localcontext(SETTINGS.decimal_context):
        for metrics in portfolio_metrics:
            active += 1
            holdings += metrics.total_holdings_count
            volume += metrics.total_value
            weighted += metrics.weighted_rate_percent * metrics.total_value
        average = weighted / volume if volume > 0 else ZERO
    return OverviewMetrics(
        active_portfolios=active,
        total_holdings=holdings,
        average_rate_percent=average,
        total_volume=volume,
    )
