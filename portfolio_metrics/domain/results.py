"""Domain-level results produced by the metrics engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from .models import PaymentFrequency

MONTHS_IN_YEAR = 12
ZERO = Decimal("0")


@dataclass(frozen=True)
class CouponDetail:
    asset_name: str
    value: Decimal
    frequency: PaymentFrequency


@dataclass(frozen=True)
class MonthlyCouponBreakdown:
    month: int
    total: Decimal = ZERO
    details: Sequence[CouponDetail] = field(default_factory=tuple)


@dataclass(frozen=True)
class CouponProjection:
    totals: Sequence[Decimal]
    details: Sequence[MonthlyCouponBreakdown]

    @classmethod
    def empty(cls) -> CouponProjection:
        return cls(
            totals=(ZERO,) * MONTHS_IN_YEAR,
            details=tuple(MonthlyCouponBreakdown(month=m) for m in range(1, MONTHS_IN_YEAR + 1)),
        )


@dataclass(frozen=True)
class MetricsResult:
    total_holdings_count: int
    total_value: Decimal
    weighted_rate_percent: Decimal
    weighted_rate_percent_by_indexer: Mapping[str, Decimal]
    concentration_by_issuer_percent: Mapping[str, Decimal]
    concentration_by_sector_percent: Mapping[str, Decimal]
    concentration_by_indexer_percent: Mapping[str, Decimal]
    monthly_coupon_totals: Sequence[Decimal]
    monthly_coupon_detail: Sequence[MonthlyCouponBreakdown]
    total_commission_value: Decimal

    @classmethod
    def empty(cls) -> MetricsResult:
        projection = CouponProjection.empty()
        return cls(
            total_holdings_count=0,
            total_value=ZERO,
            weighted_rate_percent=ZERO,
            weighted_rate_percent_by_indexer={},
            concentration_by_issuer_percent={},
            concentration_by_sector_percent={},
            concentration_by_indexer_percent={},
            monthly_coupon_totals=projection.totals,
            monthly_coupon_detail=projection.details,
            total_commission_value=ZERO,
        )

    def iter_coupon_details(self) -> Iterable[tuple[int, CouponDetail]]:
        for breakdown in self.monthly_coupon_detail:
            for detail in breakdown.details:
                yield breakdown.month, detail


@dataclass(frozen=True)
class ConcentrationEntry:
    name: str
    percentage: Decimal


@dataclass(frozen=True)
class DiversificationSummary:
    diversification_score: Decimal
    top_issuers: Sequence[ConcentrationEntry]
    top_sectors: Sequence[ConcentrationEntry]
    annual_coupon_total: Decimal
    total_holdings_count: int
    total_value: Decimal
    weighted_rate_percent: Decimal
    total_commission_value: Decimal


@dataclass(frozen=True)
class PerformancePoint:
    """Cumulative growth of 100 invested, portfolio vs CDI, after ``month`` months."""

    month: int
    portfolio_index: Decimal
    cdi_index: Decimal
    portfolio_monthly_return: Decimal
    cdi_monthly_return: Decimal


@dataclass(frozen=True)
class OverviewMetrics:
    active_portfolios: int
    total_holdings: int
    average_rate_percent: Decimal
    total_volume: Decimal
