"""Application-level DTOs for portfolio reports."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from portfolio_metrics.domain.models import Holding, ReferenceRateTable
from portfolio_metrics.domain.results import (
    DiversificationSummary,
    MetricsResult,
    OverviewMetrics,
    PerformancePoint,
)


@dataclass(slots=True, frozen=True)
class PortfolioReport:
    portfolio_id: str | None
    holdings: Sequence[Holding]
    reference_rates: ReferenceRateTable
    metrics: MetricsResult
    summary: DiversificationSummary
    performance: Sequence[PerformancePoint]
    generated_at: datetime


@dataclass(slots=True, frozen=True)
class OverviewReport:
    overview: OverviewMetrics
    reports: Sequence[PortfolioReport]
