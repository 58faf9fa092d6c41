"""Application services orchestrating the portfolio report workflow."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from portfolio_metrics.application.dto import OverviewReport, PortfolioReport
from portfolio_metrics.domain.performance import aggregate_overview, project_performance
from portfolio_metrics.domain.repositories import HoldingsRepository, ReferenceRateRepository
from portfolio_metrics.domain.services import compute_metrics
from portfolio_metrics.domain.summary import build_summary

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PortfolioReportContext:
    holdings_repository: HoldingsRepository
    reference_rate_repository: ReferenceRateRepository


class BuildPortfolioReportUseCase:
    def __init__(self, context: PortfolioReportContext) -> None:
        self._context = context

    def execute(self, portfolio_id: str | None = None) -> PortfolioReport:
        holdings = self._context.holdings_repository.list_holdings(portfolio_id)
        reference_rates = self._context.reference_rate_repository.get_reference_rates()
        logger.info("Building report for portfolio %s (%d holdings)", portfolio_id or "<all>", len(holdings))

        metrics = compute_metrics(holdings, reference_rates)
        summary = build_summary(metrics)
        performance = project_performance(holdings, reference_rates)
        return PortfolioReport(
            portfolio_id=portfolio_id,
            holdings=tuple(holdings),
            reference_rates=reference_rates,
            metrics=metrics,
            summary=summary,
            performance=tuple(performance),
            generated_at=datetime.now(timezone.utc),
        )


class BuildOverviewUseCase:
    def __init__(self, context: PortfolioReportContext) -> None:
        self._context = context
        self._single = BuildPortfolioReportUseCase(context)

    def execute(self, portfolio_ids: Sequence[str] | None = None) -> OverviewReport:
        if portfolio_ids is None:
            portfolio_ids = self._context.holdings_repository.list_portfolio_ids()
        reports = [self._single.execute(portfolio_id) for portfolio_id in portfolio_ids]
        overview = aggregate_overview(report.metrics for report in reports)
        return OverviewReport(overview=overview, reports=tuple(reports))
