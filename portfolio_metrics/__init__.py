"""Fixed-income portfolio metrics: weighted rates, concentration and coupon projection."""
from portfolio_metrics.application.use_cases import (
    BuildOverviewUseCase,
    BuildPortfolioReportUseCase,
    PortfolioReportContext,
)
from portfolio_metrics.domain.coupons import project_monthly_coupons
from portfolio_metrics.domain.models import (
    AssetDescriptor,
    Holding,
    IndexerKind,
    PaymentFrequency,
    ReferenceRateTable,
)
from portfolio_metrics.domain.rates import normalize_rate
from portfolio_metrics.domain.services import compute_metrics
from portfolio_metrics.domain.summary import build_summary
from portfolio_metrics.infrastructure.repositories.file_repositories import (
    JsonReferenceRateRepository,
    WorkbookHoldingsRepository,
)

__all__ = [
    "AssetDescriptor",
    "Holding",
    "IndexerKind",
    "PaymentFrequency",
    "ReferenceRateTable",
    "normalize_rate",
    "compute_metrics",
    "project_monthly_coupons",
    "build_summary",
    "BuildPortfolioReportUseCase",
    "BuildOverviewUseCase",
    "PortfolioReportContext",
    "WorkbookHoldingsRepository",
    "JsonReferenceRateRepository",
]
