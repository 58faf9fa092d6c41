"""Command-line entrypoint for portfolio reports."""
from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

from portfolio_metrics.application.use_cases import BuildPortfolioReportUseCase, PortfolioReportContext
from portfolio_metrics.infrastructure.repositories.file_repositories import (
    JsonReferenceRateRepository,
    WorkbookHoldingsRepository,
)
from portfolio_metrics.logging_config import configure_logging
from portfolio_metrics.presentation.report import coupon_schedule_rows, render_csv

logger = logging.getLogger(__name__)


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value.replace(",", "."))
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute fixed-income portfolio metrics from a holdings workbook")
    parser.add_argument("holdings", type=Path, help="Path to holdings workbook (.xlsx, .xls or .csv)")
    parser.add_argument("--portfolio", type=str, help="Only use rows of this portfolio")
    parser.add_argument("--parameters", type=Path, help="Economic parameters JSON file")
    parser.add_argument("--cdi", type=_decimal, help="Override the CDI rate (annual %%)")
    parser.add_argument("--ipca", type=_decimal, help="Override the IPCA rate (annual %%)")
    parser.add_argument("--csv", type=Path, help="Write the monthly coupon schedule to this CSV file")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default from environment)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.log_level)

    try:
        context = PortfolioReportContext(
            holdings_repository=WorkbookHoldingsRepository(args.holdings),
            reference_rate_repository=JsonReferenceRateRepository(
                args.parameters, overrides={"CDI": args.cdi, "IPCA": args.ipca}
            ),
        )
        report = BuildPortfolioReportUseCase(context).execute(args.portfolio)
    except (OSError, ValueError) as exc:
        logger.error("Could not build report: %s", exc)
        return 2

    summary = report.summary
    print("Portfolio Summary")
    print("=================")
    print(f"Holdings: {summary.total_holdings_count}")
    print(f"Total value: {summary.total_value:.2f}")
    print(f"Weighted rate (% a.a.): {summary.weighted_rate_percent:.4f}")
    print(f"Annual coupons: {summary.annual_coupon_total:.2f}")
    print(f"Commission: {summary.total_commission_value:.2f}")
    print(f"Diversification score: {summary.diversification_score:.2f}")

    if summary.top_issuers:
        print("\nTop issuers:")
        for entry in summary.top_issuers:
            print(f"- {entry.name}: {entry.percentage}%")
    if summary.top_sectors:
        print("\nTop sectors:")
        for entry in summary.top_sectors:
            print(f"- {entry.name}: {entry.percentage}%")

    if args.csv:
        args.csv.write_bytes(render_csv(coupon_schedule_rows(report.metrics)))
        logger.info("Coupon schedule written to %s", args.csv)

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
