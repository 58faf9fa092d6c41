"""Tabular renderings of portfolio reports (rows, CSV, HTML).

Values are emitted as plain numbers; currency and locale formatting is
left to whatever displays them.
"""
from __future__ import annotations

import csv
import html
import io
from decimal import Decimal
from typing import Mapping, Sequence

from portfolio_metrics.application.dto import PortfolioReport
from portfolio_metrics.domain.results import MetricsResult, PerformancePoint
from portfolio_metrics.domain.summary import top_concentrations


def _num(value: Decimal, places: int = 2) -> str:
    return f"{value:.{places}f}"


def concentration_rows(concentration: Mapping[str, Decimal], limit: int | None = None) -> list[dict[str, str]]:
    return [
        {"name": entry.name, "percentage": _num(entry.percentage)}
        for entry in top_concentrations(concentration, limit)
    ]


def coupon_schedule_rows(metrics: MetricsResult) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for breakdown in metrics.monthly_coupon_detail:
        rows.append(
            {
                "month": str(breakdown.month),
                "total": _num(breakdown.total),
                "payers": str(len(breakdown.details)),
            }
        )
    return rows


def coupon_detail_rows(metrics: MetricsResult) -> list[dict[str, str]]:
    return [
        {
            "month": str(month),
            "asset_name": detail.asset_name,
            "value": _num(detail.value),
            "frequency": detail.frequency.value,
        }
        for month, detail in metrics.iter_coupon_details()
    ]


def performance_rows(points: Sequence[PerformancePoint]) -> list[dict[str, str]]:
    return [
        {
            "month": str(point.month),
            "portfolio_index": _num(point.portfolio_index, 4),
            "cdi_index": _num(point.cdi_index, 4),
            "portfolio_monthly_return": _num(point.portfolio_monthly_return, 4),
            "cdi_monthly_return": _num(point.cdi_monthly_return, 4),
        }
        for point in points
    ]


def summary_rows(report: PortfolioReport) -> list[dict[str, str]]:
    summary = report.summary
    metrics = report.metrics
    pairs = [
        ("holdings", str(summary.total_holdings_count)),
        ("total_value", _num(summary.total_value)),
        ("weighted_rate_percent", _num(summary.weighted_rate_percent, 4)),
        ("annual_coupon_total", _num(summary.annual_coupon_total)),
        ("total_commission_value", _num(summary.total_commission_value)),
        ("diversification_score", _num(summary.diversification_score)),
    ]
    pairs.extend(
        (f"weighted_rate_percent[{indexer}]", _num(rate, 4))
        for indexer, rate in metrics.weighted_rate_percent_by_indexer.items()
    )
    return [{"metric": name, "value": value} for name, value in pairs]


def render_csv(rows: Sequence[Mapping[str, str]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def _table(title: str, rows: Sequence[Mapping[str, str]]) -> str:
    if not rows:
        return f"<h2>{html.escape(title)}</h2><p>No data.</p>"
    header = "".join(f"<th>{html.escape(col)}</th>" for col in rows[0].keys())
    body = "".join(
        "<tr>" + "".join(f"<td>{html.escape(value)}</td>" for value in row.values()) + "</tr>" for row in rows
    )
    return f"<h2>{html.escape(title)}</h2><table><thead><tr>{header}</tr></thead><tbody>{body}</tbody></table>"


def render_html(report: PortfolioReport) -> str:
    metrics = report.metrics
    sections = [
        _table("Summary", summary_rows(report)),
        _table("Issuers", concentration_rows(metrics.concentration_by_issuer_percent)),
        _table("Sectors", concentration_rows(metrics.concentration_by_sector_percent)),
        _table("Indexers", concentration_rows(metrics.concentration_by_indexer_percent)),
        _table("Coupon schedule", coupon_schedule_rows(metrics)),
        _table("Performance", performance_rows(report.performance)),
    ]
    return "".join(sections)
