"""Streamlit front-end for the portfolio metrics engine."""
from __future__ import annotations

from decimal import Decimal
from io import BytesIO
from pathlib import Path
from typing import Sequence

import pandas as pd
import streamlit as st

from portfolio_metrics import (
    BuildOverviewUseCase,
    BuildPortfolioReportUseCase,
    JsonReferenceRateRepository,
    PortfolioReportContext,
    WorkbookHoldingsRepository,
)
from portfolio_metrics.application.dto import PortfolioReport
from portfolio_metrics.domain.models import Holding
from portfolio_metrics.infrastructure.parsing.utils import parse_decimal
from portfolio_metrics.infrastructure.storage import parameter_store
from portfolio_metrics.logging_config import configure_logging
from portfolio_metrics.presentation.report import (
    concentration_rows,
    coupon_detail_rows,
    coupon_schedule_rows,
    performance_rows,
    render_csv,
    render_html,
    summary_rows,
)

configure_logging()
st.set_page_config(page_title="Portfolio Metrics", layout="wide")
st.title("Fixed-Income Portfolio Metrics")


def load_parameters_dataframe() -> pd.DataFrame:
    parameters = parameter_store.load_parameters()
    return pd.DataFrame(
        [{"name": name, "value": float(value)} for name, value in sorted(parameters.items())],
        columns=["name", "value"],
    )


def holdings_to_dataframe(holdings: Sequence[Holding]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "name": h.asset.name,
                "code": h.asset.code,
                "issuer": h.asset.issuer,
                "sector": h.asset.sector,
                "indexer": h.asset.indexer_key,
                "rate": h.asset.rate_text,
                "unit_price": h.asset.unit_price,
                "frequency": h.asset.payment_frequency.value if h.asset.payment_frequency else None,
                "coupon_months": ",".join(str(m) for m in sorted(h.asset.payment_months or ())),
                "quantity": h.quantity,
                "value": h.value,
            }
            for h in holdings
        ]
    )


def build_context(holdings_bytes: bytes, filename: str) -> PortfolioReportContext:
    return PortfolioReportContext(
        holdings_repository=WorkbookHoldingsRepository(BytesIO(holdings_bytes), fmt=Path(filename).suffix.lstrip(".")),
        reference_rate_repository=JsonReferenceRateRepository(),
    )


if "view" not in st.session_state:
    st.session_state["view"] = "upload"
if "result" not in st.session_state:
    st.session_state["result"] = None


if st.session_state["view"] == "upload":
    holdings_file = st.file_uploader("Upload holdings workbook", type=["xlsx", "xls", "csv"])

    st.subheader("Economic Parameters")
    with st.expander("CDI / IPCA / SELIC (annual %)", expanded=True):
        edited_df = st.data_editor(
            load_parameters_dataframe(),
            num_rows="dynamic",
            hide_index=True,
            key="parameters_editor",
            use_container_width=True,
        )
        if st.button("Save parameters", key="save_parameters_btn"):
            cleaned: dict[str, Decimal] = {}
            for _, row in edited_df.iterrows():
                name = str(row.get("name") or "").strip().upper()
                value = parse_decimal(row.get("value"))
                if name and value is not None:
                    cleaned[name] = value
            parameter_store.save_parameters(cleaned)
            st.success("Parameters saved")
            st.rerun()

    portfolio_id = st.text_input("Portfolio (leave blank for all rows)", key="portfolio_id")
    run_btn = st.button("Compute metrics", disabled=holdings_file is None)
    if run_btn and holdings_file is not None:
        context = build_context(holdings_file.read(), holdings_file.name)
        try:
            with st.spinner("Computing..."):
                report = BuildPortfolioReportUseCase(context).execute(portfolio_id.strip() or None)
                overview = BuildOverviewUseCase(context).execute()
        except ValueError as exc:
            st.error(str(exc))
        else:
            st.session_state["result"] = {"report": report, "overview": overview}
            st.session_state["view"] = "results"
            st.rerun()
else:
    if st.button("← Back", key="back_to_upload"):
        st.session_state["view"] = "upload"
        st.session_state["result"] = None
        st.rerun()

    result = st.session_state.get("result")
    if not result:
        st.info("No results available. Upload a workbook and compute metrics first.")
    else:
        report: PortfolioReport = result["report"]
        metrics = report.metrics
        summary = report.summary

        st.subheader("Summary")
        cols = st.columns(5)
        cols[0].metric("Holdings", summary.total_holdings_count)
        cols[1].metric("Total value", f"{summary.total_value:.2f}")
        cols[2].metric("Weighted rate (% a.a.)", f"{summary.weighted_rate_percent:.2f}")
        cols[3].metric("Annual coupons", f"{summary.annual_coupon_total:.2f}")
        cols[4].metric("Diversification", f"{summary.diversification_score:.0f}")

        overview = result["overview"].overview
        if overview.active_portfolios > 1:
            st.caption(
                f"{overview.active_portfolios} portfolios, volume {overview.total_volume:.2f}, "
                f"average rate {overview.average_rate_percent:.2f}%"
            )

        tabs = st.tabs(["Concentration", "Coupons", "Performance", "Holdings"])
        with tabs[0]:
            for title, concentration in (
                ("Issuers", metrics.concentration_by_issuer_percent),
                ("Sectors", metrics.concentration_by_sector_percent),
                ("Indexers", metrics.concentration_by_indexer_percent),
            ):
                st.markdown(f"**{title}**")
                st.dataframe(pd.DataFrame(concentration_rows(concentration)), hide_index=True)
        with tabs[1]:
            schedule = pd.DataFrame(coupon_schedule_rows(metrics))
            st.bar_chart(schedule.assign(total=schedule["total"].astype(float)), x="month", y="total")
            st.dataframe(pd.DataFrame(coupon_detail_rows(metrics)), hide_index=True)
        with tabs[2]:
            performance = pd.DataFrame(performance_rows(report.performance)).astype(float)
            st.line_chart(performance, x="month", y=["portfolio_index", "cdi_index"])
        with tabs[3]:
            st.dataframe(holdings_to_dataframe(report.holdings), hide_index=True)

        st.download_button(
            "Download summary CSV",
            data=render_csv(summary_rows(report)),
            file_name="portfolio_summary.csv",
            mime="text/csv",
        )
        st.download_button(
            "Download report HTML",
            data=render_html(report).encode("utf-8"),
            file_name="portfolio_report.html",
            mime="text/html",
        )
