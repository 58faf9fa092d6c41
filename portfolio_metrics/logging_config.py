"""Logging setup shared by the CLI and the dashboard."""
from __future__ import annotations

import logging

from portfolio_metrics.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    # pandas' Excel engines are chatty at DEBUG
    logging.getLogger("openpyxl").setLevel(logging.WARNING)
