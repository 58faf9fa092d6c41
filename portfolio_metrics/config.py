"""Central configuration for the portfolio metrics package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Context, Decimal
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
PARAMETERS_FILE = DATA_DIR / "economic_parameters.json"

LOG_LEVEL = os.environ.get("PORTFOLIO_METRICS_LOG_LEVEL", "INFO").upper()

# Seed values for the economic parameter table (annual %).
DEFAULT_ECONOMIC_PARAMETERS = {
    "CDI": Decimal("14.65"),
    "IPCA": Decimal("4.5"),
    "SELIC": Decimal("13.75"),
}


@dataclass(slots=True, frozen=True)
class Settings:
    decimal_context: Context
    default_cdi_rate: Decimal
    projection_ipca_rate: Decimal
    # Rate normalizer heuristics: "108% CDI" -> 10.8, "CDI + 1.25" -> 11.25, "IPCA + 6" -> 10.
    cdi_heuristic_threshold: Decimal
    cdi_heuristic_divisor: Decimal
    cdi_heuristic_base: Decimal
    ipca_heuristic_offset: Decimal
    min_issuers: int
    min_sectors: int
    min_indexers: int
    missing_issuer_penalty: Decimal
    missing_sector_penalty: Decimal
    missing_indexer_penalty: Decimal
    issuer_concentration_limit: Decimal
    issuer_concentration_penalty: Decimal
    sector_concentration_limit: Decimal
    sector_concentration_penalty: Decimal
    top_concentration_limit: int
    summary_top_limit: int
    unspecified_sector: str


SETTINGS = Settings(
    decimal_context=Context(prec=28),
    default_cdi_rate=Decimal("14.65"),
    projection_ipca_rate=Decimal("4.62"),
    cdi_heuristic_threshold=Decimal("10"),
    cdi_heuristic_divisor=Decimal("10"),
    cdi_heuristic_base=Decimal("10"),
    ipca_heuristic_offset=Decimal("4"),
    min_issuers=5,
    min_sectors=3,
    min_indexers=2,
    missing_issuer_penalty=Decimal("10"),
    missing_sector_penalty=Decimal("15"),
    missing_indexer_penalty=Decimal("10"),
    issuer_concentration_limit=Decimal("20"),
    issuer_concentration_penalty=Decimal("2"),
    sector_concentration_limit=Decimal("40"),
    sector_concentration_penalty=Decimal("1.5"),
    top_concentration_limit=5,
    summary_top_limit=3,
    unspecified_sector="Não especificado",
)
