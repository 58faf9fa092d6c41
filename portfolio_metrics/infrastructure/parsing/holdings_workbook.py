"""Holdings workbook parser producing canonical Holding records.

Expected layout: one row per position, with at least name, code, quantity
and value columns. Header names are matched case- and accent-insensitively
against ``COLUMN_ALIASES``.
"""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Mapping, Sequence

import pandas as pd

from portfolio_metrics.domain.models import AssetDescriptor, Holding
from portfolio_metrics.infrastructure.parsing.classifiers import (
    classify_frequency,
    classify_indexer,
    parse_payment_months,
)
from portfolio_metrics.infrastructure.parsing.utils import (
    clean_text,
    ensure_bytes,
    normalize_header,
    parse_decimal,
)

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Holdings"
EXCEL_ENGINES = {"xlsx": "openpyxl", "xlsm": "openpyxl", "xls": "xlrd"}
SUPPORTED_FORMATS = tuple(EXCEL_ENGINES) + ("csv",)

COLUMN_ALIASES: Mapping[str, tuple[str, ...]] = {
    "portfolio": ("portfolio", "carteira", "portfolio_id"),
    "name": ("name", "nome", "asset_name"),
    "code": ("code", "codigo", "ativo", "ticker"),
    "asset_type": ("type", "tipo", "asset_type"),
    "issuer": ("issuer", "emissor", "emitente", "devedor"),
    "sector": ("sector", "setor", "segmento"),
    "indexer": ("indexer", "indexador"),
    "rate": ("rate", "taxa", "rentabilidade"),
    "unit_price": ("unit_price", "pu", "preco_unitario"),
    "frequency": ("frequency", "frequencia", "periodicidade"),
    "payment_months": ("payment_months", "coupon_months", "cupom", "meses_cupom"),
    "commission_percent": ("commission_percent", "rem%", "rem", "comissao"),
    "quantity": ("quantity", "quantidade", "qtd"),
    "value": ("value", "valor", "market_value"),
}
REQUIRED_COLUMNS = ("name", "code", "quantity", "value")


def _pick_sheet(source: BytesIO, engine: str, preferred: str) -> str:
    sheets = pd.ExcelFile(source, engine=engine).sheet_names
    if not sheets:
        raise ValueError("Holdings workbook has no sheets")
    if preferred in sheets:
        return preferred
    lower_map = {name.lower(): name for name in sheets}
    return lower_map.get(preferred.lower(), sheets[0])


def read_holdings_raw(source: BytesIO, fmt: str = "xlsx") -> pd.DataFrame:
    fmt = fmt.lower().lstrip(".")
    if fmt == "csv":
        return pd.read_csv(source, dtype=str, keep_default_na=False, sep=None, engine="python")
    if fmt not in EXCEL_ENGINES:
        raise ValueError(f"Unsupported holdings format: {fmt!r} (expected one of {SUPPORTED_FORMATS})")
    engine = EXCEL_ENGINES[fmt]
    sheet_name = _pick_sheet(source, engine, DEFAULT_SHEET_NAME)
    source.seek(0)
    return pd.read_excel(source, sheet_name=sheet_name, engine=engine, dtype=str, keep_default_na=False)


def normalize_holdings(df: pd.DataFrame) -> pd.DataFrame:
    lookup = {alias: canonical for canonical, aliases in COLUMN_ALIASES.items() for alias in aliases}
    renames: dict[str, str] = {}
    for column in df.columns:
        canonical = lookup.get(normalize_header(column))
        if canonical and canonical not in renames.values():
            renames[column] = canonical
    work = df[list(renames)].rename(columns=renames)

    missing = [c for c in REQUIRED_COLUMNS if c not in work.columns]
    if missing:
        raise ValueError(f"Holdings sheet is missing required columns: {', '.join(missing)}")

    for column in COLUMN_ALIASES:
        if column not in work.columns:
            work[column] = ""
    return work.fillna("")


def row_to_asset(row: Mapping[str, object]) -> AssetDescriptor:
    name = clean_text(row.get("name"))
    indexer_label = clean_text(row.get("indexer")) or None
    return AssetDescriptor(
        name=name,
        code=clean_text(row.get("code")).upper(),
        issuer=clean_text(row.get("issuer")) or name,
        sector=clean_text(row.get("sector")) or None,
        asset_type=clean_text(row.get("asset_type")).upper(),
        indexer_kind=classify_indexer(indexer_label),
        indexer_label=indexer_label,
        rate_text=clean_text(row.get("rate")),
        unit_price=parse_decimal(row.get("unit_price")),
        payment_frequency=classify_frequency(clean_text(row.get("frequency"))),
        payment_months=parse_payment_months(clean_text(row.get("payment_months"))),
        commission_percent=parse_decimal(row.get("commission_percent")),
    )


def holdings_to_records(
    source: BytesIO | Path | bytes,
    fmt: str = "xlsx",
    portfolio_id: str | None = None,
) -> Sequence[Holding]:
    dataframe = read_holdings_raw(BytesIO(ensure_bytes(source)), fmt=fmt)
    normalized = normalize_holdings(dataframe)

    records: list[Holding] = []
    for idx, row in normalized.iterrows():
        if portfolio_id is not None and clean_text(row.get("portfolio")) != portfolio_id:
            continue
        asset = row_to_asset(row)
        if not asset.name or not asset.code:
            logger.info("Row %s skipped: missing name or code", idx)
            continue
        quantity = parse_decimal(row.get("quantity"))
        value = parse_decimal(row.get("value"))
        if quantity is None or value is None:
            logger.warning("Row %s (%s) skipped: quantity or value is not numeric", idx, asset.code)
            continue
        records.append(Holding(asset=asset, quantity=quantity, value=value))

    logger.info("Read %d holdings%s", len(records), f" for portfolio {portfolio_id}" if portfolio_id else "")
    return records


def portfolio_ids(source: BytesIO | Path | bytes, fmt: str = "xlsx") -> list[str]:
    normalized = normalize_holdings(read_holdings_raw(BytesIO(ensure_bytes(source)), fmt=fmt))
    ids: list[str] = []
    for value in normalized["portfolio"]:
        text = clean_text(value)
        if text and text not in ids:
            ids.append(text)
    return ids
