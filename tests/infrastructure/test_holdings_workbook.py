from decimal import Decimal
from io import BytesIO

import pandas as pd
import pytest

from portfolio_metrics.domain.models import IndexerKind, PaymentFrequency
from portfolio_metrics.infrastructure.parsing.holdings_workbook import holdings_to_records, portfolio_ids
from portfolio_metrics.infrastructure.repositories.file_repositories import WorkbookHoldingsRepository


def build_workbook(rows: list[dict], sheet_name: str = "Holdings") -> bytes:
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame({"notes": ["ignore me"]}).to_excel(writer, sheet_name="Cover", index=False)
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


ROWS = [
    {
        "Carteira": "P1",
        "Nome": "Debenture Energia",
        "Código": "ener11",
        "Emissor": "Energia SA",
        "Setor": "Energia",
        "Indexador": "IPCA+",
        "Taxa": "IPCA + 6,5%",
        "PU": "1000",
        "Periodicidade": "Semestral",
        "Meses Cupom": "06 E 12",
        "REM%": "1,5",
        "Quantidade": "10",
        "Valor": "10250.50",
    },
    {
        "Carteira": "P1",
        "Nome": "CDB Banco",
        "Código": "CDB22",
        "Emissor": "",
        "Setor": "",
        "Indexador": "% CDI",
        "Taxa": "108% CDI",
        "PU": "",
        "Periodicidade": "",
        "Meses Cupom": "",
        "REM%": "",
        "Quantidade": "5",
        "Valor": "5000",
    },
    {
        "Carteira": "P2",
        "Nome": "LTN",
        "Código": "LTN27",
        "Emissor": "Tesouro",
        "Setor": "Governo",
        "Indexador": "Prefixado",
        "Taxa": "12,5%",
        "PU": "",
        "Periodicidade": "Mensal",
        "Meses Cupom": "todos",
        "REM%": "",
        "Quantidade": "2",
        "Valor": "1800",
    },
    {
        "Carteira": "P2",
        "Nome": "",
        "Código": "ORPHAN",
        "Emissor": "",
        "Setor": "",
        "Indexador": "",
        "Taxa": "",
        "PU": "",
        "Periodicidade": "",
        "Meses Cupom": "",
        "REM%": "",
        "Quantidade": "1",
        "Valor": "1",
    },
    {
        "Carteira": "P2",
        "Nome": "Broken",
        "Código": "BRK",
        "Emissor": "",
        "Setor": "",
        "Indexador": "",
        "Taxa": "",
        "PU": "",
        "Periodicidade": "",
        "Meses Cupom": "",
        "REM%": "",
        "Quantidade": "n/a",
        "Valor": "100",
    },
]


def test_xlsx_rows_become_holdings():
    holdings = holdings_to_records(build_workbook(ROWS), fmt="xlsx")

    assert [h.asset.code for h in holdings] == ["ENER11", "CDB22", "LTN27"]
    energy = holdings[0]
    assert energy.asset.indexer_kind is IndexerKind.IPCA
    assert energy.asset.payment_frequency is PaymentFrequency.SEMIANNUAL
    assert energy.asset.payment_months == frozenset({6, 12})
    assert energy.asset.unit_price == Decimal("1000")
    assert energy.asset.commission_percent == Decimal("1.5")
    assert energy.quantity == Decimal("10")
    assert energy.value == Decimal("10250.50")

    cdb = holdings[1]
    assert cdb.asset.issuer == "CDB Banco"
    assert cdb.asset.sector is None
    assert cdb.asset.indexer_kind is IndexerKind.PCT_CDI
    assert cdb.asset.payment_frequency is None
    assert cdb.asset.unit_price is None


def test_portfolio_filter_and_ids():
    content = build_workbook(ROWS)

    assert portfolio_ids(content) == ["P1", "P2"]
    assert [h.asset.code for h in holdings_to_records(content, portfolio_id="P2")] == ["LTN27"]


def test_sheet_lookup_falls_back_to_first_sheet():
    buffer = BytesIO()
    pd.DataFrame(ROWS[:1]).to_excel(buffer, sheet_name="Posicoes", index=False, engine="openpyxl")

    holdings = holdings_to_records(buffer.getvalue(), fmt="xlsx")

    assert [h.asset.code for h in holdings] == ["ENER11"]


def test_csv_with_semicolons_and_brazilian_numbers(tmp_path):
    path = tmp_path / "holdings.csv"
    path.write_text(
        "name;code;issuer;indexer;rate;frequency;coupon_months;quantity;value\n"
        "Debenture A;DEBA11;Alpha;CDI+;CDI + 1,25%;Trimestral;3 6 9 12;100;1.250,75\n"
        "Debenture B;DEBB11;Beta;IPCA;IPCA + 5%;Anual;12;1;999\n",
        encoding="utf-8",
    )

    repository = WorkbookHoldingsRepository(path)
    holdings = repository.list_holdings()

    assert [h.value for h in holdings] == [Decimal("1250.75"), Decimal("999")]
    assert holdings[0].asset.indexer_kind is IndexerKind.CDI_PLUS
    assert holdings[0].asset.payment_months == frozenset({3, 6, 9, 12})
    assert repository.list_portfolio_ids() == []


def test_missing_required_columns_raise():
    content = build_workbook([{"Nome": "A", "Valor": "1"}])

    with pytest.raises(ValueError, match="code, quantity"):
        holdings_to_records(content)


def test_unsupported_format_raises():
    with pytest.raises(ValueError, match="Unsupported holdings format"):
        holdings_to_records(b"irrelevant", fmt="ods")
