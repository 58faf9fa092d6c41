"""File-backed repositories for holdings and economic parameters."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Mapping, Sequence

from portfolio_metrics.domain.models import Holding, ReferenceRateTable
from portfolio_metrics.domain.repositories import HoldingsRepository, ReferenceRateRepository
from portfolio_metrics.infrastructure.parsing.holdings_workbook import holdings_to_records, portfolio_ids
from portfolio_metrics.infrastructure.parsing.utils import ensure_bytes
from portfolio_metrics.infrastructure.storage.parameter_store import load_parameters


class WorkbookHoldingsRepository(HoldingsRepository):
    def __init__(self, source: BytesIO | Path | bytes, fmt: str | None = None) -> None:
        if fmt is None:
            fmt = source.suffix.lstrip(".") if isinstance(source, Path) and source.suffix else "xlsx"
        self._source = ensure_bytes(source)
        self._fmt = fmt.lower()

    def list_portfolio_ids(self) -> Sequence[str]:
        return portfolio_ids(BytesIO(self._source), fmt=self._fmt)

    def list_holdings(self, portfolio_id: str | None = None) -> Sequence[Holding]:
        return holdings_to_records(BytesIO(self._source), fmt=self._fmt, portfolio_id=portfolio_id)


class JsonReferenceRateRepository(ReferenceRateRepository):
    def __init__(self, path: Path | None = None, overrides: Mapping[str, object] | None = None) -> None:
        self._path = path
        self._overrides = dict(overrides or {})

    def get_reference_rates(self) -> ReferenceRateTable:
        rates: dict[str, object] = dict(load_parameters(self._path))
        rates.update({name.upper(): value for name, value in self._overrides.items() if value is not None})
        return ReferenceRateTable(rates)
