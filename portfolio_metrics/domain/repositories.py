"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from .models import Holding, ReferenceRateTable


class HoldingsRepository(Protocol):
    """Provides the holdings (asset joined with position) of each portfolio."""

    def list_portfolio_ids(self) -> Sequence[str]:
        ...

    def list_holdings(self, portfolio_id: str | None = None) -> Sequence[Holding]:
        ...


class ReferenceRateRepository(Protocol):
    """Provides the current economic parameters."""

    def get_reference_rates(self) -> ReferenceRateTable:
        ...
