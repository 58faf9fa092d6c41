"""Domain models for portfolio metrics.

These dataclasses capture the already-normalized shape of an asset and a
position in a portfolio. Free text (indexer names, payment frequencies,
coupon months) is classified once at ingestion, see
``portfolio_metrics.infrastructure.parsing.classifiers``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping

from .numbers import to_decimal

ALL_MONTHS = frozenset(range(1, 13))


class IndexerKind(str, Enum):
    IPCA = "IPCA"
    PREFIXADO = "PREFIXADO"
    PCT_CDI = "%CDI"
    CDI_PLUS = "CDI+"
    UNKNOWN = "UNKNOWN"


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"


@dataclass(frozen=True)
class AssetDescriptor:
    """Fixed-income asset as consumed by the metrics engine."""

    name: str
    code: str
    issuer: str
    indexer_kind: IndexerKind = IndexerKind.UNKNOWN
    rate_text: str = ""
    sector: str | None = None
    asset_type: str = ""
    indexer_label: str | None = None
    unit_price: Decimal | None = None
    payment_frequency: PaymentFrequency | None = None
    payment_months: frozenset[int] | None = None
    commission_percent: Decimal | None = None

    @property
    def indexer_key(self) -> str:
        """Key used when grouping by indexer.

        Unknown kinds keep their raw label so that e.g. SELIC and plain CDI
        assets are not folded into a single bucket.
        """
        if self.indexer_kind is IndexerKind.UNKNOWN and self.indexer_label:
            return self.indexer_label.strip().upper()
        return self.indexer_kind.value


@dataclass(frozen=True)
class Holding:
    """One asset position inside a portfolio."""

    asset: AssetDescriptor
    quantity: Decimal
    value: Decimal


@dataclass(frozen=True)
class ReferenceRateTable:
    """Current economic parameters (annual %), keyed case-insensitively."""

    rates: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # unparseable or non-finite values are dropped so lookups fall back
        normalized: dict[str, Decimal] = {}
        for name, value in self.rates.items():
            if name is None:
                continue
            parsed = to_decimal(value)
            if parsed is not None:
                normalized[str(name).strip().upper()] = parsed
        object.__setattr__(self, "rates", MappingProxyType(normalized))

    @classmethod
    def coerce(cls, value: ReferenceRateTable | Mapping[str, object] | None) -> ReferenceRateTable:
        if isinstance(value, cls):
            return value
        return cls(dict(value or {}))

    def get(self, name: str, default: Decimal | None = None) -> Decimal | None:
        return self.rates.get(name.strip().upper(), default)

    def resolve(self, name: str, fallback: Decimal) -> Decimal:
        """Return the named rate, or ``fallback`` when absent or zero."""
        value = self.get(name)
        return value if value else fallback

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().upper() in self.rates

    def __iter__(self) -> Iterator[str]:
        return iter(self.rates)

    def __len__(self) -> int:
        return len(self.rates)
