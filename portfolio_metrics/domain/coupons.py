"""Coupon projector: 12-month cash-flow schedule for a set of holdings."""
from __future__ import annotations

import logging
from decimal import Decimal, localcontext
from typing import Sequence

from portfolio_metrics.config import SETTINGS

from .models import ALL_MONTHS, Holding, IndexerKind, PaymentFrequency
from .rates import normalize_rate
from .results import (
    MONTHS_IN_YEAR,
    ZERO,
    CouponDetail,
    CouponProjection,
    MonthlyCouponBreakdown,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

PAYMENTS_PER_YEAR = {
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.QUARTERLY: 4,
    PaymentFrequency.SEMIANNUAL: 2,
    PaymentFrequency.ANNUAL: 1,
}


def coupon_base(holding: Holding) -> Decimal:
    """Notional the coupon rate applies to: unit price x quantity, else market value."""
    unit_price = holding.asset.unit_price
    if unit_price is not None:
        return unit_price * holding.quantity
    return holding.value


def annual_coupon(holding: Holding, cdi_rate_percent: Decimal) -> Decimal:
    asset = holding.asset
    rate = normalize_rate(asset.rate_text, asset.indexer_kind)
    base = coupon_base(holding)
    if asset.indexer_kind is IndexerKind.PCT_CDI:
        return (rate / HUNDRED) * (cdi_rate_percent / HUNDRED) * base
    if asset.indexer_kind is IndexerKind.CDI_PLUS:
        return (cdi_rate_percent / HUNDRED + rate / HUNDRED) * base
    # IPCA, PREFIXADO and anything unrecognised pay the stated rate
    return (rate / HUNDRED) * base


def _payment_months(holding: Holding) -> list[int]:
    """Zero-based months in which the holding pays a coupon."""
    asset = holding.asset
    if asset.payment_frequency is PaymentFrequency.MONTHLY:
        months = ALL_MONTHS
    else:
        months = asset.payment_months or frozenset()
    return [m - 1 for m in sorted(months) if 1 <= m <= MONTHS_IN_YEAR]


def _contributions(holding: Holding, cdi_rate_percent: Decimal) -> list[tuple[int, Decimal]]:
    frequency = holding.asset.payment_frequency
    coupon = annual_coupon(holding, cdi_rate_percent) / PAYMENTS_PER_YEAR[frequency]
    return [(month, coupon) for month in _payment_months(holding)]


def project_monthly_coupons(
    holdings: Sequence[Holding],
    cdi_rate_percent: Decimal | None = None,
) -> CouponProjection:
    """Project coupon payments for each calendar month.

    Holdings without a payment frequency or coupon months are skipped. A
    holding whose figures cannot be computed contributes nothing; the rest
    of the projection is unaffected.
    """
    if cdi_rate_percent is None:
        cdi_rate_percent = SETTINGS.default_cdi_rate

    totals = [ZERO] * MONTHS_IN_YEAR
    details: list[list[CouponDetail]] = [[] for _ in range(MONTHS_IN_YEAR)]

    with localcontext(SETTINGS.decimal_context):
        for holding in holdings:
            asset = holding.asset
            if asset.payment_frequency is None or not asset.payment_months:
                logger.debug("No coupon schedule for %s; skipping", asset.code)
                continue
            try:
                contributions = _contributions(holding, Decimal(cdi_rate_percent))
            except (ArithmeticError, TypeError, ValueError, KeyError) as exc:
                logger.warning("Coupon projection failed for %s: %s", asset.code, exc)
                continue
            for month, value in contributions:
                totals[month] += value
                details[month].append(
                    CouponDetail(asset_name=asset.name, value=value, frequency=asset.payment_frequency)
                )

    return CouponProjection(
        totals=tuple(totals),
        details=tuple(
            MonthlyCouponBreakdown(month=index + 1, total=totals[index], details=tuple(details[index]))
            for index in range(MONTHS_IN_YEAR)
        ),
    )
