from decimal import Decimal

from portfolio_metrics.domain.models import (
    AssetDescriptor,
    Holding,
    IndexerKind,
    PaymentFrequency,
    ReferenceRateTable,
)
from portfolio_metrics.domain.services import compute_metrics

TOLERANCE = Decimal("1e-6")


def make_holding(
    code: str,
    value: str,
    issuer: str = "Issuer",
    sector: str | None = "Energy",
    indexer: IndexerKind = IndexerKind.PREFIXADO,
    rate: str = "12%",
    **asset_fields,
) -> Holding:
    asset = AssetDescriptor(
        name=f"Asset {code}",
        code=code,
        issuer=issuer,
        sector=sector,
        indexer_kind=indexer,
        rate_text=rate,
        **asset_fields,
    )
    return Holding(asset=asset, quantity=Decimal("1"), value=Decimal(value))


def test_empty_portfolio_returns_zero_result():
    metrics = compute_metrics([])

    assert metrics.total_holdings_count == 0
    assert metrics.total_value == 0
    assert metrics.weighted_rate_percent == 0
    assert metrics.weighted_rate_percent_by_indexer == {}
    assert metrics.concentration_by_issuer_percent == {}
    assert metrics.concentration_by_sector_percent == {}
    assert metrics.concentration_by_indexer_percent == {}
    assert list(metrics.monthly_coupon_totals) == [0] * 12
    assert all(not month.details for month in metrics.monthly_coupon_detail)
    assert metrics.total_commission_value == 0


def test_total_value_and_concentrations_sum_to_100():
    holdings = [
        make_holding("A", "1000", issuer="Alpha", sector="Energy"),
        make_holding("B", "333.33", issuer="Beta", sector=None, indexer=IndexerKind.IPCA, rate="IPCA + 6%"),
        make_holding("C", "777.77", issuer="Alpha", sector="Banks", indexer=IndexerKind.PCT_CDI, rate="108% CDI"),
    ]

    metrics = compute_metrics(holdings)

    assert metrics.total_value == Decimal("2111.10")
    for concentration in (
        metrics.concentration_by_issuer_percent,
        metrics.concentration_by_sector_percent,
        metrics.concentration_by_indexer_percent,
    ):
        assert abs(sum(concentration.values()) - 100) < TOLERANCE
    assert set(metrics.concentration_by_issuer_percent) == {"Alpha", "Beta"}
    assert set(metrics.concentration_by_indexer_percent) == {"PREFIXADO", "IPCA", "%CDI"}


def test_missing_sector_uses_placeholder():
    metrics = compute_metrics([make_holding("A", "100", sector=None)])

    assert metrics.concentration_by_sector_percent == {"Não especificado": Decimal("100")}


def test_weighted_rate_is_convex_combination_of_identical_rates():
    holdings = [
        make_holding("A", "1", indexer=IndexerKind.PCT_CDI, rate="108% CDI"),
        make_holding("B", "1", indexer=IndexerKind.PCT_CDI, rate="108% CDI"),
        make_holding("C", "1", indexer=IndexerKind.PCT_CDI, rate="108% CDI"),
        make_holding("D", "917.13", indexer=IndexerKind.PCT_CDI, rate="108% CDI"),
    ]

    metrics = compute_metrics(holdings)

    assert metrics.weighted_rate_percent == Decimal("10.8")
    assert metrics.weighted_rate_percent_by_indexer == {"%CDI": Decimal("10.8")}


def test_weighted_rate_by_indexer_renormalizes_within_group():
    holdings = [
        make_holding("A", "100", rate="10%"),
        make_holding("B", "300", rate="14%"),
        make_holding("C", "600", indexer=IndexerKind.IPCA, rate="IPCA + 6%"),
    ]

    metrics = compute_metrics(holdings)

    assert metrics.weighted_rate_percent_by_indexer["PREFIXADO"] == Decimal("13")
    assert metrics.weighted_rate_percent_by_indexer["IPCA"] == Decimal("10")
    # (100*10 + 300*14 + 600*10) / 1000
    assert metrics.weighted_rate_percent == Decimal("11.2")


def test_unknown_indexers_group_by_label():
    holdings = [
        make_holding("A", "100", indexer=IndexerKind.UNKNOWN, indexer_label="SELIC"),
        make_holding("B", "100", indexer=IndexerKind.UNKNOWN, indexer_label="cdi"),
    ]

    metrics = compute_metrics(holdings)

    assert metrics.concentration_by_indexer_percent == {"SELIC": Decimal("50"), "CDI": Decimal("50")}


def test_zero_total_value_never_divides():
    metrics = compute_metrics([make_holding("A", "0"), make_holding("B", "0", issuer="Other")])

    assert metrics.total_value == 0
    assert metrics.weighted_rate_percent == 0
    assert sum(metrics.concentration_by_issuer_percent.values()) == 0


def test_commission_uses_percentage_of_value():
    holdings = [
        make_holding("A", "1000", commission_percent=Decimal("2")),
        make_holding("B", "500", commission_percent=Decimal("1.5")),
        make_holding("C", "700"),
    ]

    assert compute_metrics(holdings).total_commission_value == Decimal("27.5")


def test_coupon_projection_uses_reference_cdi():
    holding = make_holding(
        "A",
        "1000",
        indexer=IndexerKind.PCT_CDI,
        rate="110%",
        unit_price=Decimal("1000"),
        payment_frequency=PaymentFrequency.ANNUAL,
        payment_months=frozenset({12}),
    )

    with_reference = compute_metrics([holding], ReferenceRateTable({"cdi": "13"}))
    with_default = compute_metrics([holding])

    assert with_reference.monthly_coupon_totals[11] == Decimal("143")
    assert with_default.monthly_coupon_totals[11] == Decimal("161.15")


def test_compute_metrics_is_idempotent():
    holdings = [
        make_holding("A", "1000", payment_frequency=PaymentFrequency.MONTHLY, payment_months=frozenset({1})),
        make_holding("B", "250.5", issuer="Beta", indexer=IndexerKind.CDI_PLUS, rate="CDI + 1%"),
    ]

    assert compute_metrics(holdings) == compute_metrics(list(holdings))


def test_reference_cdi_in_brazilian_notation():
    holding = make_holding(
        "A",
        "1000",
        indexer=IndexerKind.PCT_CDI,
        rate="110%",
        unit_price=Decimal("1000"),
        payment_frequency=PaymentFrequency.ANNUAL,
        payment_months=frozenset({12}),
    )

    metrics = compute_metrics([holding], {"CDI": "13,5"})

    assert metrics.monthly_coupon_totals[11] == Decimal("148.5")


def test_non_finite_or_garbage_reference_rates_fall_back_to_default():
    holding = make_holding(
        "A",
        "1000",
        indexer=IndexerKind.PCT_CDI,
        rate="110%",
        unit_price=Decimal("1000"),
        payment_frequency=PaymentFrequency.ANNUAL,
        payment_months=frozenset({12}),
    )

    for cdi in (float("nan"), float("inf"), Decimal("NaN"), "n/a"):
        metrics = compute_metrics([holding], {"CDI": cdi})
        assert metrics.monthly_coupon_totals[11] == Decimal("161.15")


def test_reference_rate_table_keeps_only_finite_numbers():
    table = ReferenceRateTable({"cdi": "14,65", "ipca": float("nan"), "selic": 13.75, "igpm": "-0,5", "x": None})

    assert table.get("CDI") == Decimal("14.65")
    assert table.get("SELIC") == Decimal("13.75")
    assert table.get("IGPM") == Decimal("-0.5")
    assert "IPCA" not in table
    assert len(table) == 3
