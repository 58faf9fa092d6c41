from decimal import Decimal

from portfolio_metrics.domain.coupons import annual_coupon, project_monthly_coupons
from portfolio_metrics.domain.models import (
    ALL_MONTHS,
    AssetDescriptor,
    Holding,
    IndexerKind,
    PaymentFrequency,
)


def make_holding(
    name: str = "Bond",
    rate: str = "12%",
    indexer: IndexerKind = IndexerKind.PREFIXADO,
    frequency: PaymentFrequency | None = PaymentFrequency.MONTHLY,
    months: frozenset[int] | None = ALL_MONTHS,
    unit_price: str | None = "1000",
    quantity: str = "1",
    value: str = "1000",
) -> Holding:
    asset = AssetDescriptor(
        name=name,
        code=name.upper(),
        issuer="Issuer",
        indexer_kind=indexer,
        rate_text=rate,
        unit_price=Decimal(unit_price) if unit_price is not None else None,
        payment_frequency=frequency,
        payment_months=months,
    )
    return Holding(asset=asset, quantity=Decimal(quantity), value=Decimal(value))


def test_monthly_frequency_distributes_evenly():
    projection = project_monthly_coupons([make_holding(months=frozenset({6}))])

    assert list(projection.totals) == [Decimal("10")] * 12
    assert all(len(month.details) == 1 for month in projection.details)


def test_quarterly_respects_payment_months():
    holding = make_holding(rate="8%", frequency=PaymentFrequency.QUARTERLY, months=frozenset({3, 9}))

    totals = project_monthly_coupons([holding]).totals

    assert totals[2] == Decimal("20")
    assert totals[8] == Decimal("20")
    assert all(total == 0 for index, total in enumerate(totals) if index not in (2, 8))


def test_semiannual_cdi_plus_adds_cdi_to_rate():
    holding = make_holding(
        rate="2%",
        indexer=IndexerKind.CDI_PLUS,
        frequency=PaymentFrequency.SEMIANNUAL,
        months=frozenset({5, 11}),
    )

    totals = project_monthly_coupons([holding], Decimal("14.65")).totals

    assert totals[4] == Decimal("83.25")
    assert totals[10] == Decimal("83.25")


def test_annual_frequency_pays_in_every_listed_month():
    holding = make_holding(rate="10%", frequency=PaymentFrequency.ANNUAL, months=frozenset({1, 7}))

    totals = project_monthly_coupons([holding]).totals

    assert totals[0] == Decimal("100")
    assert totals[6] == Decimal("100")


def test_unit_price_times_quantity_is_the_base():
    holding = make_holding(rate="12%", quantity="3", value="2500", frequency=PaymentFrequency.ANNUAL, months=frozenset({12}))

    assert annual_coupon(holding, Decimal("14.65")) == Decimal("360")
    assert project_monthly_coupons([holding]).totals[11] == Decimal("360")


def test_market_value_is_the_base_without_unit_price():
    holding = make_holding(unit_price=None, value="2500", frequency=PaymentFrequency.ANNUAL, months=frozenset({12}))

    assert project_monthly_coupons([holding]).totals[11] == Decimal("300")


def test_percentage_of_cdi_multiplies_rates():
    holding = make_holding(indexer=IndexerKind.PCT_CDI, rate="110%", frequency=PaymentFrequency.ANNUAL, months=frozenset({6}))

    assert project_monthly_coupons([holding], Decimal("10")).totals[5] == Decimal("110")


def test_holdings_without_schedule_are_skipped():
    no_frequency = make_holding(name="NoFreq", frequency=None)
    no_months = make_holding(name="NoMonths", months=None)

    projection = project_monthly_coupons([no_frequency, no_months])

    assert list(projection.totals) == [0] * 12
    assert all(not month.details for month in projection.details)


def test_failing_holding_does_not_abort_projection():
    broken = Holding(
        asset=make_holding(name="Broken").asset,
        quantity=None,
        value=Decimal("1000"),
    )

    projection = project_monthly_coupons([broken, make_holding(name="Good")])

    assert list(projection.totals) == [Decimal("10")] * 12
    assert [d.asset_name for d in projection.details[0].details] == ["Good"]


def test_totals_match_detail_contributions():
    holdings = [
        make_holding(name="A", rate="7%"),
        make_holding(name="B", rate="9,5%", frequency=PaymentFrequency.QUARTERLY, months=frozenset({3, 6, 9, 12})),
        make_holding(name="C", rate="IPCA + 5%", indexer=IndexerKind.IPCA, frequency=PaymentFrequency.SEMIANNUAL, months=frozenset({6, 12})),
    ]

    projection = project_monthly_coupons(holdings)

    for index, breakdown in enumerate(projection.details):
        assert breakdown.month == index + 1
        assert breakdown.total == projection.totals[index]
        assert projection.totals[index] == sum(detail.value for detail in breakdown.details)
    december = projection.details[11].details
    assert [(d.asset_name, d.frequency) for d in december] == [
        ("A", PaymentFrequency.MONTHLY),
        ("B", PaymentFrequency.QUARTERLY),
        ("C", PaymentFrequency.SEMIANNUAL),
    ]
