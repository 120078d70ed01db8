"""Tests for the aggregator folds."""

from datetime import date

import pandas as pd
import pytest

from pos_analytics.aggregate import (
    Totals,
    by_category,
    by_hour_shift,
    by_location,
    by_payment_method,
    by_weekday,
    daily_series,
    low_rotation,
    per_location_totals,
    top_products,
    totals,
)
from pos_analytics.clock import BusinessDayClock
from pos_analytics.locations import LocationRegistry
from pos_analytics.records import LineItem, PaymentMethod


def test_totals_of_empty_set() -> None:
    t = totals([])
    assert t == Totals(count=0, revenue=0.0, item_count=0)
    assert t.average_ticket == 0.0


def test_totals(scenario_sales) -> None:
    t = totals(scenario_sales)
    assert t.count == 4
    assert t.revenue == pytest.approx(100.0)
    assert t.item_count == 4
    assert t.average_ticket == pytest.approx(25.0)


def test_totals_is_order_independent(scenario_sales) -> None:
    assert totals(scenario_sales) == totals(list(reversed(scenario_sales)))


def test_per_location_totals(make_sale) -> None:
    sales = [
        make_sale("2024-03-15T15:00:00Z", 10.0, location_id=1),
        make_sale("2024-03-15T15:00:00Z", 25.0, location_id=2),
        make_sale("2024-03-15T16:00:00Z", 5.0, location_id=2),
    ]
    assert per_location_totals(sales, 2).revenue == pytest.approx(30.0)
    assert per_location_totals(sales, 3).count == 0

    parts = sum(per_location_totals(sales, i).revenue for i in (1, 2))
    assert parts == pytest.approx(totals(sales).revenue), "locations should partition revenue"


def _catalog_sales(make_sale):
    return [
        make_sale(
            "2024-03-15T13:00:00Z",
            items=[LineItem("a", "Alfajor", 2, 5.0), LineItem("b", "Café", 2, 8.0)],
        ),
        make_sale(
            "2024-03-15T14:00:00Z",
            items=[LineItem("c", "Medialuna", 1, 3.0), LineItem(None, "Agua", 1, 2.0)],
        ),
        make_sale("2024-03-15T15:00:00Z", items=[LineItem(None, "Agua", 1, 2.0)]),
    ]


def test_top_products_by_quantity_keeps_first_seen_ties(make_sale) -> None:
    ranked = top_products(_catalog_sales(make_sale), limit=None)

    assert ranked["product_name"].tolist() == ["Alfajor", "Café", "Agua", "Medialuna"]
    assert ranked["quantity"].tolist() == [2, 2, 2, 1]


def test_top_products_by_revenue(make_sale) -> None:
    ranked = top_products(_catalog_sales(make_sale), limit=2, sort_key="revenue")
    assert ranked["product_name"].tolist() == ["Café", "Alfajor"]
    assert ranked["revenue"].tolist() == pytest.approx([16.0, 10.0])


def test_top_products_groups_by_name_when_id_missing(make_sale) -> None:
    ranked = top_products(_catalog_sales(make_sale), limit=None)
    agua = ranked[ranked["product_name"] == "Agua"].iloc[0]
    assert agua["product_key"] == "name:Agua"
    assert agua["quantity"] == 2


def test_top_products_consistent_with_totals(make_sale) -> None:
    sales = _catalog_sales(make_sale)
    ranked = top_products(sales, limit=None)
    assert ranked["quantity"].sum() == totals(sales).item_count
    assert ranked["revenue"].sum() == pytest.approx(totals(sales).revenue)


def test_low_rotation_is_ascending(make_sale) -> None:
    ranked = low_rotation(_catalog_sales(make_sale), limit=1)
    assert ranked["product_name"].tolist() == ["Medialuna"]


def test_top_products_rejects_bad_arguments(scenario_sales) -> None:
    with pytest.raises(ValueError):
        top_products(scenario_sales, sort_key="margin")
    with pytest.raises(ValueError):
        top_products(scenario_sales, order="sideways")


def test_top_products_empty() -> None:
    assert top_products([]).empty


def test_by_payment_method_partitions_revenue(scenario_sales, make_sale) -> None:
    sales = scenario_sales + [make_sale("2024-03-15T17:00:00Z", 5.0, payment_method=None)]
    df = by_payment_method(sales)

    assert df["payment_method"].tolist() == ["Cash", "Credit", "Unknown"]
    assert df["revenue"].tolist() == pytest.approx([60.0, 40.0, 5.0])
    assert df["sale_count"].tolist() == [3, 1, 1]
    assert df["revenue"].sum() == pytest.approx(totals(sales).revenue)
    assert df["share"].sum() == pytest.approx(100.0)


def test_by_payment_method_split_mixed(make_sale) -> None:
    mixed = make_sale(
        "2024-03-15T15:00:00Z",
        150.0,
        payment_method=PaymentMethod.MIXED,
        breakdown=[(PaymentMethod.CASH, 100.0), (PaymentMethod.CREDIT, 50.0)],
    )
    assert by_payment_method([mixed])["payment_method"].tolist() == ["Mixed"]

    split = by_payment_method([mixed], split_mixed=True)
    assert split["payment_method"].tolist() == ["Cash", "Credit"]
    assert split["revenue"].sum() == pytest.approx(150.0)
    assert "sale_count" not in split.columns
    assert split["payment_count"].tolist() == [1, 1], "one payment part per method"


def test_by_hour_shift(scenario_sales, clock: BusinessDayClock) -> None:
    df = by_hour_shift(scenario_sales, clock)

    assert df["shift"].tolist() == ["morning", "midday", "afternoon", "night"]
    assert df["revenue"].tolist() == pytest.approx([10.0, 20.0, 40.0, 30.0])
    assert df["percent"].tolist() == pytest.approx([10.0, 20.0, 40.0, 30.0])


def test_by_hour_shift_excludes_closed_hours(scenario_sales, make_sale, clock: BusinessDayClock) -> None:
    """A sale at 04:00 local counts towards no shift."""
    sales = scenario_sales + [make_sale("2024-03-15T07:00:00Z", 1000.0)]
    df = by_hour_shift(sales, clock)

    assert df["revenue"].sum() == pytest.approx(100.0)
    assert df["percent"].sum() == pytest.approx(100.0)


def test_by_hour_shift_empty(clock: BusinessDayClock) -> None:
    df = by_hour_shift([], clock)
    assert len(df) == 4
    assert df["revenue"].sum() == 0
    assert (df["percent"] == 0).all()


def test_by_weekday(scenario_sales, clock: BusinessDayClock) -> None:
    df = by_weekday(scenario_sales, clock)

    assert len(df) == 7
    assert df["iso_weekday"].tolist() == [1, 2, 3, 4, 5, 6, 7]
    assert df["weekday"].iloc[0] == "Lunes"
    assert df.loc[df["iso_weekday"] == 4, "revenue"].item() == pytest.approx(40.0)
    assert df.loc[df["iso_weekday"] == 5, "revenue"].item() == pytest.approx(60.0)
    assert df.loc[df["iso_weekday"] == 6, "sale_count"].item() == 0


def test_daily_series(scenario_sales, clock: BusinessDayClock) -> None:
    """The 23:30 sale belongs to the same business day as the morning ones."""
    df = daily_series(scenario_sales, 2, clock, now="2024-03-15T20:00:00Z")

    assert df["business_day"].tolist() == [date(2024, 3, 14), date(2024, 3, 15)]
    assert df["total"].tolist() == pytest.approx([40.0, 60.0])
    assert df["location_1"].tolist() == pytest.approx([40.0, 60.0])


def test_daily_series_window_and_location_columns(make_sale, clock: BusinessDayClock) -> None:
    sales = [
        make_sale("2024-03-10T15:00:00Z", 99.0, location_id=1),
        make_sale("2024-03-14T15:00:00Z", 10.0, location_id=1),
        make_sale("2024-03-15T15:00:00Z", 20.0, location_id=2),
    ]
    df = daily_series(sales, 3, clock, locations=[1, 2, 3])

    assert list(df.columns) == ["business_day", "total", "location_1", "location_2", "location_3"]
    assert df["business_day"].tolist() == [date(2024, 3, 14), date(2024, 3, 15)]
    assert df["location_2"].tolist() == pytest.approx([0.0, 20.0])
    assert df["location_3"].sum() == 0
    assert (df["total"] == df[["location_1", "location_2", "location_3"]].sum(axis=1)).all()


def test_daily_series_rejects_empty_window(scenario_sales, clock: BusinessDayClock) -> None:
    with pytest.raises(ValueError):
        daily_series(scenario_sales, 0, clock)


def test_daily_series_empty(clock: BusinessDayClock) -> None:
    df = daily_series([], 7, clock, locations=[1])
    assert df.empty
    assert list(df.columns) == ["business_day", "total", "location_1"]


def test_by_location_lists_every_registered_location(scenario_sales) -> None:
    df = by_location(scenario_sales, LocationRegistry())

    assert df["location_id"].tolist() == [1, 2, 3]
    assert df["name"].tolist() == ["Costa del Este", "Mar de las Pampas", "Costa Esmeralda"]
    assert df["revenue"].tolist() == pytest.approx([100.0, 0.0, 0.0])
    assert df["share"].tolist() == pytest.approx([100.0, 0.0, 0.0])


def test_by_location_includes_unregistered(make_sale) -> None:
    df = by_location([make_sale("2024-03-15T15:00:00Z", 5.0, location_id=9)], LocationRegistry({1: "Uno"}))
    assert df["name"].tolist() == ["Uno", "POS 9"]


def test_by_category(make_sale) -> None:
    sales = [
        make_sale(
            "2024-03-15T15:00:00Z",
            items=[
                LineItem("a", "Agua", 2, 2.0, category="Bebidas"),
                LineItem("b", "Alfajor", 1, 5.0),
            ],
        ),
        make_sale("2024-03-15T16:00:00Z", items=[LineItem("c", "Gaseosa", 1, 3.0, category="Bebidas")]),
    ]
    df = by_category(sales)

    assert df["category"].tolist() == ["Bebidas", "Sin categoría"]
    assert df["quantity"].tolist() == [3, 1]
    assert df["revenue"].tolist() == pytest.approx([7.0, 5.0])


def test_aggregations_are_idempotent(scenario_sales, clock: BusinessDayClock) -> None:
    first = by_hour_shift(scenario_sales, clock)
    second = by_hour_shift(scenario_sales, clock)
    pd.testing.assert_frame_equal(first, second)
