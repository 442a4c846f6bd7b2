"""
Catalog Query Pipeline Tests
============================

Filtering, sorting, paging and the derived listings, all over in-memory
Product rows (no database).
"""

from datetime import datetime

import pytest
from werkzeug.datastructures import MultiDict

from loomline.core.errors import ValidationError
from loomline.modules.catalog.query import (
    CatalogQuery, parse_price, query_products, sort_products, paginate,
    group_by_category, featured_products, related_products, deal_products,
)


@pytest.fixture
def catalog(make_product):
    return [
        make_product(name="NylonSpinner 3000 Pro", description="High-speed spinning machine",
                     category="Spinning Machines", price="$45,000", featured=True,
                     rating=4.8, created_at=datetime(2023, 5, 15), discount=13),
        make_product(name="ExtruderPro X7", description="Industrial-grade nylon extruder",
                     category="Extruders", price="$68,500", featured=True,
                     rating=4.9, created_at=datetime(2023, 8, 22)),
        make_product(name="TwistMaster 2500", description="Precision twisting for yarn",
                     category="Twisting Machines", price="$38,900",
                     rating=4.6, created_at=datetime(2023, 11, 10)),
        make_product(name="HeatSet 1800", description="Continuous heat setting",
                     category="Heat Treatment", price="$55,200", in_stock=False,
                     rating=4.7, created_at=datetime(2024, 1, 5), discount=11),
        make_product(name="Quote Only Press", description="Contact sales for pricing",
                     category="Extruders", price=None, rating=4.5,
                     created_at=datetime(2023, 9, 30)),
    ]


# ---------------------------------------------------------------------------
# Price parsing
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("raw,expected", [
    ("$45,000", 45000.0),
    ("45000", 45000.0),
    ("1.2.3", None),
    ("$12,500.50", 12500.5),
    ("Call us", None),
    ("", None),
    (None, None),
])
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def test_empty_query_returns_everything(catalog):
    result = query_products(catalog, CatalogQuery())
    assert sorted(p.id for p in result) == sorted(p.id for p in catalog)


def test_search_matches_name_or_description_case_insensitively(catalog):
    by_name = query_products(catalog, CatalogQuery(search_text="extruderpro"))
    by_description = query_products(catalog, CatalogQuery(search_text="YARN"))

    assert [p.name for p in by_name] == ["ExtruderPro X7"]
    assert [p.name for p in by_description] == ["TwistMaster 2500"]


def test_category_set_restricts_membership(catalog):
    result = query_products(catalog, CatalogQuery(categories={"Extruders", "Heat Treatment"}))
    assert {p.category for p in result} == {"Extruders", "Heat Treatment"}
    assert len(result) == 3


def test_in_stock_only(catalog):
    result = query_products(catalog, CatalogQuery(in_stock_only=True))
    assert all(p.in_stock for p in result)
    assert "HeatSet 1800" not in [p.name for p in result]


def test_price_range_is_inclusive(catalog):
    result = query_products(catalog, CatalogQuery(price_min=38900, price_max=45000))
    priced = [p.name for p in result if p.price]
    assert sorted(priced) == ["NylonSpinner 3000 Pro", "TwistMaster 2500"]


def test_product_without_price_passes_any_price_range(catalog):
    """Unpriced machines are never excluded by the price filter."""
    result = query_products(catalog, CatalogQuery(price_min=1_000_000, price_max=2_000_000))
    assert [p.name for p in result] == ["Quote Only Press"]


def test_predicates_combine_with_and(catalog):
    query = CatalogQuery(search_text="machine", categories={"Spinning Machines"},
                         in_stock_only=True, price_max=50000)
    result = query_products(catalog, query)
    assert [p.name for p in result] == ["NylonSpinner 3000 Pro"]


def test_output_is_exactly_the_matching_products(catalog):
    """No duplicates, no omissions."""
    query = CatalogQuery(in_stock_only=True, price_min=40000)
    result = query_products(catalog, query)
    expected = [p for p in catalog if query.matches(p)]

    assert len(result) == len({p.id for p in result})
    assert {p.id for p in result} == {p.id for p in expected}


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def test_featured_sort_is_stable(catalog):
    result = sort_products(catalog, "featured")
    assert [p.featured for p in result] == [True, True, False, False, False]
    # Non-featured keep their input order
    assert [p.name for p in result[2:]] == ["TwistMaster 2500", "HeatSet 1800", "Quote Only Press"]


def test_newest_sort(catalog):
    result = sort_products(catalog, "newest")
    dates = [p.created_at for p in result]
    assert dates == sorted(dates, reverse=True)


def test_price_low_and_high_are_reverses(catalog):
    priced = [p for p in catalog if p.price]
    low = sort_products(priced, "price-low")
    high = sort_products(priced, "price-high")

    assert [p.id for p in low] == list(reversed([p.id for p in high]))
    assert low[0].name == "TwistMaster 2500"


def test_missing_price_sorts_as_zero(catalog):
    result = sort_products(catalog, "price-low")
    assert result[0].name == "Quote Only Press"


def test_rating_sort_descending(catalog):
    result = sort_products(catalog, "rating")
    assert [p.rating for p in result] == [4.9, 4.8, 4.7, 4.6, 4.5]


def test_unknown_sort_key_falls_back_to_featured():
    assert CatalogQuery(sort_key="cheapest-first").sort_key == "featured"


def test_query_does_not_mutate_input(catalog):
    before = [p.id for p in catalog]
    query = CatalogQuery(sort_key="price-high")

    first = query_products(catalog, query)
    second = query_products(catalog, query)

    assert [p.id for p in catalog] == before
    assert [p.id for p in first] == [p.id for p in second]
    assert first is not catalog


# ---------------------------------------------------------------------------
# Request parsing and paging
# ---------------------------------------------------------------------------

def test_from_args_parses_query_string():
    args = MultiDict([
        ("q", " extruder "), ("category", "Extruders,Heat Treatment"), ("category", "Drawing Machines"),
        ("min_price", "1000"), ("max_price", "90000"), ("in_stock", "true"),
        ("sort", "price-high"), ("page", "2"), ("per_page", "10"),
    ])
    query = CatalogQuery.from_args(args)

    assert query.search_text == "extruder"
    assert query.categories == {"Extruders", "Heat Treatment", "Drawing Machines"}
    assert query.price_min == 1000.0
    assert query.price_max == 90000.0
    assert query.in_stock_only is True
    assert query.sort_key == "price-high"
    assert (query.page, query.per_page) == (2, 10)


def test_from_args_rejects_non_numeric_price():
    with pytest.raises(ValidationError):
        CatalogQuery.from_args(MultiDict([("min_price", "cheap")]))


def test_paginate_slices_pages():
    page = paginate(list(range(25)), page=3, per_page=10)
    assert page.items == [20, 21, 22, 23, 24]
    assert page.meta() == {"page": 3, "perPage": 10, "total": 25, "pages": 3}


def test_paginate_without_per_page_returns_everything():
    page = paginate([1, 2, 3])
    assert page.items == [1, 2, 3]
    assert page.pages == 1


def test_paginate_rejects_bad_page():
    with pytest.raises(ValidationError):
        paginate([1, 2, 3], page=0, per_page=2)


# ---------------------------------------------------------------------------
# Derived listings
# ---------------------------------------------------------------------------

def test_group_by_category(make_product):
    products = [make_product(category="A"), make_product(category="A"), make_product(category="B")]
    assert group_by_category(products) == [{"name": "A", "count": 2}, {"name": "B", "count": 1}]


def test_featured_products_newest_first(catalog):
    result = featured_products(catalog, limit=8)
    assert [p.name for p in result] == ["ExtruderPro X7", "NylonSpinner 3000 Pro"]


def test_related_products_prefers_same_category(catalog):
    extruder = catalog[1]
    result = related_products(catalog, extruder.id, limit=2)

    assert extruder.id not in [p.id for p in result]
    assert result[0].name == "Quote Only Press"
    assert len(result) == 2


def test_deal_products(catalog):
    assert {p.name for p in deal_products(catalog)} == {"NylonSpinner 3000 Pro", "HeatSet 1800"}


@pytest.mark.parametrize("name,raw", [
    ("min_price", "nan"),
    ("max_price", "inf"),
    ("max_price", "-Infinity"),
])
def test_from_args_rejects_non_finite_price(name, raw):
    with pytest.raises(ValidationError, match="finite"):
        CatalogQuery.from_args(MultiDict([(name, raw)]))
