"""Tests for the suggestion engine."""

from __future__ import annotations

from .models import Category, Product
from .suggestions import (
    build_trending_pool,
    did_you_mean,
    suggest,
    suggest_categories,
    suggest_products,
)


def _p(pid: str, name: str) -> Product:
    return Product(id=pid, name=name)


def test_product_suggestions_prefer_prefix_then_shorter_name() -> None:
    trending = [_p("1", "Sneaker Socks"), _p("2", "Blue Sneakers"), _p("3", "Sneakers")]
    results = [_p("3", "Sneakers"), _p("4", "Running Sneaker X")]

    names = [p.name for p in suggest_products("Sneak", trending, results)]

    assert names == ["Sneakers", "Sneaker Socks", "Blue Sneakers", "Running Sneaker X"]


def test_product_suggestions_are_unique_and_capped() -> None:
    trending = [_p(str(i), f"Shoe {i:02d}") for i in range(10)]
    results = [_p("0", "Shoe 00")]

    suggestions = suggest_products("shoe", trending, results)

    assert len(suggestions) == 6
    assert len({p.id for p in suggestions}) == 6


def test_product_suggestions_require_substring() -> None:
    assert suggest_products("xyz", [_p("1", "Sneakers")]) == []


def test_product_suggestions_empty_query() -> None:
    assert suggest_products("  ", [_p("1", "Sneakers")]) == []


def test_category_suggestions_filter_in_catalog_order() -> None:
    categories = [
        Category(id="c1", name="Running Shoes"),
        Category(id="c2", name="Shirts"),
        Category(id="c3", name="Shoe Care"),
    ]
    assert [c.id for c in suggest_categories("SHOE", categories)] == ["c1", "c3"]


def test_category_accepts_backend_id_field() -> None:
    category = Category.model_validate({"_id": 7, "name": "Bags"})
    assert category.id == "7"


def test_suggest_combines_both_lists() -> None:
    result = suggest(
        "bag",
        trending=[_p("1", "Bag Strap")],
        results=[],
        categories=[Category(id="c", name="Bags")],
    )
    assert [p.id for p in result.products] == ["1"]
    assert [c.id for c in result.categories] == ["c"]


def test_build_trending_pool_dedupes_first_wins() -> None:
    featured = [_p("1", "A"), _p("2", "B")]
    bestsellers = [_p("2", "B (again)"), _p("3", "C")]

    pool = build_trending_pool(featured, bestsellers)

    assert [p.id for p in pool] == ["1", "2", "3"]
    assert pool[1].name == "B"


def test_build_trending_pool_limit() -> None:
    pool = build_trending_pool([_p(str(i), str(i)) for i in range(30)], limit=20)
    assert len(pool) == 20


def test_did_you_mean_closest_length_first() -> None:
    trending = [_p("1", "Leather Wallet"), _p("2", "Cap"), _p("3", "Socks"), _p("4", "")]
    assert did_you_mean("sokcs", trending) == ["Socks", "Cap", "Leather Wallet"]


def test_did_you_mean_blank_query() -> None:
    assert did_you_mean("", [_p("1", "Cap")]) == []
