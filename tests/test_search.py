"""Tests for product search ranking."""

from stregsystem_tui.models import Product
from stregsystem_tui.money import Money
from stregsystem_tui.search import normalize_query, rank_products


def product(product_id: str, name: str) -> Product:
    return Product(product_id, name, Money(100))


def ids(results: list[Product]) -> list[str]:
    return [p.id for p in results]


def test_empty_query_returns_nothing() -> None:
    catalog = {"1": product("1", "Beer")}
    assert rank_products("", catalog, {"beer": 1}) == []
    assert rank_products(normalize_query("   "), catalog, {}) == []


def test_exact_numeric_id_ranks_first() -> None:
    catalog = {
        "1": product("1", "Item 12 pack"),
        "12": product("12", "Cocio"),
        "120": product("120", "Other"),
    }
    aliases = {"12": 1, "x12": 120}
    results = rank_products("12", catalog, aliases)
    # "120" only shows up through its alias: the id-prefix phase is skipped after an exact hit.
    assert ids(results) == ["12", "1", "120"]


def test_exact_id_accepts_leading_zeros() -> None:
    catalog = {"7": product("7", "Coffee"), "70": product("70", "Tea")}
    assert ids(rank_products("007", catalog, {})) == ["7"]


def test_numeric_prefix_when_no_exact_id() -> None:
    catalog = {"130": product("130", "A"), "131": product("131", "B"), "213": product("213", "C")}
    assert ids(rank_products("13", catalog, {})) == ["130", "131"]


def test_alias_tiers_outrank_name_matches() -> None:
    catalog = {
        "1": product("1", "beer"),
        "2": product("2", "Exact target"),
        "3": product("3", "Prefix target"),
        "4": product("4", "Partial target"),
    }
    aliases = {"my beer thing": 4, "beerbong": 3, "beer": 2}
    assert ids(rank_products("beer", catalog, aliases)) == ["2", "3", "4", "1"]


def test_alias_skips_products_already_found() -> None:
    catalog = {"5": product("5", "Five")}
    results = rank_products("5", catalog, {"5": 5, "five5": 5})
    assert ids(results) == ["5"]


def test_name_prefix_beats_substring_and_ties_keep_order() -> None:
    catalog = {
        "1": product("1", "Cola Zero Sugar Extra"),
        "2": product("2", "Pepsi Cola"),
        "3": product("3", "Cola"),
    }
    assert ids(rank_products("cola", catalog, {})) == ["1", "3", "2"]


def test_closer_length_wins_among_substring_matches() -> None:
    catalog = {
        "1": product("1", "Big bottle of cola"),
        "2": product("2", "Xcola"),
    }
    assert ids(rank_products("cola", catalog, {})) == ["2", "1"]


def test_ties_keep_discovery_order() -> None:
    catalog = {"1": product("1", "Xa"), "2": product("2", "Xb"), "3": product("3", "Xc")}
    assert ids(rank_products("x", catalog, {})) == ["1", "2", "3"]


def test_at_most_ten_unique_results() -> None:
    catalog = {str(i): product(str(i), f"Soda {i}") for i in range(100, 140)}
    aliases = {f"soda{i}": i for i in range(100, 140)}
    for query in ("soda", "1", "10", "s", "o"):
        results = rank_products(query, catalog, aliases)
        assert len(results) <= 10
        assert len(set(ids(results))) == len(results)


def test_aliases_pointing_at_unknown_products_are_ignored() -> None:
    catalog = {"1": product("1", "Beer")}
    assert ids(rank_products("ghost", catalog, {"ghost": 99})) == []


def test_query_is_matched_case_insensitively() -> None:
    catalog = {"1": product("1", "Monster Energy")}
    assert ids(rank_products(normalize_query("  MONSTER "), catalog, {"ENERGY": 1})) == ["1"]
