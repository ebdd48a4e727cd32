"""Product search ranking."""

from __future__ import annotations

from collections.abc import Mapping

from stregsystem_tui.config import SEARCH_RESULT_LIMIT
from stregsystem_tui.models import Product

ALIAS_EXACT_SCORE = 1000
ALIAS_PREFIX_SCORE = 800
ALIAS_PARTIAL_BASE = 500
NAME_PREFIX_SCORE = 700
NAME_PARTIAL_BASE = 400


def normalize_query(raw: str) -> str:
    return raw.strip().lower()


def _parses_as_int(query: str) -> bool:
    try:
        int(query)
    except ValueError:
        return False
    return True


def _alias_score(alias: str, query: str) -> int:
    if alias == query:
        return ALIAS_EXACT_SCORE
    if alias.startswith(query):
        return ALIAS_PREFIX_SCORE
    return ALIAS_PARTIAL_BASE - abs(len(alias) - len(query))


def _name_score(name: str, query: str) -> int:
    if name.startswith(query):
        return NAME_PREFIX_SCORE
    return NAME_PARTIAL_BASE - abs(len(name) - len(query))


def rank_products(
    query: str,
    products: Mapping[str, Product],
    aliases: Mapping[str, int],
    limit: int = SEARCH_RESULT_LIMIT,
) -> list[Product]:
    """Rank catalog products against a normalized query.

    Matches are collected in phases: exact numeric id, numeric id prefix,
    alias match, then product name substring. Later phases never displace
    earlier ones; within a phase, higher scores come first and ties keep the
    order they were found in. An empty query matches nothing.
    """
    if not query:
        return []

    results: list[Product] = []
    seen: set[str] = set()

    def take(product: Product) -> None:
        if product.id not in seen and len(results) < limit:
            seen.add(product.id)
            results.append(product)

    # Exact id. int() accepts forms like "007" or "+7"; look up the canonical id.
    if _parses_as_int(query):
        product = products.get(str(int(query)))
        if product is not None:
            take(product)

    if query.isascii() and query.isdigit() and not results:
        for product_id, product in products.items():
            if product_id.startswith(query):
                take(product)

    if len(results) < limit:
        alias_matches: list[tuple[int, Product]] = []
        for alias, target in aliases.items():
            alias_lower = alias.lower()
            if query not in alias_lower:
                continue
            product = products.get(str(target))
            if product is None or product.id in seen:
                continue
            alias_matches.append((_alias_score(alias_lower, query), product))
        # sorted() is stable, so equal scores keep discovery order.
        for _, product in sorted(alias_matches, key=lambda match: -match[0]):
            take(product)

    if len(results) < limit:
        name_matches: list[tuple[int, Product]] = []
        for product_id, product in products.items():
            name_lower = product.name.lower()
            if query in name_lower and product_id not in seen:
                name_matches.append((_name_score(name_lower, query), product))
        for _, product in sorted(name_matches, key=lambda match: -match[0]):
            take(product)

    return results
