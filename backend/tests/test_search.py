from __future__ import annotations

from catalog.services.search import SearchEngine
from tests.conftest import make_candidate


def _seeded(store):
    store.insert(make_candidate(name="Smartphone Galaxy", sku="P-1", description="Teléfono con 128GB", category_id=1))
    store.insert(make_candidate(name="Tablet Pro", sku="P-2", description="Tablet con stylus incluido", category_id=1))
    store.insert(make_candidate(name="El Quijote", sku="P-3", description="Novela clásica", category_id=2))
    return SearchEngine(store)


def test_matches_name_case_insensitively(store):
    engine = _seeded(store)

    assert [p.name for p in engine.search("GALAXY")] == ["Smartphone Galaxy"]


def test_matches_description(store):
    engine = _seeded(store)

    assert [p.name for p in engine.search("stylus")] == ["Tablet Pro"]


def test_matches_substring_in_both_fields(store):
    engine = _seeded(store)

    assert {p.name for p in engine.search("con")} == {"Smartphone Galaxy", "Tablet Pro"}


def test_no_match_is_empty(store):
    assert _seeded(store).search("bicycle") == []


def test_search_is_repeatable(store):
    engine = _seeded(store)

    assert engine.search("a") == engine.search("a")


def test_search_sees_live_stock(store):
    engine = _seeded(store)
    store.try_decrement_stock("Tablet Pro", 4)

    assert engine.search("tablet")[0].stock == 6


def test_by_category(store):
    engine = _seeded(store)

    assert [p.name for p in engine.by_category(1)] == ["Smartphone Galaxy", "Tablet Pro"]
    assert engine.by_category(999) == []


def test_like_wildcards_are_literal(store):
    store.insert(make_candidate(name="Promo", sku="P-9", description="50% off this week"))
    store.insert(make_candidate(name="Bulk", sku="P-8", description="500 units per box"))
    store.insert(make_candidate(name="Snake_case", sku="P-7", description="underscored"))
    engine = SearchEngine(store)

    assert [p.name for p in engine.search("50%")] == ["Promo"]
    assert [p.name for p in engine.search("e_c")] == ["Snake_case"]


def test_non_ascii_term_matches_any_case(store):
    engine = _seeded(store)

    assert [p.name for p in engine.search("TELÉFONO")] == ["Smartphone Galaxy"]
    assert [p.name for p in engine.search("clásica")] == ["El Quijote"]
