"""
Category matching: which markup policy applies to a circuit type.
"""
from circuit_pricing.engine.category_matcher import category_matches, find_matching_category
from circuit_pricing.engine.models import Category


def test_type_equality_is_case_insensitive():
    category = Category(name="Fiber Internet", type="Fiber", minimum_markup=15)
    assert category_matches(category, "FIBER") == "type=fiber"
    # Stored types are compared as-is
    assert category_matches(category, " fiber ") is None


def test_type_named_inside_category_name():
    category = Category(name="Business Cable Broadband", type="Circuit", minimum_markup=20)
    assert category_matches(category, "Cable") == "name contains cable"


def test_no_match_returns_none():
    category = Category(name="Fiber Internet", type="Fiber", minimum_markup=15)
    assert category_matches(category, "Satellite") is None
    assert find_matching_category("Satellite", [category]) is None


def test_first_category_in_list_order_wins():
    # A name-contains hit early in the list beats a type hit later on
    categories = [
        Category(name="Fiber Premium", type="Circuit", minimum_markup=25, id="A"),
        Category(name="Metro", type="Fiber", minimum_markup=15, id="B"),
    ]
    matched = find_matching_category("Fiber", categories)

    assert matched.category.id == "A"
    assert matched.position == 0
    assert matched.match_reason == "name contains fiber"

    matched = find_matching_category("Fiber", list(reversed(categories)))
    assert matched.category.id == "B"
    assert matched.match_reason == "type=fiber"


def test_inactive_categories_are_skipped():
    categories = [
        Category(name="Legacy Fiber", type="Fiber", minimum_markup=40, is_active=False, id="OLD"),
        Category(name="Fiber Internet", type="Fiber", minimum_markup=15, id="NEW"),
    ]
    matched = find_matching_category("Fiber", categories)
    assert matched.category.id == "NEW"
    assert matched.position == 1


def test_blank_type_takes_first_active_category():
    # An empty string is a substring of every name
    categories = [
        Category(name="Legacy T1", type="Circuit", minimum_markup=25, is_active=False, id="OLD"),
        Category(name="Fiber Internet", type="Circuit", minimum_markup=15, id="A"),
        Category(name="Cable Broadband", type="Circuit", minimum_markup=20, id="B"),
    ]
    matched = find_matching_category("", categories)
    assert matched.category.id == "A"
    assert matched.position == 1

    # Whitespace is not trimmed, so it only matches names containing it
    assert find_matching_category("   ", categories) is None
    assert find_matching_category(None, categories) is None


def test_markup_percent_of_match():
    assert find_matching_category("dsl", [Category(name="DSL", minimum_markup=None)]).markup_percent == 0.0
    assert find_matching_category("dsl", [Category(name="DSL", minimum_markup=0)]).markup_percent == 0.0
    assert find_matching_category("dsl", [Category(name="DSL", minimum_markup=-5)]).markup_percent == 0.0
    assert find_matching_category("dsl", [Category(name="DSL", minimum_markup=12.5)]).markup_percent == 12.5


def test_empty_category_list():
    assert find_matching_category("Fiber", []) is None
    assert find_matching_category("Fiber", None) is None
