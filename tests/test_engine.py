import pytest

from hotel_search.aggregates import filtered_stats
from hotel_search.domain import FilterState, SortOption, PageRequest
from hotel_search.engine import execute, create_evaluator, index_places, local_text_search
from hotel_search.errors import ValidationError
from hotel_search.lazy import iter_pages
from hotel_search.sorting import sort_hotels

from conftest import make_hotel

PRICE_ASC = SortOption("totalPrice", "Preço", "asc")


def ids(hotels):
    return [h.id for h in hotels]


@pytest.mark.parametrize("sort", [None, PRICE_ASC, SortOption("name", direction="desc"), SortOption("stars")])
def test_default_filters_are_a_no_op(hotels, places, sort):
    result = execute(hotels, FilterState(), sort, PageRequest(limit=100), index_places(places))
    assert result.page == sort_hotels(hotels, sort)
    assert result.pagination.total == len(hotels)


def test_amenities_are_conjunctive(hotels, places):
    evaluator = create_evaluator(hotels, places)
    result = evaluator.execute(FilterState(amenities=("WI_FI", "POOL")), None, PageRequest())
    assert ids(result.page) == [1, 3]
    assert all({"WI_FI", "POOL"} <= set(h.amenities) for h in result.page)


@pytest.mark.parametrize("limit", [1, 2, 4, 6])
def test_pages_concatenate_to_full_result(hotels, places, limit):
    evaluator = create_evaluator(hotels, places)
    filters = FilterState(min_price=10000)
    full = evaluator.execute(filters, PRICE_ASC, PageRequest(limit=100))

    pages = list(iter_pages(evaluator, filters, PRICE_ASC, limit))
    concatenated = tuple(h for page in pages for h in page.page)

    assert concatenated == full.page
    assert len(pages) == -(-full.pagination.total // limit)
    assert not pages[-1].pagination.has_more


def test_stats_cover_every_page(hotels, places):
    evaluator = create_evaluator(hotels, places)
    filters = FilterState(has_breakfast=True)
    pages = list(iter_pages(evaluator, filters, PRICE_ASC, 2))

    concatenated = tuple(h for page in pages for h in page.page)
    for page in pages:
        assert page.stats == filtered_stats(concatenated)


def test_equal_keys_keep_input_order(hotels, places):
    for direction in ("asc", "desc"):
        result = execute(hotels, FilterState(stars=("4",)), SortOption("totalPrice", direction=direction),
                         PageRequest(), index_places(places))
        assert ids(result.page) == [1, 6]


def test_text_search_matches_accented_district():
    hotels = (make_hotel(1, "Central", 100, district="São Paulo"), make_hotel(2, "Other", 100))
    result = execute(hotels, FilterState(search_query="sao paulo"), None, PageRequest())
    assert ids(result.page) == [1]


def test_two_hotel_scenario():
    hotels = (make_hotel(1, "One", 100, stars="3"), make_hotel(2, "Two", 50, stars="5"))
    result = execute(hotels, FilterState(min_price=0, max_price=1000000), PRICE_ASC,
                     PageRequest(offset=0, limit=6))

    assert ids(result.page) == [2, 1]
    assert result.stats == {'total': 2, 'priceRange': {'min': 50, 'max': 100}, 'avgPrice': 75}
    assert result.pagination.total == 2
    assert not result.pagination.has_more


def test_offset_past_the_end():
    hotels = (make_hotel(1, "One", 100), make_hotel(2, "Two", 50))
    result = execute(hotels, FilterState(), PRICE_ASC, PageRequest(offset=10, limit=6))

    assert result.page == ()
    assert result.pagination.total == 2
    assert not result.pagination.has_more
    assert result.stats['total'] == 2


def test_unknown_filter_values_match_nothing(hotels, places):
    evaluator = create_evaluator(hotels, places)
    assert evaluator.search(FilterState(stars=("7",))) == ()
    assert evaluator.search(FilterState(amenities=("HELIPAD",))) == ()


@pytest.mark.parametrize("offset, limit", [(0, 0), (0, -1), (-1, 6), (0, 101)])
def test_invalid_page_request(offset, limit):
    with pytest.raises(ValidationError):
        PageRequest(offset=offset, limit=limit)


def test_search_keeps_collection_order(hotels, places):
    evaluator = create_evaluator(hotels, places)
    assert ids(evaluator.search(FilterState(place_id=2))) == [3, 4, 6]


def test_find_and_hotels_in_place(hotels, places):
    evaluator = create_evaluator(hotels, places)
    assert evaluator.find(3).get_or_else(None).name == "Copacabana Palace"
    assert not evaluator.find(42).is_just()
    assert ids(evaluator.hotels_in_place(1)) == [1, 2, 5]
    assert evaluator.hotels_in_place(99) == ()


def test_collection_stats(hotels, places):
    stats = create_evaluator(hotels, places).stats()
    assert stats['total'] == 6
    assert 'starsDistribution' in stats and 'amenitiesCount' in stats


def test_local_text_search_ignores_description(hotels, places):
    lookup = index_places(places)
    assert ids(local_text_search(hotels, "avenida", lookup)) == []
    assert ids(local_text_search(hotels, "rio de", lookup)) == [3, 4, 6]
    assert ids(local_text_search(hotels, "JARDINS", lookup)) == [2]
