from hotel_search.aggregates import (
    round_half_up, price_range, average_price, filtered_stats, collection_stats
)

from conftest import make_hotel


def test_empty_stats():
    assert filtered_stats(()) == {'total': 0, 'priceRange': {'min': 0, 'max': 0}, 'avgPrice': 0}


def test_filtered_stats(hotels):
    stats = filtered_stats(hotels)
    assert stats['total'] == 6
    assert stats['priceRange'] == {'min': 5000, 'max': 90000}
    # 190000 / 6 = 31666.67
    assert stats['avgPrice'] == 31667


def test_round_half_up():
    assert round_half_up(5, 2) == 3
    assert round_half_up(7, 2) == 4
    assert round_half_up(10, 4) == 3
    assert round_half_up(9, 4) == 2


def test_single_hotel():
    only = (make_hotel(1, "Solo", 12345),)
    assert price_range(only) == {'min': 12345, 'max': 12345}
    assert average_price(only) == 12345


def test_collection_stats_distributions(hotels):
    stats = collection_stats(hotels)
    assert stats['starsDistribution'] == {'4': 2, '3': 2, '5': 1, '1': 1}
    assert stats['amenitiesCount'] == {'WI_FI': 4, 'POOL': 2, 'SPA': 1, 'PARKING': 1, 'BAR': 1}
    assert stats['total'] == 6
