from typing import Dict, Tuple, Any, Sequence

from .domain import Hotel


def round_half_up(total: int, count: int) -> int:
    """Integer mean rounded to the nearest unit, halves upward."""
    return (2 * total + count) // (2 * count)


def price_range(hotels: Sequence[Hotel]) -> Dict[str, int]:
    if not hotels:
        return {'min': 0, 'max': 0}
    prices = [hotel.total_price for hotel in hotels]
    return {'min': min(prices), 'max': max(prices)}


def average_price(hotels: Sequence[Hotel]) -> int:
    if not hotels:
        return 0
    return round_half_up(sum(hotel.total_price for hotel in hotels), len(hotels))


def filtered_stats(hotels: Sequence[Hotel]) -> Dict[str, Any]:
    """Stats over a filtered result: count, price range and mean price."""
    return {
        'total': len(hotels),
        'priceRange': price_range(hotels),
        'avgPrice': average_price(hotels)
    }


def stars_distribution(hotels: Sequence[Hotel]) -> Dict[str, int]:
    distribution: Dict[str, int] = {}
    for hotel in hotels:
        distribution[hotel.stars] = distribution.get(hotel.stars, 0) + 1
    return distribution


def amenities_count(hotels: Sequence[Hotel]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for hotel in hotels:
        for amenity in hotel.amenities:
            counts[amenity] = counts.get(amenity, 0) + 1
    return counts


def collection_stats(hotels: Tuple[Hotel, ...]) -> Dict[str, Any]:
    """Full-collection stats: filtered stats plus star and amenity distributions."""
    return {
        **filtered_stats(hotels),
        'starsDistribution': stars_distribution(hotels),
        'amenitiesCount': amenities_count(hotels)
    }
