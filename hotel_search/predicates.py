from typing import Tuple, Dict, Callable, Optional

from .config import DEFAULT_MIN_PRICE, DEFAULT_MAX_PRICE
from .domain import Hotel, Place, FilterState
from .memo import normalize_text

Predicate = Callable[[Hotel], bool]


def _accept_all(hotel: Hotel) -> bool:
    return True


def searchable_fields(hotel: Hotel, places: Dict[int, Place]) -> Tuple[str, ...]:
    """Hotel name, description, district and the resolved place name/state."""
    fields = (hotel.name, hotel.description, hotel.district)
    place = places.get(hotel.place_id)
    if place is not None:
        fields += (place.name, place.state)
    return fields


# Filter functions (Higher Order Functions)
def by_text(query: str, places: Dict[int, Place]) -> Predicate:
    """Accent/case-insensitive substring match against any searchable field."""
    if not query or not query.strip():
        return _accept_all
    needle = normalize_text(query.strip())
    return lambda hotel: any(
        needle in normalize_text(value) for value in searchable_fields(hotel, places)
    )


def by_price_range(min_price: int, max_price: int) -> Predicate:
    """
    Inclusive range on totalPrice. A bound left at its default is not
    checked, so an inactive filter keeps zero-priced and very expensive
    records.
    """
    check_min = min_price != DEFAULT_MIN_PRICE
    check_max = max_price != DEFAULT_MAX_PRICE
    if not check_min and not check_max:
        return _accept_all
    return lambda hotel: (
        (not check_min or hotel.total_price >= min_price) and
        (not check_max or hotel.total_price <= max_price)
    )


def by_stars(stars: Tuple[str, ...]) -> Predicate:
    if not stars:
        return _accept_all
    accepted = frozenset(stars)
    return lambda hotel: hotel.stars in accepted


def by_amenities(required: Tuple[str, ...]) -> Predicate:
    """Hotel must offer every requested amenity."""
    if not required:
        return _accept_all
    return lambda hotel: all(amenity in hotel.amenities for amenity in required)


def by_breakfast(has_breakfast: Optional[bool]) -> Predicate:
    if has_breakfast is None:
        return _accept_all
    return lambda hotel: hotel.has_breakfast == has_breakfast


def by_refundable_room(has_refundable_room: Optional[bool]) -> Predicate:
    if has_refundable_room is None:
        return _accept_all
    return lambda hotel: hotel.has_refundable_room == has_refundable_room


def by_place(place_id: Optional[int]) -> Predicate:
    if place_id is None:
        return _accept_all
    return lambda hotel: hotel.place_id == place_id


def build_predicates(filters: FilterState, places: Dict[int, Place]) -> Tuple[Predicate, ...]:
    """Active predicates only, exact-match checks first and text search last."""
    candidates = (
        by_place(filters.place_id),
        by_breakfast(filters.has_breakfast),
        by_refundable_room(filters.has_refundable_room),
        by_stars(filters.stars),
        by_price_range(filters.min_price, filters.max_price),
        by_amenities(filters.amenities),
        by_text(filters.search_query, places),
    )
    return tuple(p for p in candidates if p is not _accept_all)


def compose_filters(*filters: Predicate) -> Predicate:
    """Compose predicates with AND; short-circuits on the first failure."""
    def composed(hotel: Hotel) -> bool:
        return all(f(hotel) for f in filters)
    return composed
