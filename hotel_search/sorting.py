from typing import Tuple, Callable, Any, Dict, Iterable, Optional

from .domain import Hotel, SortOption
from .errors import ValidationError
from .memo import normalize_text


def collation_key(value: str) -> Tuple[str, str, str]:
    """
    Locale-style ordering key: accent- and case-insensitive first,
    then case-insensitive, then the raw string to break ties.
    """
    return (normalize_text(value), value.casefold(), value)


SORT_KEYS: Dict[str, Callable[[Hotel], Any]] = {
    'totalPrice': lambda hotel: hotel.total_price,
    'dailyPrice': lambda hotel: hotel.daily_price,
    'stars': lambda hotel: int(hotel.stars),
    'name': lambda hotel: collation_key(hotel.name),
    'district': lambda hotel: collation_key(hotel.district),
}


def sort_key_for(field: str) -> Callable[[Hotel], Any]:
    try:
        return SORT_KEYS[field]
    except KeyError:
        raise ValidationError(f"Unsupported sort field '{field}'") from None


def sort_hotels(hotels: Iterable[Hotel], sort: Optional[SortOption]) -> Tuple[Hotel, ...]:
    """
    Stable sort by the chosen field. Descending keeps ties in their
    original relative order too (sorted() with reverse=True is stable).
    """
    if sort is None:
        return tuple(hotels)
    return tuple(sorted(hotels, key=sort_key_for(sort.key), reverse=sort.descending))
