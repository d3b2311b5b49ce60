from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, Optional

from .aggregates import filtered_stats, collection_stats
from .domain import Hotel, Place, FilterState, SortOption, PageRequest, PaginationInfo, QueryResult
from .ftypes import Maybe, safe_hotel_lookup, safe_place_lookup
from .lazy import lazy_matches
from .memo import normalize_text
from .predicates import build_predicates, compose_filters, by_place
from .sorting import sort_hotels


def index_places(places: Tuple[Place, ...]) -> Dict[int, Place]:
    return {place.id: place for place in places}


def apply_filters(
    hotels: Tuple[Hotel, ...],
    filters: FilterState,
    places: Dict[int, Place]
) -> Tuple[Hotel, ...]:
    """Один проход по коллекции с композицией активных предикатов"""
    predicates = build_predicates(filters, places)
    if not predicates:
        return tuple(hotels)
    return tuple(lazy_matches(hotels, compose_filters(*predicates)))


def execute(
    hotels: Tuple[Hotel, ...],
    filters: FilterState,
    sort: Optional[SortOption],
    page: PageRequest,
    places: Dict[int, Place] = None
) -> QueryResult:
    """
    Выполнить запрос: фильтрация -> сортировка -> статистика -> срез.

    Статистика считается по всему отфильтрованному результату до
    нарезки на страницы. Offset за пределами результата дает пустую
    страницу, а не ошибку.
    """
    matched = sort_hotels(apply_filters(hotels, filters, places or {}), sort)
    stats = filtered_stats(matched)
    window = matched[page.offset:page.offset + page.limit]
    return QueryResult(
        page=window,
        stats=stats,
        pagination=PaginationInfo(total=len(matched), offset=page.offset, limit=page.limit)
    )


def local_text_search(
    hotels: Tuple[Hotel, ...],
    query: str,
    places: Dict[int, Place]
) -> Tuple[Hotel, ...]:
    """
    Деградированный поиск на клиенте: только текст, по названию,
    району и названию места.
    """
    needle = normalize_text(query.strip())

    def matches(hotel: Hotel) -> bool:
        place_name = safe_place_lookup(places, hotel.place_id).map(lambda p: p.name).get_or_else("")
        fields = (hotel.name, hotel.district, place_name)
        return any(needle in normalize_text(value) for value in fields)

    return tuple(lazy_matches(hotels, matches))


@dataclass(frozen=True)
class Evaluator:
    """Движок запросов над конкретной коллекцией отелей"""

    hotels: Tuple[Hotel, ...]
    places: Tuple[Place, ...] = ()
    _places_by_id: Dict[int, Place] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, '_places_by_id', index_places(self.places))

    @property
    def places_by_id(self) -> Dict[int, Place]:
        return self._places_by_id

    def execute(self,
                filters: FilterState,
                sort: Optional[SortOption],
                page: PageRequest) -> QueryResult:
        return execute(self.hotels, filters, sort, page, self._places_by_id)

    def search(self, filters: FilterState) -> Tuple[Hotel, ...]:
        """Только фильтрация, в порядке коллекции"""
        return apply_filters(self.hotels, filters, self._places_by_id)

    def text_search(self, query: str) -> Tuple[Hotel, ...]:
        return local_text_search(self.hotels, query, self._places_by_id)

    def hotels_in_place(self, place_id: int) -> Tuple[Hotel, ...]:
        return tuple(lazy_matches(self.hotels, by_place(place_id)))

    def find(self, hotel_id: int) -> Maybe[Hotel]:
        return safe_hotel_lookup(self.hotels, hotel_id)

    def stats(self) -> Dict[str, Any]:
        return collection_stats(self.hotels)


def create_evaluator(hotels: Tuple[Hotel, ...], places: Tuple[Place, ...]) -> Evaluator:
    """Фабрика движка запросов"""
    return Evaluator(hotels=tuple(hotels), places=tuple(places))
