from typing import Iterator, Callable, Iterable, Optional

from .domain import Hotel, FilterState, SortOption, PageRequest, QueryResult


def lazy_matches(hotels: Iterable[Hotel], predicate: Callable[[Hotel], bool]) -> Iterator[Hotel]:
    """Ленивый генератор отелей, прошедших предикат"""
    for hotel in hotels:
        if predicate(hotel):
            yield hotel


def iter_pages(
    evaluator,
    filters: FilterState,
    sort: Optional[SortOption],
    limit: int
) -> Iterator[QueryResult]:
    """
    Ленивый обход всех страниц результата: offset растет шагами limit,
    пока сервер сообщает has_more.
    """
    offset = 0
    while True:
        result = evaluator.execute(filters, sort, PageRequest(offset=offset, limit=limit))
        yield result
        if not result.pagination.has_more:
            return
        offset += limit
