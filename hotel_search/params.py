"""
Query-string codec shared by the API and the client.

The server parses query parameters into FilterState / SortOption /
PageRequest with the functions below and the client builds its requests
with build_query_params, so both sides agree on every filter dimension.
"""
from typing import Dict, Optional, Tuple

from .config import (
    DEFAULT_MIN_PRICE, DEFAULT_MAX_PRICE, DEFAULT_LIMIT, DEFAULT_SORT_ORDER, SORT_DIRECTIONS
)
from .domain import FilterState, SortOption, PageRequest
from .errors import ValidationError


def parse_int(name: str, value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"'{name}' must be an integer, got {value!r}") from None


def parse_bool(name: str, value: Optional[str]) -> Optional[bool]:
    if value is None or str(value).strip() == "":
        return None
    lowered = str(value).strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValidationError(f"'{name}' must be 'true' or 'false', got {value!r}")


def parse_csv(value: Optional[str]) -> Tuple[str, ...]:
    """Comma-separated, case-sensitive tokens; blanks dropped."""
    if not value:
        return ()
    return tuple(token.strip() for token in value.split(",") if token.strip())


def parse_filter_params(
    q: Optional[str] = None,
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
    stars: Optional[str] = None,
    amenities: Optional[str] = None,
    has_breakfast: Optional[str] = None,
    has_refundable_room: Optional[str] = None,
    place_id: Optional[str] = None
) -> FilterState:
    low = parse_int("minPrice", min_price, DEFAULT_MIN_PRICE)
    high = parse_int("maxPrice", max_price, DEFAULT_MAX_PRICE)
    if low < 0 or high < 0:
        raise ValidationError("Price bounds must not be negative")
    if low > high:
        raise ValidationError(f"minPrice ({low}) must not exceed maxPrice ({high})")

    return FilterState(
        min_price=low,
        max_price=high,
        stars=parse_csv(stars),
        amenities=parse_csv(amenities),
        has_breakfast=parse_bool("hasBreakFast", has_breakfast),
        has_refundable_room=parse_bool("hasRefundableRoom", has_refundable_room),
        place_id=parse_int("placeId", place_id),
        search_query=(q or "").strip()
    )


def parse_sort_params(sort_by: Optional[str], sort_order: Optional[str]) -> Optional[SortOption]:
    """
    No sortBy means collection order. sortOrder is checked even without
    sortBy; SortOption rejects unknown fields.
    """
    direction = (sort_order or DEFAULT_SORT_ORDER).strip().lower()
    if direction not in SORT_DIRECTIONS:
        raise ValidationError(f"'sortOrder' must be 'asc' or 'desc', got {sort_order!r}")
    if not sort_by:
        return None
    return SortOption(key=sort_by, direction=direction)


def parse_page_params(limit: Optional[str], offset: Optional[str]) -> PageRequest:
    return PageRequest(
        offset=parse_int("offset", offset, 0),
        limit=parse_int("limit", limit, DEFAULT_LIMIT)
    )


def build_query_params(
    filters: FilterState,
    sort: Optional[SortOption] = None,
    page: Optional[PageRequest] = None
) -> Dict[str, str]:
    """Only the active dimensions go on the wire."""
    params: Dict[str, str] = {}

    if filters.search_query.strip():
        params['q'] = filters.search_query.strip()
    if filters.min_price != DEFAULT_MIN_PRICE:
        params['minPrice'] = str(filters.min_price)
    if filters.max_price != DEFAULT_MAX_PRICE:
        params['maxPrice'] = str(filters.max_price)
    if filters.stars:
        params['stars'] = ",".join(filters.stars)
    if filters.amenities:
        params['amenities'] = ",".join(filters.amenities)
    if filters.has_breakfast is not None:
        params['hasBreakFast'] = str(filters.has_breakfast).lower()
    if filters.has_refundable_room is not None:
        params['hasRefundableRoom'] = str(filters.has_refundable_room).lower()
    if filters.place_id is not None:
        params['placeId'] = str(filters.place_id)

    if sort is not None:
        params['sortBy'] = sort.key
        params['sortOrder'] = sort.direction

    if page is not None:
        params['offset'] = str(page.offset)
        params['limit'] = str(page.limit)

    return params
