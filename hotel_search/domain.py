from dataclasses import dataclass, field
from typing import Tuple, Optional, Dict, Any

from .config import (
    ALLOWED_SORT_FIELDS, SORT_DIRECTIONS, DEFAULT_MIN_PRICE, DEFAULT_MAX_PRICE,
    DEFAULT_LIMIT, MAX_LIMIT
)
from .errors import ValidationError


@dataclass(frozen=True)
class Hotel:
    id: int
    name: str
    description: str
    district: str
    stars: str
    daily_price: int
    total_price: int
    tax: int
    thumb: str
    amenities: Tuple[str, ...]
    has_breakfast: bool
    has_refundable_room: bool
    place_id: int
    images: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Place:
    id: int
    name: str
    state: str
    country: str


@dataclass(frozen=True)
class Amenity:
    key: str
    label: str


@dataclass(frozen=True)
class City:
    name: str
    state_name: str
    state_shortname: str
    place_id: int


@dataclass(frozen=True)
class FilterState:
    min_price: int = DEFAULT_MIN_PRICE
    max_price: int = DEFAULT_MAX_PRICE
    stars: Tuple[str, ...] = ()
    amenities: Tuple[str, ...] = ()
    has_breakfast: Optional[bool] = None
    has_refundable_room: Optional[bool] = None
    place_id: Optional[int] = None
    search_query: str = ""

    def active_count(self) -> int:
        """Number of filter dimensions that differ from the defaults."""
        dimensions = (
            self.min_price != DEFAULT_MIN_PRICE or self.max_price != DEFAULT_MAX_PRICE,
            bool(self.stars),
            bool(self.amenities),
            self.has_breakfast is not None,
            self.has_refundable_room is not None,
            self.place_id is not None,
            bool(self.search_query.strip()),
        )
        return sum(1 for active in dimensions if active)

    def is_default(self) -> bool:
        return self.active_count() == 0


@dataclass(frozen=True)
class SortOption:
    key: str
    label: str = ""
    direction: str = "asc"

    def __post_init__(self):
        if self.key not in ALLOWED_SORT_FIELDS:
            raise ValidationError(
                f"Unsupported sort field '{self.key}'. Allowed: {', '.join(ALLOWED_SORT_FIELDS)}"
            )
        if self.direction not in SORT_DIRECTIONS:
            raise ValidationError(f"Unsupported sort direction '{self.direction}'")

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


@dataclass(frozen=True)
class PageRequest:
    offset: int = 0
    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        if self.limit <= 0:
            raise ValidationError(f"limit must be positive, got {self.limit}")
        if self.limit > MAX_LIMIT:
            raise ValidationError(f"limit must not exceed {MAX_LIMIT}, got {self.limit}")
        if self.offset < 0:
            raise ValidationError(f"offset must not be negative, got {self.offset}")


@dataclass(frozen=True)
class PaginationInfo:
    total: int = 0
    offset: int = 0
    limit: int = DEFAULT_LIMIT

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total

    @property
    def current_page(self) -> int:
        return self.offset // self.limit + 1

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit)


@dataclass(frozen=True)
class QueryResult:
    page: Tuple[Hotel, ...]
    stats: Dict[str, Any]
    pagination: PaginationInfo


@dataclass(frozen=True)
class Event:
    id: str
    ts: str
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)
