from typing import TypeVar, Generic, Callable, Any, Tuple, Dict

from .config import STAR_VALUES, AMENITY_KEYS
from .domain import Hotel, Place

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T]):
    """Optional value: Just(value) or Nothing."""

    @classmethod
    def just(cls, value: T) -> 'Maybe[T]':
        return _Just(value)

    @classmethod
    def nothing(cls) -> 'Maybe[T]':
        return _Nothing()

    @classmethod
    def from_nullable(cls, value: T) -> 'Maybe[T]':
        return cls.just(value) if value is not None else cls.nothing()

    def map(self, func: Callable[[T], U]) -> 'Maybe[U]':
        raise NotImplementedError

    def get_or_else(self, default: T) -> T:
        raise NotImplementedError

    def is_just(self) -> bool:
        raise NotImplementedError

    def or_raise(self, error: Exception) -> T:
        """Unwrap the value or raise the given error."""
        if self.is_just():
            return self.get_or_else(None)
        raise error


class _Just(Maybe[T]):
    def __init__(self, value: T):
        self._value = value

    def map(self, func: Callable[[T], U]) -> 'Maybe[U]':
        return Maybe.just(func(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_just(self) -> bool:
        return True

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Just) and self._value == other._value

    def __repr__(self) -> str:
        return f"Just({self._value!r})"


class _Nothing(Maybe[T]):
    def map(self, func: Callable[[T], U]) -> 'Maybe[U]':
        return Maybe.nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_just(self) -> bool:
        return False

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Nothing)

    def __repr__(self) -> str:
        return "Nothing"


class Either(Generic[E, T]):
    """Result of a computation that may fail: Right(value) or Left(error)."""

    @classmethod
    def right(cls, value: T) -> 'Either[E, T]':
        return _Right(value)

    @classmethod
    def left(cls, error: E) -> 'Either[E, T]':
        return _Left(error)

    def bind(self, func: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        raise NotImplementedError

    def get_or_else(self, default: T) -> T:
        raise NotImplementedError

    def is_right(self) -> bool:
        raise NotImplementedError

    def is_left(self) -> bool:
        return not self.is_right()


class _Right(Either[Any, T]):
    def __init__(self, value: T):
        self._value = value

    def bind(self, func: Callable[[T], Either[Any, U]]) -> 'Either[Any, U]':
        return func(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Right) and self._value == other._value

    def __repr__(self) -> str:
        return f"Right({self._value!r})"


class _Left(Either[E, Any]):
    def __init__(self, error: E):
        self.error = error

    def bind(self, func: Callable[[Any], Either[E, Any]]) -> 'Either[E, Any]':
        return self

    def get_or_else(self, default: Any) -> Any:
        return default

    def is_right(self) -> bool:
        return False

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, _Left) and self.error == other.error

    def __repr__(self) -> str:
        return f"Left({self.error!r})"


# Record validation (railway style: first failing check wins)
def validate_prices(hotel: Hotel) -> Either[str, Hotel]:
    for name, value in (("dailyPrice", hotel.daily_price), ("totalPrice", hotel.total_price)):
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            return Either.left(f"Hotel {hotel.id}: {name} must be a non-negative integer")
    return Either.right(hotel)


def validate_stars(hotel: Hotel) -> Either[str, Hotel]:
    if hotel.stars not in STAR_VALUES:
        return Either.left(f"Hotel {hotel.id}: invalid stars value {hotel.stars!r}")
    return Either.right(hotel)


def validate_amenities(hotel: Hotel) -> Either[str, Hotel]:
    unknown = [a for a in hotel.amenities if a not in AMENITY_KEYS]
    if unknown:
        return Either.left(f"Hotel {hotel.id}: unknown amenities {', '.join(unknown)}")
    return Either.right(hotel)


def validate_hotel(hotel: Hotel) -> Either[str, Hotel]:
    return (
        Either.right(hotel)
        .bind(validate_prices)
        .bind(validate_stars)
        .bind(validate_amenities)
    )


def safe_hotel_lookup(hotels: Tuple[Hotel, ...], hotel_id: int) -> Maybe[Hotel]:
    for hotel in hotels:
        if hotel.id == hotel_id:
            return Maybe.just(hotel)
    return Maybe.nothing()


def safe_place_lookup(places: Dict[int, Place], place_id: int) -> Maybe[Place]:
    return Maybe.from_nullable(places.get(place_id))
