import json
import logging
from typing import Dict, Tuple, Any, List

from .catalog import AmenityView
from .domain import Hotel, Place, Amenity, City, PaginationInfo, QueryResult, FilterState, SortOption
from .ftypes import Either, validate_hotel

logger = logging.getLogger(__name__)


def load_seed(path: str) -> Dict[str, Any]:
    """Load the dataset from a JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def parse_hotel(data: Dict[str, Any]) -> Hotel:
    return Hotel(
        id=int(data['id']),
        name=data['name'],
        description=data.get('description', ''),
        district=data.get('district', ''),
        stars=str(data['stars']),
        daily_price=data['dailyPrice'],
        total_price=data['totalPrice'],
        tax=data.get('tax', 0),
        thumb=data.get('thumb', ''),
        amenities=tuple(data.get('amenities', ())),
        has_breakfast=bool(data.get('hasBreakFast', False)),
        has_refundable_room=bool(data.get('hasRefundableRoom', False)),
        place_id=int(data['placeId']),
        images=tuple(data.get('images') or ())
    )


def parse_place(data: Dict[str, Any]) -> Place:
    return Place(
        id=int(data['id']),
        name=data['name'],
        state=data.get('state', ''),
        country=data.get('country', '')
    )


def parse_amenity(data: Dict[str, Any]) -> Amenity:
    return Amenity(key=data['key'], label=data.get('label', data['key']))


def parse_city(data: Dict[str, Any]) -> City:
    state = data.get('state') or {}
    return City(
        name=data['name'],
        state_name=state.get('name', ''),
        state_shortname=state.get('shortname', ''),
        place_id=int(data['placeId'])
    )


def parse_pagination(data: Dict[str, Any]) -> PaginationInfo:
    return PaginationInfo(
        total=int(data.get('total', 0)),
        offset=int(data.get('offset', 0)),
        limit=int(data['limit'])
    )


def _checked_hotel(raw: Dict[str, Any]) -> Either[str, Hotel]:
    try:
        hotel = parse_hotel(raw)
    except (KeyError, TypeError, ValueError) as e:
        return Either.left(f"Malformed hotel record {raw.get('id', '?')}: {e!r}")
    return validate_hotel(hotel)


def parse_seed_data(seed_data: Dict[str, Any]) -> Tuple[
    Tuple[Hotel, ...],
    Tuple[Place, ...],
    Tuple[Amenity, ...]
]:
    """Parse the dataset into domain objects, skipping invalid hotels."""
    hotels: List[Hotel] = []
    for raw in seed_data.get('hotels', []):
        result = _checked_hotel(raw)
        if result.is_right():
            hotels.append(result.get_or_else(None))
        else:
            logger.warning("Skipping hotel record: %s", result.error)

    places = tuple(parse_place(place) for place in seed_data.get('places', []))
    amenities = tuple(parse_amenity(amenity) for amenity in seed_data.get('amenities', []))

    logger.info(
        "Dataset parsed: %d hotels, %d places, %d amenities",
        len(hotels), len(places), len(amenities)
    )
    return tuple(hotels), places, amenities


# Wire format (camelCase, as the frontend expects)
def hotel_to_dict(hotel: Hotel) -> Dict[str, Any]:
    data = {
        'id': hotel.id,
        'name': hotel.name,
        'description': hotel.description,
        'stars': hotel.stars,
        'totalPrice': hotel.total_price,
        'dailyPrice': hotel.daily_price,
        'tax': hotel.tax,
        'thumb': hotel.thumb,
        'amenities': list(hotel.amenities),
        'hasBreakFast': hotel.has_breakfast,
        'hasRefundableRoom': hotel.has_refundable_room,
        'district': hotel.district,
        'placeId': hotel.place_id
    }
    if hotel.images:
        data['images'] = list(hotel.images)
    return data


def place_to_dict(place: Place) -> Dict[str, Any]:
    return {'id': place.id, 'name': place.name, 'state': place.state, 'country': place.country}


def amenity_to_dict(amenity: Amenity) -> Dict[str, Any]:
    return {'key': amenity.key, 'label': amenity.label}


def city_to_dict(city: City) -> Dict[str, Any]:
    return {
        'name': city.name,
        'state': {'name': city.state_name, 'shortname': city.state_shortname},
        'placeId': city.place_id
    }


def pagination_to_dict(pagination: PaginationInfo) -> Dict[str, Any]:
    return {
        'total': pagination.total,
        'offset': pagination.offset,
        'limit': pagination.limit,
        'hasMore': pagination.has_more
    }


def result_to_dict(result: QueryResult) -> Dict[str, Any]:
    return {
        'hotels': [hotel_to_dict(hotel) for hotel in result.page],
        'stats': result.stats,
        'pagination': pagination_to_dict(result.pagination)
    }


def filters_to_dict(filters: FilterState, sort: SortOption = None) -> Dict[str, Any]:
    """Compact description of a query, used as an event payload."""
    payload = {
        'q': filters.search_query,
        'minPrice': filters.min_price,
        'maxPrice': filters.max_price,
        'stars': list(filters.stars),
        'amenities': list(filters.amenities),
        'hasBreakFast': filters.has_breakfast,
        'hasRefundableRoom': filters.has_refundable_room,
        'placeId': filters.place_id
    }
    if sort is not None:
        payload['sortBy'] = sort.key
        payload['sortOrder'] = sort.direction
    return payload


def view_to_dict(view: AmenityView) -> Dict[str, Any]:
    return {'key': view.key, 'label': view.label, 'icon': view.icon, 'color': view.color}
