"""
Async HTTP client for the hotels API.

Transport failures and 5xx answers become TransientFetchError; 400 and
404 answers become ValidationError and NotFoundError.
"""
import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import httpx

from .config import get_settings
from .domain import Hotel, Place, Amenity, City, FilterState, SortOption, PageRequest, QueryResult
from .errors import TransientFetchError, ValidationError, NotFoundError
from .params import build_query_params
from .transforms import parse_hotel, parse_place, parse_amenity, parse_city, parse_pagination

logger = logging.getLogger(__name__)


def extract_data(body: Any) -> Any:
    """Unwrap the {success, data} envelope; bare payloads pass through."""
    if isinstance(body, dict) and 'success' in body and 'data' in body:
        return body['data']
    return body


class HotelApiClient:
    def __init__(self,
                 base_url: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None,
                 timeout: Optional[float] = None):
        if client is None:
            settings = get_settings()
            client = httpx.AsyncClient(
                base_url=base_url or settings.api_url,
                timeout=timeout or settings.request_timeout,
                headers={'Content-Type': 'application/json'}
            )
        self._client = client

    async def __aenter__(self) -> 'HotelApiClient':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: Dict[str, str] = None) -> Any:
        logger.debug("GET %s params=%s", path, params)
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise TransientFetchError(f"Request to {path} failed: {e!r}") from e

        if response.status_code >= 500:
            raise TransientFetchError(f"HTTP error! status: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise TransientFetchError(f"Invalid JSON from {path}") from e

        if response.status_code == 404:
            raise NotFoundError(body.get('message') or body.get('error') or path)
        if response.status_code >= 400:
            raise ValidationError(body.get('message') or body.get('error') or "Bad request")

        return extract_data(body)

    async def filtered(self,
                       filters: FilterState,
                       sort: Optional[SortOption],
                       page: PageRequest) -> QueryResult:
        data = await self._get('/hotels/filtered', build_query_params(filters, sort, page))
        return QueryResult(
            page=tuple(parse_hotel(h) for h in data.get('hotels', [])),
            stats=data.get('stats', {}),
            pagination=parse_pagination(data.get('pagination') or {'limit': page.limit})
        )

    async def search(self, filters: FilterState) -> Tuple[Hotel, ...]:
        data = await self._get('/hotels/search', build_query_params(filters))
        return tuple(parse_hotel(h) for h in data or [])

    async def stats(self) -> Dict[str, Any]:
        return await self._get('/hotels/stats')

    async def hotel(self, hotel_id: int) -> Hotel:
        hotel = parse_hotel(await self._get(f'/hotels/{hotel_id}'))
        if not hotel.images and hotel.thumb:
            hotel = replace(hotel, images=(hotel.thumb,))
        return hotel

    async def hotels_in_place(self, place_id: int) -> Tuple[Hotel, ...]:
        data = await self._get(f'/places/{place_id}/hotels')
        return tuple(parse_hotel(h) for h in data or [])

    async def places(self) -> Tuple[Place, ...]:
        return tuple(parse_place(p) for p in await self._get('/places') or [])

    async def amenities(self) -> Tuple[Amenity, ...]:
        return tuple(parse_amenity(a) for a in await self._get('/amenities') or [])

    async def cities(self, name_like: str) -> Tuple[City, ...]:
        data = await self._get('/cities', {'name_like': name_like})
        return tuple(parse_city(c) for c in data or [])
