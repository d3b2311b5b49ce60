import asyncio
import logging
from collections import OrderedDict
from dataclasses import replace
from typing import Tuple, Dict, Any, Optional

from .aggregates import filtered_stats, collection_stats
from .client import HotelApiClient
from .config import (
    DEBOUNCE_SECONDS, DEFAULT_LIMIT, DEFAULT_SORT_FIELD, DEFAULT_SORT_ORDER,
    CITY_SEARCH_MIN_CHARS, CITY_CACHE_SIZE
)
from .domain import Hotel, Place, Amenity, City, FilterState, SortOption, PageRequest, PaginationInfo, QueryResult
from .engine import Evaluator
from .errors import HotelSearchError, TransientFetchError, ValidationError
from .memo import normalize_text
from .frp import EventBus, Debouncer

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Erro ao buscar hotéis"
INITIAL_LOAD_ERROR_MESSAGE = "Erro ao carregar dados iniciais"
CITY_SEARCH_ERROR_MESSAGE = "Erro ao buscar cidades"

DEFAULT_SORT = SortOption(key=DEFAULT_SORT_FIELD, label="Preço", direction=DEFAULT_SORT_ORDER)


class HotelSearchCoordinator:
    """
    Client-side owner of filter, sort and pagination state.

    All operations run on one event loop. Only the HTTP calls suspend.
    Filter changes are debounced; sort, page and reset operations fetch
    immediately. Each filtered fetch carries a sequence number and a
    response for a superseded request is dropped, so the last request
    issued always wins.

    When a fetch fails the coordinator records an error message and
    falls back to a text search over every record it has already seen.
    """

    def __init__(self,
                 client: HotelApiClient,
                 debounce: float = DEBOUNCE_SECONDS,
                 limit: int = DEFAULT_LIMIT,
                 bus: Optional[EventBus] = None):
        self.client = client
        self.bus = bus or EventBus()

        self.hotels: Tuple[Hotel, ...] = ()
        self.places: Tuple[Place, ...] = ()
        self.amenities: Tuple[Amenity, ...] = ()
        self.stats: Dict[str, Any] = collection_stats(())
        self.filtered_stats: Dict[str, Any] = filtered_stats(())

        self.filters = FilterState()
        self.sort = DEFAULT_SORT
        self.pagination = PaginationInfo(limit=PageRequest(limit=limit).limit)

        self.loading = False
        self.error: Optional[str] = None
        self.is_loading_more = False
        self.has_initial_load = False

        self.city_results: Tuple[City, ...] = ()
        self.city_error: Optional[str] = None
        self.city_loading = False

        self._mirror: Dict[int, Hotel] = {}
        self._city_cache: "OrderedDict[str, Tuple[City, ...]]" = OrderedDict()
        self._debouncer = Debouncer(debounce)
        self._city_debouncer = Debouncer(debounce)
        self._request_seq = 0

    # ===== DERIVED STATE =====

    @property
    def has_active_filters(self) -> bool:
        return not self.filters.is_default()

    @property
    def active_filters_count(self) -> int:
        return self.filters.active_count()

    @property
    def known_hotels(self) -> Tuple[Hotel, ...]:
        """Every record fetched so far, in first-seen order."""
        return tuple(self._mirror.values())

    def local_evaluator(self) -> Evaluator:
        return Evaluator(hotels=self.known_hotels, places=self.places)

    def local_results(self) -> QueryResult:
        """Current filters, sort and page evaluated over the in-memory mirror."""
        page = PageRequest(offset=self.pagination.offset, limit=self.pagination.limit)
        return self.local_evaluator().execute(self.filters, self.sort, page)

    # ===== FETCH LIFECYCLE =====

    def _remember(self, hotels: Tuple[Hotel, ...]) -> None:
        for hotel in hotels:
            self._mirror[hotel.id] = hotel

    def _next_seq(self) -> int:
        self._request_seq += 1
        return self._request_seq

    def _reset_pagination(self) -> None:
        self.pagination = PaginationInfo(total=0, offset=0, limit=self.pagination.limit)
        self.hotels = ()
        self.has_initial_load = False

    async def _notify(self) -> None:
        await self.bus.emit("STATE_CHANGED", {
            'count': len(self.hotels),
            'total': self.pagination.total,
            'offset': self.pagination.offset,
            'limit': self.pagination.limit,
            'error': self.error
        })

    async def _fetch_filtered(self) -> bool:
        """
        Fetch the page for the current state. Returns False when the
        response belongs to a superseded request; fetch errors are
        raised only for the latest request.
        """
        seq = self._next_seq()
        self.loading = True
        self.error = None
        page = PageRequest(offset=self.pagination.offset, limit=self.pagination.limit)

        try:
            result = await self.client.filtered(self.filters, self.sort, page)
        except HotelSearchError:
            if seq != self._request_seq:
                logger.debug("Ignoring failure of superseded request #%d", seq)
                return False
            self.loading = False
            raise
        except Exception:
            if seq == self._request_seq:
                self.loading = False
            raise

        if seq != self._request_seq:
            logger.debug("Discarding stale response #%d (latest #%d)", seq, self._request_seq)
            return False

        self.hotels = result.page
        self.filtered_stats = result.stats
        self.pagination = result.pagination
        self._remember(result.page)
        self.loading = False
        self.has_initial_load = True
        return True

    async def _fall_back(self, error: TransientFetchError) -> None:
        logger.warning("Hotel fetch failed (%s); falling back to local search", error.message)
        self.error = FETCH_ERROR_MESSAGE
        self.loading = False
        self.hotels = self.local_evaluator().text_search(self.filters.search_query)
        self.pagination = PaginationInfo(total=len(self.hotels), offset=0, limit=self.pagination.limit)
        await self.bus.emit("FETCH_FAILED", {'reason': error.message, 'fallback_count': len(self.hotels)})

    async def _reject(self, error: ValidationError) -> None:
        """The server refused the query: keep the message, no local fallback."""
        logger.warning("Hotel query rejected: %s", error.message)
        self.error = error.message
        self.loading = False
        await self.bus.emit("FETCH_FAILED", {'reason': error.message, 'fallback_count': 0})

    async def fetch_filtered_hotels(self, reset: bool = True) -> None:
        if reset:
            self.pagination = replace(self.pagination, offset=0)
            self.hotels = ()

        try:
            if await self._fetch_filtered():
                await self._notify()
        except TransientFetchError as e:
            await self._fall_back(e)
        except ValidationError as e:
            await self._reject(e)

    async def fetch_initial_data(self) -> None:
        """Places, amenities and full-collection stats, then the first page."""
        self.loading = True
        self.error = None
        try:
            self.places, self.amenities, self.stats = await asyncio.gather(
                self.client.places(),
                self.client.amenities(),
                self.client.stats()
            )
        except TransientFetchError as e:
            logger.warning("Initial data load failed: %s", e.message)
            self.error = INITIAL_LOAD_ERROR_MESSAGE
            self.loading = False
            return

        await self.fetch_filtered_hotels()

    async def fetch_stats(self) -> Dict[str, Any]:
        self.stats = await self.client.stats()
        return self.stats

    async def wait_for_pending(self) -> None:
        """Wait until debounced fetches have fired and completed."""
        await self._debouncer.flush()
        await self._city_debouncer.flush()

    async def aclose(self) -> None:
        self._debouncer.cancel()
        self._city_debouncer.cancel()
        await self.client.aclose()

    # ===== FILTERS & SORT =====

    def update_filters(self, **changes: Any) -> None:
        """
        Merge partial filter changes and schedule a debounced fetch.
        Must be called from a running event loop.
        """
        for name in ('stars', 'amenities'):
            if name in changes:
                changes[name] = tuple(changes[name] or ())
        self.filters = replace(self.filters, **changes)
        self._reset_pagination()
        self.loading = True
        self.error = None
        self._debouncer.schedule(lambda: self.fetch_filtered_hotels(reset=True))

    async def update_sort(self, option: SortOption) -> None:
        self.sort = option
        self._reset_pagination()
        self._debouncer.cancel()
        await self.fetch_filtered_hotels(reset=True)

    async def reset_filters(self) -> None:
        self.filters = FilterState()
        self._reset_pagination()
        self._debouncer.cancel()
        await self.fetch_filtered_hotels(reset=True)

    # ===== PAGINATION =====

    async def load_more(self) -> None:
        """Advance one page; the fetched page replaces the current one."""
        if self.is_loading_more or not self.pagination.has_more:
            return

        self.is_loading_more = True
        previous_offset = self.pagination.offset
        self.pagination = replace(self.pagination, offset=previous_offset + self.pagination.limit)
        try:
            if await self._fetch_filtered():
                await self._notify()
        except TransientFetchError as e:
            logger.warning("Load more failed (%s); rolling back to offset %d", e.message, previous_offset)
            self.pagination = replace(self.pagination, offset=previous_offset)
            self.error = FETCH_ERROR_MESSAGE
        except ValidationError as e:
            self.pagination = replace(self.pagination, offset=previous_offset)
            await self._reject(e)
        finally:
            self.is_loading_more = False

    async def go_to_page(self, page: int) -> None:
        if page < 1 or page > self.pagination.total_pages:
            return
        self.pagination = replace(self.pagination, offset=(page - 1) * self.pagination.limit)
        await self.fetch_filtered_hotels(reset=False)

    async def update_items_per_page(self, limit: int) -> None:
        first_page = PageRequest(offset=0, limit=limit)
        self.pagination = replace(self.pagination, offset=first_page.offset, limit=first_page.limit)
        self.hotels = ()
        self._debouncer.cancel()
        await self.fetch_filtered_hotels(reset=True)

    # ===== TEXT SEARCH =====

    async def search_hotels(self, query: str) -> Tuple[Hotel, ...]:
        """
        Unpaginated search through /hotels/search with the current
        filters and the given text. Falls back to local text search.
        """
        self.filters = replace(self.filters, search_query=query.strip())
        self._reset_pagination()
        self._debouncer.cancel()

        seq = self._next_seq()
        self.loading = True
        self.error = None
        try:
            results = await self.client.search(self.filters)
        except TransientFetchError as e:
            if seq == self._request_seq:
                await self._fall_back(e)
            return self.hotels
        except ValidationError as e:
            if seq == self._request_seq:
                await self._reject(e)
            return ()

        if seq == self._request_seq:
            self.hotels = results
            self._remember(results)
            self.pagination = PaginationInfo(total=len(results), offset=0, limit=self.pagination.limit)
            self.loading = False
            self.has_initial_load = True
            await self._notify()
        return results

    # ===== CITIES =====

    async def search_cities(self, query: str) -> Tuple[City, ...]:
        if len(query.strip()) < CITY_SEARCH_MIN_CHARS:
            self.city_results = ()
            return ()

        key = normalize_text(query.strip())
        if key in self._city_cache:
            self._city_cache.move_to_end(key)
            self.city_results = self._city_cache[key]
            return self.city_results

        self.city_loading = True
        self.city_error = None
        try:
            results = await self.client.cities(query.strip())
            self._city_cache[key] = results
            if len(self._city_cache) > CITY_CACHE_SIZE:
                self._city_cache.popitem(last=False)
            self.city_results = results
        except TransientFetchError as e:
            logger.warning("City search failed: %s", e.message)
            self.city_error = CITY_SEARCH_ERROR_MESSAGE
        finally:
            self.city_loading = False
        return self.city_results

    def update_city_query(self, query: str) -> None:
        """Debounced city search. Must be called from a running event loop."""
        self._city_debouncer.schedule(lambda: self.search_cities(query))

    def select_city(self, city: City) -> None:
        self.clear_city_search()
        self.update_filters(place_id=city.place_id, search_query="")

    def clear_city_search(self) -> None:
        self._city_debouncer.cancel()
        self.city_results = ()
        self.city_error = None

    # ===== DETAILS =====

    async def fetch_hotel_by_id(self, hotel_id: int) -> Hotel:
        """Full record from the API; the mirrored copy if the API is unreachable."""
        try:
            hotel = await self.client.hotel(hotel_id)
        except TransientFetchError:
            known = self._mirror.get(hotel_id)
            if known is None:
                raise
            logger.warning("Hotel %d details unavailable; using cached record", hotel_id)
            return known
        self._remember((hotel,))
        return hotel
