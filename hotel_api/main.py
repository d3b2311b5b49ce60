from fastapi import FastAPI, APIRouter, Request, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
import time
from typing import Dict, Any, Optional, Tuple
from datetime import datetime

from hotel_search.catalog import describe_amenity, default_catalog
from hotel_search.config import get_settings, API_NAME, API_VERSION, AVAILABLE_LIMITS, MAX_LIMIT
from hotel_search.domain import Hotel, Place, Amenity
from hotel_search.engine import Evaluator, create_evaluator
from hotel_search.errors import HotelSearchError, NotFoundError, InternalError
from hotel_search.frp import event_bus
from hotel_search.memo import search_places, get_memoization_stats
from hotel_search.params import parse_filter_params, parse_sort_params, parse_page_params, parse_int
from hotel_search.transforms import (
    load_seed, parse_seed_data, hotel_to_dict, place_to_dict, amenity_to_dict,
    city_to_dict, result_to_dict, filters_to_dict, view_to_dict
)

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("hotel_api")


# Dataset state: loaded once at start-up, read-only afterwards
class State:
    def __init__(self, data_path: Optional[str] = None):
        self.data_path = data_path or settings.data_path
        self.started_at = time.time()
        self.hotels: Tuple[Hotel, ...] = ()
        self.places: Tuple[Place, ...] = ()
        self.amenities: Tuple[Amenity, ...] = ()
        self.evaluator: Evaluator = create_evaluator((), ())

        self.load_initial_data()

    def load_initial_data(self):
        """Load the dataset; an unreadable file leaves the collections empty."""
        if not os.path.exists(self.data_path):
            logger.warning("Dataset %s not found; serving an empty collection", self.data_path)
            return
        try:
            self.hotels, self.places, self.amenities = parse_seed_data(load_seed(self.data_path))
        except (OSError, ValueError) as e:
            logger.error("Error loading dataset %s: %s", self.data_path, e)
            return
        if not self.amenities:
            self.amenities = default_catalog()
        self.evaluator = create_evaluator(self.hotels, self.places)
        logger.info("Loaded %d hotels from %s", len(self.hotels), self.data_path)


state = State()


# Dependency to get state
def get_state() -> State:
    return state


def now() -> str:
    return datetime.now().isoformat()


def envelope(data: Any, **extra) -> Dict[str, Any]:
    return {"success": True, "data": data, **extra, "timestamp": now()}


def error_body(error: HotelSearchError) -> Dict[str, Any]:
    return {"success": False, "error": error.error, "message": error.message, "timestamp": now()}


app = FastAPI(title=API_NAME, version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    query = f"?{request.url.query}" if request.url.query else ""
    logger.info("%s %s%s", request.method, request.url.path, query)
    return await call_next(request)


@app.exception_handler(HotelSearchError)
async def hotel_search_error_handler(request: Request, exc: HotelSearchError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Server error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(InternalError(str(exc))))


router = APIRouter(prefix=settings.api_base_path)


# --- API Endpoints ---

@router.get("/info")
async def api_info():
    base = settings.api_base_path
    return {
        "success": True,
        "name": API_NAME,
        "version": API_VERSION,
        "description": "API para busca e filtros de hotéis",
        "endpoints": {
            "hotels": f"{base}/hotels",
            "search": f"{base}/hotels/search",
            "stats": f"{base}/hotels/stats",
            "filtered": f"{base}/hotels/filtered",
            "places": f"{base}/places",
            "cities": f"{base}/cities",
            "amenities": f"{base}/amenities"
        },
        "limits": {"available": list(AVAILABLE_LIMITS), "max": MAX_LIMIT},
        "timestamp": now()
    }


@router.get("/hotels")
async def list_hotels(state: State = Depends(get_state)):
    hotels = [hotel_to_dict(hotel) for hotel in state.hotels]
    return envelope(hotels, count=len(hotels))


@router.get("/hotels/search")
async def search_hotels(
    q: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    stars: Optional[str] = None,
    amenities: Optional[str] = None,
    has_breakfast: Optional[str] = Query(None, alias="hasBreakFast"),
    has_refundable_room: Optional[str] = Query(None, alias="hasRefundableRoom"),
    place_id: Optional[str] = Query(None, alias="placeId"),
    state: State = Depends(get_state)
):
    """Filter only: every match, in dataset order."""
    filters = parse_filter_params(
        q, min_price, max_price, stars, amenities, has_breakfast, has_refundable_room, place_id
    )
    hotels = state.evaluator.search(filters)

    await event_bus.emit("SEARCH", {**filters_to_dict(filters), "count": len(hotels)})

    return envelope([hotel_to_dict(hotel) for hotel in hotels], count=len(hotels))


@router.get("/hotels/filtered")
async def filtered_hotels(
    q: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    stars: Optional[str] = None,
    amenities: Optional[str] = None,
    has_breakfast: Optional[str] = Query(None, alias="hasBreakFast"),
    has_refundable_room: Optional[str] = Query(None, alias="hasRefundableRoom"),
    place_id: Optional[str] = Query(None, alias="placeId"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    state: State = Depends(get_state)
):
    """Filter, sort and paginate, with stats over the whole filtered result."""
    filters = parse_filter_params(
        q, min_price, max_price, stars, amenities, has_breakfast, has_refundable_room, place_id
    )
    sort = parse_sort_params(sort_by, sort_order)
    page = parse_page_params(limit, offset)

    result = state.evaluator.execute(filters, sort, page)

    await event_bus.emit("SEARCH", {
        **filters_to_dict(filters, sort),
        "offset": page.offset,
        "limit": page.limit,
        "total": result.pagination.total
    })

    return envelope(result_to_dict(result))


@router.get("/hotels/stats")
async def hotels_stats(state: State = Depends(get_state)):
    return envelope(state.evaluator.stats())


@router.get("/hotels/{hotel_id}")
async def get_hotel(hotel_id: str, state: State = Depends(get_state)):
    identifier = parse_int("id", hotel_id)
    hotel = state.evaluator.find(identifier).or_raise(
        NotFoundError(f"Hotel com ID {hotel_id} não foi encontrado")
    )
    return envelope(hotel_to_dict(hotel))


@router.get("/places")
async def list_places(state: State = Depends(get_state)):
    places = [place_to_dict(place) for place in state.places]
    return envelope(places, count=len(places))


@router.get("/places/{place_id}/hotels")
async def hotels_by_place(place_id: str, state: State = Depends(get_state)):
    hotels = state.evaluator.hotels_in_place(parse_int("id", place_id))
    return envelope([hotel_to_dict(hotel) for hotel in hotels], count=len(hotels))


@router.get("/cities")
async def search_cities(name_like: Optional[str] = None, state: State = Depends(get_state)):
    """Places as cities; queries under three characters return nothing."""
    cities = [city_to_dict(city) for city in search_places(state.places, name_like or "")]
    return envelope(cities, count=len(cities))


@router.get("/amenities")
async def list_amenities(state: State = Depends(get_state)):
    """Amenities with display label, icon and color"""
    amenities = [
        {**amenity_to_dict(amenity), **view_to_dict(describe_amenity(amenity.key, state.amenities))}
        for amenity in state.amenities
    ]
    return envelope(amenities, count=len(amenities))


@router.get("/events")
async def get_events(limit: int = 20, event_type: Optional[str] = None):
    """Recent search events."""
    events = event_bus.get_event_history(limit, event_type)
    return envelope(
        [
            {
                "id": event.id,
                "timestamp": event.ts,
                "name": event.name,
                "payload": event.payload
            }
            for event in events
        ],
        count=len(events),
        counters=event_bus.get_state()
    )


app.include_router(router)


# Health check endpoint
@app.get("/health")
async def health_check(state: State = Depends(get_state)):
    return {
        "success": True,
        "status": "OK",
        "timestamp": now(),
        "uptime": round(time.time() - state.started_at, 3),
        "hotels_count": len(state.hotels),
        "places_count": len(state.places),
        "amenities_count": len(state.amenities),
        "memo": get_memoization_stats()
    }


# --- Main execution ---

if __name__ == "__main__":
    import uvicorn
    # uvicorn hotel_api.main:app --reload --port 3001
    uvicorn.run("hotel_api.main:app", host=settings.host, port=settings.port, reload=True)
