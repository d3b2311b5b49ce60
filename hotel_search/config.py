import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()

# Price bounds in minor currency units
DEFAULT_MIN_PRICE = 0
DEFAULT_MAX_PRICE = 1_000_000

# Pagination
DEFAULT_LIMIT = 6
MAX_LIMIT = 100
AVAILABLE_LIMITS = (6, 12, 24, 48)

STAR_VALUES = ("1", "2", "3", "4", "5")

AMENITY_KEYS = (
    "WI_FI", "PARKING", "POOL", "RESTAURANT", "FITNESS_CENTER", "ROOM_SERVICE",
    "STEAM_ROOM", "PET_FRIENDLY", "BAR", "SPA", "ACCESSIBILITY", "AIR_CONDITIONING",
)

ALLOWED_SORT_FIELDS = ("totalPrice", "dailyPrice", "stars", "name", "district")
DEFAULT_SORT_FIELD = "totalPrice"
DEFAULT_SORT_ORDER = "asc"
SORT_DIRECTIONS = ("asc", "desc")

DEBOUNCE_SECONDS = 0.3
CITY_SEARCH_MIN_CHARS = 3
CITY_CACHE_SIZE = 64

API_NAME = "Onfly Hotels API"
API_VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    api_base_path: str
    data_path: str
    log_level: str
    cors_origins: Tuple[str, ...]
    api_url: str
    request_timeout: float


def _default_data_path() -> str:
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(root, "data", "database.json")


def get_settings() -> Settings:
    """Read settings from the environment (and .env, if present)."""
    origins = os.getenv("HOTELS_CORS_ORIGINS", "*")
    return Settings(
        host=os.getenv("HOTELS_HOST", "localhost"),
        port=int(os.getenv("HOTELS_PORT", "3001")),
        api_base_path=os.getenv("HOTELS_API_BASE", "/api"),
        data_path=os.getenv("HOTELS_DATA_PATH") or _default_data_path(),
        log_level=os.getenv("HOTELS_LOG_LEVEL", "INFO").upper(),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        api_url=os.getenv("HOTELS_API_URL", "http://localhost:3001/api"),
        request_timeout=float(os.getenv("HOTELS_REQUEST_TIMEOUT", "10")),
    )
