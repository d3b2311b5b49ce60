import unicodedata
from functools import lru_cache
from typing import Tuple, Dict, Any

from .config import CITY_SEARCH_MIN_CHARS
from .domain import Place, City


@lru_cache(maxsize=4096)
def normalize_text(text: str) -> str:
    """
    Canonical decomposition, diacritic stripping and lowercasing.
    "São Paulo" -> "sao paulo". Memoized: the same hotel fields are
    normalized on every search.
    """
    decomposed = unicodedata.normalize('NFD', text or "")
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower()


@lru_cache(maxsize=256)
def search_places(places: Tuple[Place, ...], query: str) -> Tuple[City, ...]:
    """Places whose name or state contains the query, as cities."""
    if not query or len(query.strip()) < CITY_SEARCH_MIN_CHARS:
        return ()

    needle = normalize_text(query.strip())
    return tuple(
        City(
            name=place.name,
            state_name=place.state,
            state_shortname=place.state,
            place_id=place.id
        )
        for place in places
        if needle in normalize_text(place.name) or needle in normalize_text(place.state)
    )


def _cache_stats(cached) -> Dict[str, Any]:
    info = cached.cache_info()
    lookups = info.hits + info.misses
    return {
        'hits': info.hits,
        'misses': info.misses,
        'maxsize': info.maxsize,
        'currsize': info.currsize,
        'hit_ratio': info.hits / lookups if lookups > 0 else 0
    }


def get_memoization_stats() -> Dict[str, Any]:
    """Cache statistics for the memoized helpers."""
    return {
        'normalize_text': _cache_stats(normalize_text),
        'search_places': _cache_stats(search_places),
    }


def clear_caches() -> None:
    normalize_text.cache_clear()
    search_places.cache_clear()
