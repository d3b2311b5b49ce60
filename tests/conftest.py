import json
import sys
from pathlib import Path

import httpx
import pytest

# Force the root directory into sys.path
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from hotel_search.domain import Hotel, Place, Amenity
from hotel_search.memo import clear_caches


def make_hotel(id, name, total_price, stars="3", district="Centro", amenities=(),
               has_breakfast=False, has_refundable_room=False, place_id=1,
               description="", daily_price=None, images=()):
    return Hotel(
        id=id,
        name=name,
        description=description,
        district=district,
        stars=stars,
        daily_price=daily_price if daily_price is not None else total_price // 3,
        total_price=total_price,
        tax=total_price // 20,
        thumb=f"https://img.test/{id}.jpg",
        amenities=tuple(amenities),
        has_breakfast=has_breakfast,
        has_refundable_room=has_refundable_room,
        place_id=place_id,
        images=tuple(images)
    )


@pytest.fixture
def places():
    return (
        Place(id=1, name="São Paulo", state="SP", country="Brasil"),
        Place(id=2, name="Rio de Janeiro", state="RJ", country="Brasil"),
    )


@pytest.fixture
def hotels():
    return (
        make_hotel(1, "Hotel Paulista", 30000, stars="4", district="Bela Vista",
                   amenities=("WI_FI", "POOL"), has_breakfast=True, has_refundable_room=True,
                   description="Perto da avenida"),
        make_hotel(2, "Pousada Jardins", 15000, stars="3", district="Jardins",
                   amenities=("WI_FI",), has_breakfast=True),
        make_hotel(3, "Copacabana Palace", 90000, stars="5", district="Copacabana",
                   amenities=("WI_FI", "POOL", "SPA"), has_breakfast=True, has_refundable_room=True,
                   place_id=2),
        make_hotel(4, "Ipanema Inn", 20000, stars="3", district="Ipanema",
                   amenities=("PARKING",), has_refundable_room=True, place_id=2),
        make_hotel(5, "Econômico Centro", 5000, stars="1", district="Sé"),
        make_hotel(6, "Atlântico Hotel", 30000, stars="4", district="Copacabana",
                   amenities=("WI_FI", "BAR"), has_breakfast=True, place_id=2),
    )


@pytest.fixture
def amenities():
    return (
        Amenity(key="WI_FI", label="Wi-fi grátis"),
        Amenity(key="POOL", label="Piscina"),
    )


@pytest.fixture(autouse=True)
def fresh_caches():
    clear_caches()
    yield
    clear_caches()


@pytest.fixture
def seed(hotels, places, amenities):
    from hotel_search.transforms import hotel_to_dict, place_to_dict, amenity_to_dict
    return {
        "hotels": [hotel_to_dict(h) for h in hotels],
        "places": [place_to_dict(p) for p in places],
        "amenities": [amenity_to_dict(a) for a in amenities],
    }


@pytest.fixture
def api_state(tmp_path, seed):
    """Server state loaded from the fixture dataset, injected into every route."""
    from hotel_api.main import app, get_state, State

    path = tmp_path / "database.json"
    path.write_text(json.dumps(seed), encoding="utf-8")
    state = State(str(path))

    app.dependency_overrides[get_state] = lambda: state
    yield state
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(api_state):
    """HotelApiClient talking to the app in-process."""
    from hotel_api.main import app
    from hotel_search.client import HotelApiClient

    transport = httpx.ASGITransport(app=app)
    return HotelApiClient(client=httpx.AsyncClient(transport=transport, base_url="http://test/api"))
