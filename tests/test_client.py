import httpx
import pytest

from hotel_search.client import HotelApiClient, extract_data
from hotel_search.domain import FilterState, SortOption, PageRequest
from hotel_search.errors import TransientFetchError, ValidationError, NotFoundError


def mock_client(handler):
    transport = httpx.MockTransport(handler)
    return HotelApiClient(client=httpx.AsyncClient(transport=transport, base_url="http://test/api"))


def test_extract_data():
    assert extract_data({"success": True, "data": [1], "count": 1}) == [1]
    assert extract_data([1, 2]) == [1, 2]


@pytest.mark.asyncio
async def test_filtered_round_trip(api_client):
    result = await api_client.filtered(
        FilterState(stars=("4", "5")), SortOption("totalPrice", direction="desc"), PageRequest(limit=2)
    )
    assert [h.id for h in result.page] == [3, 1]
    assert result.pagination.total == 3
    assert result.pagination.has_more
    assert result.stats["priceRange"] == {"min": 30000, "max": 90000}


@pytest.mark.asyncio
async def test_lookups(api_client):
    assert len(await api_client.places()) == 2
    assert [a.key for a in await api_client.amenities()] == ["WI_FI", "POOL"]
    assert (await api_client.stats())["total"] == 6
    assert [h.id for h in await api_client.search(FilterState(search_query="copacabana"))] == [3, 6]
    assert [h.id for h in await api_client.hotels_in_place(1)] == [1, 2, 5]
    assert [c.place_id for c in await api_client.cities("janeiro")] == [2]


@pytest.mark.asyncio
async def test_hotel_images_default_to_thumb(api_client):
    hotel = await api_client.hotel(4)
    assert hotel.images == (hotel.thumb,)

    with pytest.raises(NotFoundError):
        await api_client.hotel(404)


@pytest.mark.asyncio
async def test_server_errors_are_transient():
    client = mock_client(lambda request: httpx.Response(500, json={"success": False, "error": "boom"}))
    with pytest.raises(TransientFetchError):
        await client.stats()


@pytest.mark.asyncio
async def test_network_errors_are_transient():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransientFetchError):
        await mock_client(handler).places()


@pytest.mark.asyncio
async def test_invalid_json_is_transient():
    client = mock_client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(TransientFetchError):
        await client.places()


@pytest.mark.asyncio
async def test_client_errors_are_not_retried_locally():
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(400, json={"success": False, "error": "Parâmetros inválidos", "message": "bad limit"})

    with pytest.raises(ValidationError, match="bad limit"):
        await mock_client(handler).filtered(FilterState(), None, PageRequest())
    assert seen == ["/api/hotels/filtered"]
