import httpx
import pytest

from movie_finder.clients.omdb_client import OmdbClient
from movie_finder.errors import ApiError, NetworkError, ValidationError

BASE = "https://omdb.test/"


class FakeResp:
    def __init__(self, payload, status_code=200):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


class DummyClient:
    def __init__(self, resp):
        self.resp = resp
        self.calls = []

    async def get(self, url, params=None):
        self.calls.append((url, params))
        return self.resp


def make_client(resp, api_key="k123"):
    dummy = DummyClient(resp)
    return OmdbClient(dummy, api_key=api_key, base_url=BASE), dummy


# --- search_by_title ---------------------------------------------------------


@pytest.mark.asyncio
async def test_search_by_title_sends_key_and_query():
    client, dummy = make_client(FakeResp({"Response": "True", "Search": []}))
    await client.search_by_title("star wars")
    assert dummy.calls == [(BASE, {"apikey": "k123", "s": "star wars"})]


@pytest.mark.asyncio
async def test_search_by_title_normalizes_records():
    payload = {
        "Response": "True",
        "Search": [
            {"Title": "Batman Begins", "Year": "2005", "imdbID": "tt0372784",
             "Poster": "https://img/bb.jpg"},
            {"Title": "Batman", "Year": "1989", "imdbID": "tt0096895", "Poster": "N/A"},
        ],
    }
    client, _ = make_client(FakeResp(payload))
    items = await client.search_by_title("batman")
    assert [i.title for i in items] == ["Batman Begins", "Batman"]
    assert items[0].poster_url == "https://img/bb.jpg"
    assert items[1].poster_url is None
    assert items[1].id == "tt0096895"


@pytest.mark.asyncio
async def test_search_by_title_missing_search_is_empty():
    client, _ = make_client(FakeResp({"Response": "True"}))
    assert await client.search_by_title("zzz") == []


@pytest.mark.asyncio
async def test_search_by_title_service_error_message():
    client, _ = make_client(FakeResp({"Response": "False", "Error": "Movie not found!"}))
    with pytest.raises(ApiError, match="Movie not found!"):
        await client.search_by_title("qwertyuiop")


@pytest.mark.asyncio
async def test_search_by_title_service_error_fallback():
    client, _ = make_client(FakeResp({"Response": "False"}))
    with pytest.raises(ApiError, match="Unknown OMDb error"):
        await client.search_by_title("x")


@pytest.mark.asyncio
async def test_search_by_title_non_2xx_is_network_error():
    client, _ = make_client(FakeResp({}, status_code=503))
    with pytest.raises(NetworkError) as info:
        await client.search_by_title("x")
    assert info.value.status_code == 503
    assert str(info.value) == "network error: 503"


@pytest.mark.asyncio
async def test_fetch_by_id_non_2xx_is_network_error():
    client, _ = make_client(FakeResp({"Response": "True", "Title": "Heat"}, status_code=404))
    with pytest.raises(NetworkError) as info:
        await client.fetch_by_id("tt0113277")
    assert info.value.status_code == 404
    assert str(info.value) == "network error: 404"


@pytest.mark.asyncio
async def test_transport_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = OmdbClient(http, api_key="k", base_url=BASE)
        with pytest.raises(NetworkError):
            await client.search_by_title("x")


@pytest.mark.asyncio
async def test_query_is_url_encoded_on_the_wire():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["s"] = request.url.params["s"]
        return httpx.Response(200, json={"Response": "True", "Search": []})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = OmdbClient(http, api_key="k", base_url=BASE)
        await client.search_by_title("fast & furious")
    assert seen["s"] == "fast & furious"
    assert "%26" in seen["url"]


@pytest.mark.asyncio
async def test_missing_api_key_never_hits_the_network():
    client, dummy = make_client(FakeResp({}), api_key="")
    with pytest.raises(ApiError, match="OMDB_API_KEY"):
        await client.search_by_title("x")
    assert dummy.calls == []


# --- fetch_by_id ---------------------------------------------------------------


@pytest.mark.asyncio
async def test_fetch_by_id_requests_full_plot():
    payload = {
        "Response": "True", "Title": "Heat", "Year": "1995", "imdbID": "tt0113277",
        "Rated": "R", "Runtime": "170 min", "Genre": "Crime, Drama",
        "Director": "Michael Mann", "Plot": "A group of...", "Poster": "N/A",
        "Ratings": [
            {"Source": "Internet Movie Database", "Value": "8.3/10"},
            {"Source": "Rotten Tomatoes", "Value": "88%"},
        ],
    }
    client, dummy = make_client(FakeResp(payload))
    detail = await client.fetch_by_id("tt0113277")
    assert dummy.calls[0][1] == {"apikey": "k123", "i": "tt0113277", "plot": "full"}
    assert detail.title == "Heat"
    assert detail.director == "Michael Mann"
    assert detail.poster_url is None
    assert [(r.source, r.value) for r in detail.ratings] == [
        ("Internet Movie Database", "8.3/10"),
        ("Rotten Tomatoes", "88%"),
    ]


@pytest.mark.asyncio
async def test_fetch_by_id_error_fallback():
    client, _ = make_client(FakeResp({"Response": "False"}))
    with pytest.raises(ApiError, match="Could not load details"):
        await client.fetch_by_id("tt0")


@pytest.mark.asyncio
async def test_fetch_by_id_rejects_missing_id():
    client, dummy = make_client(FakeResp({}))
    with pytest.raises(ValidationError):
        await client.fetch_by_id(None)
    assert dummy.calls == []
