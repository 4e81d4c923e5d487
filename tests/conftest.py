import asyncio

import pytest
from loguru import logger

from movie_finder.errors import ApiError
from movie_finder.schemas.movies_schemas import MovieDetail, Rating, SearchResultItem
from movie_finder.ui.page import build_page, mount


class FakeOmdb:
    """Stands in for OmdbClient; optional gates hold a call open until released."""

    def __init__(self, results=None, details=None, search_error=None):
        self.results = results or {}
        self.details = details or {}
        self.search_error = search_error
        self.searches = []
        self.lookups = []
        self.gates = {}

    def gate(self, key):
        self.gates[key] = asyncio.Event()
        return self.gates[key]

    async def _wait(self, key):
        if key in self.gates:
            await self.gates[key].wait()

    async def search_by_title(self, query):
        self.searches.append(query)
        await self._wait(query)
        if self.search_error is not None:
            raise self.search_error
        return self.results.get(query, [])

    async def fetch_by_id(self, movie_id):
        self.lookups.append(movie_id)
        await self._wait(movie_id)
        if movie_id not in self.details:
            raise ApiError("Incorrect IMDb ID.")
        return self.details[movie_id]


BATMAN_RESULTS = [
    SearchResultItem(id="tt0372784", title="Batman Begins", year="2005",
                     poster_url="https://img/begins.jpg"),
    SearchResultItem(id="tt0096895", title="Batman", year="1989", poster_url=None),
]

BATMAN_BEGINS = MovieDetail(
    id="tt0372784",
    title="Batman Begins",
    year="2005",
    rated="PG-13",
    runtime="140 min",
    genre="Action, Crime, Drama",
    plot="After witnessing his parents' death, Bruce learns the art of fighting.",
    director="Christopher Nolan",
    ratings=[
        Rating(source="Internet Movie Database", value="8.2/10"),
        Rating(source="Rotten Tomatoes", value="85%"),
        Rating(source="Metacritic", value="70/100"),
    ],
    poster_url="https://img/begins.jpg",
)


@pytest.fixture
def fake_omdb():
    return FakeOmdb(
        results={"batman": BATMAN_RESULTS},
        details={"tt0372784": BATMAN_BEGINS},
    )


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def page(fake_omdb):
    return mount(build_page(), fake_omdb)
