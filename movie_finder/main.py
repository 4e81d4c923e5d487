from contextlib import asynccontextmanager
from typing import List

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from loguru import logger

from .clients.omdb_client import OmdbClient
from .config import configure_logging, get_settings
from .errors import MovieFinderError, ValidationError
from .schemas.movies_schemas import ErrorResponse, MovieDetail, SearchResultItem
from .ui.form import validate_query
from .ui.nodes import Event
from .ui.page import build_page, mount, to_document_html


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    async with httpx.AsyncClient(timeout=get_settings().HTTP_TIMEOUT) as http:
        app.state.http = http
        logger.info("[API] OMDb client ready")
        yield
    app.state.http = None


app = FastAPI(title="Movie Finder", lifespan=lifespan)


def get_omdb_client(request: Request) -> OmdbClient:
    return OmdbClient(getattr(request.app.state, 'http', None))


def _service_error(e: MovieFinderError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=str(e))
    return HTTPException(status_code=502, detail=f"OMDb service error: {str(e)}")


@app.get('/', response_class=HTMLResponse)
async def index():
    return to_document_html(build_page())


@app.get('/search', response_class=HTMLResponse)
async def search_page(title: str = '', client: OmdbClient = Depends(get_omdb_client)):
    page = mount(build_page(), client)
    page.ctx.query_input.value = title
    await page.ctx.form.dispatch(Event('submit'))
    return to_document_html(page.ctx)


@app.get('/movies/search', response_model=List[SearchResultItem], responses={502: {'model': ErrorResponse}})
async def search_movies(
    title: str = Query(..., min_length=1),
    client: OmdbClient = Depends(get_omdb_client),
):
    try:
        return await client.search_by_title(validate_query(title))
    except MovieFinderError as e:
        raise _service_error(e)


@app.get('/movies/{movie_id}', response_model=MovieDetail, responses={502: {'model': ErrorResponse}})
async def movie_detail(movie_id: str, client: OmdbClient = Depends(get_omdb_client)):
    try:
        return await client.fetch_by_id(movie_id)
    except MovieFinderError as e:
        raise _service_error(e)
