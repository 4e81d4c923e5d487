from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from ..config import get_settings
from ..errors import ApiError, NetworkError, ValidationError
from ..schemas.movies_schemas import MovieDetail, SearchResultItem
from ..utils.utils_omdb_client import (
    DETAIL_FALLBACK_ERROR,
    SEARCH_FALLBACK_ERROR,
    build_detail_params,
    build_search_params,
    failure_message,
    to_movie_detail,
    to_search_items,
)


class OmdbClient:
    """
    Read-only client for the OMDb movie-metadata service.

    Only two calls are made: a title search and a lookup by IMDb id.
    Transport failures surface as NetworkError, payloads flagged with
    Response == "False" surface as ApiError.
    """

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self._http = http
        self.api_key = api_key if api_key is not None else settings.OMDB_API_KEY
        self.base_url = base_url or settings.OMDB_BASE_URL
        self.timeout = timeout or settings.HTTP_TIMEOUT

    async def search_by_title(self, query: str) -> List[SearchResultItem]:
        """
        Search OMDb for titles matching the query.

        :param query: Free-text title, sent as the 's' parameter.
        :return: Normalized results; empty when the service has no 'Search' array.
        """
        data = await self._fetch_json(build_search_params(self.api_key, query))
        message = failure_message(data, SEARCH_FALLBACK_ERROR)
        if message:
            raise ApiError(message)
        return to_search_items(data)

    async def fetch_by_id(self, movie_id: Optional[str]) -> MovieDetail:
        """
        Fetch the full record, with the unabridged plot, for one IMDb id.

        :param movie_id: IMDb identifier from a search result.
        :return: MovieDetail for that id.
        """
        if not movie_id:
            raise ValidationError('Movie id is required')
        data = await self._fetch_json(build_detail_params(self.api_key, movie_id))
        message = failure_message(data, DETAIL_FALLBACK_ERROR)
        if message:
            raise ApiError(message)
        return to_movie_detail(data)

    async def _fetch_json(self, params: Dict[str, str]) -> Dict[str, Any]:
        if not self.api_key:
            raise ApiError('OMDB_API_KEY is not configured')
        try:
            resp = await self._get(params)
        except httpx.HTTPError as exc:
            raise NetworkError(f'network error: {exc}') from exc
        if not 200 <= resp.status_code < 300:
            raise NetworkError(
                f'network error: {resp.status_code}', status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiError('Malformed OMDb response') from exc
        logger.debug("[OMDb] response for {}: {}", _redacted(params), data)
        if not isinstance(data, dict):
            raise ApiError('Malformed OMDb response')
        return data

    async def _get(self, params: Dict[str, str]) -> httpx.Response:
        if self._http is not None:
            return await self._http.get(self.base_url, params=params)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.base_url, params=params)


def _redacted(params: Dict[str, str]) -> Dict[str, str]:
    return {k: v for k, v in params.items() if k != 'apikey'}
