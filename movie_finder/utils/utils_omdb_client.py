from typing import Any, Dict, List, Optional

from ..schemas.movies_schemas import MovieDetail, Rating, SearchResultItem

NOT_AVAILABLE = 'N/A'

SEARCH_FALLBACK_ERROR = 'Unknown OMDb error'
DETAIL_FALLBACK_ERROR = 'Could not load details'


def usable_poster(raw: Optional[str]) -> Optional[str]:
    """
    Return the poster URL OMDb supplied, or None when it is absent.
    OMDb uses the literal 'N/A' for records without artwork.

    :param raw: Value of the 'Poster' field, possibly missing.
    :return: Poster URL or None.
    """
    if not raw or raw == NOT_AVAILABLE:
        return None
    return raw


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def build_search_params(api_key: str, query: str) -> Dict[str, str]:
    return {'apikey': api_key, 's': query}


def build_detail_params(api_key: str, movie_id: str) -> Dict[str, str]:
    return {'apikey': api_key, 'i': movie_id, 'plot': 'full'}


def failure_message(data: Dict[str, Any], fallback: str) -> Optional[str]:
    """
    Inspect an OMDb payload for its logical failure flag.

    :param data: Decoded JSON body.
    :param fallback: Message used when the service omits 'Error'.
    :return: The failure message, or None if the payload is a success.
    """
    if data.get('Response') == 'False':
        return data.get('Error') or fallback
    return None


def to_search_item(item: Dict[str, Any]) -> SearchResultItem:
    """
    Map one raw record of the 'Search' array to a SearchResultItem.

    :param item: Raw OMDb search record.
    :return: SearchResultItem with the poster normalized.
    """
    return SearchResultItem(
        id=_text(item.get('imdbID')),
        title=_text(item.get('Title')) or '',
        year=str(item.get('Year') or ''),
        poster_url=usable_poster(item.get('Poster')),
    )


def to_search_items(data: Dict[str, Any]) -> List[SearchResultItem]:
    return [to_search_item(item) for item in data.get('Search') or []]


def to_ratings(raw: Any) -> List[Rating]:
    if not isinstance(raw, list):
        return []
    return [
        Rating(source=_text(r.get('Source')) or '', value=_text(r.get('Value')) or '')
        for r in raw if isinstance(r, dict)
    ]


def to_movie_detail(data: Dict[str, Any]) -> MovieDetail:
    """
    Map the root object of an OMDb detail response to a MovieDetail.
    Rating pairs keep the order the service returned them in.

    :param data: Raw OMDb detail payload.
    :return: MovieDetail instance.
    """
    return MovieDetail(
        id=_text(data.get('imdbID')),
        title=_text(data.get('Title')) or '',
        year=_text(data.get('Year')),
        rated=_text(data.get('Rated')),
        runtime=_text(data.get('Runtime')),
        genre=_text(data.get('Genre')),
        plot=_text(data.get('Plot')),
        director=_text(data.get('Director')),
        ratings=to_ratings(data.get('Ratings')),
        poster_url=usable_poster(data.get('Poster')),
    )
