from typing import Awaitable, Callable, Optional, Sequence

from .nodes import Element, Event, h
from ..schemas.movies_schemas import SearchResultItem

NO_RESULTS_MESSAGE = 'No results - try another search?'
NO_POSTER_TEXT = 'No Poster'

DetailsHandler = Callable[[Optional[str]], Awaitable[None]]


def render_message(results: Element, text: str) -> None:
    results.replace_children(h('p', None, text))


def build_card(item: SearchResultItem, on_details: Optional[DetailsHandler] = None) -> Element:
    """
    Build one result card: poster (or placeholder), title, year and a
    'Details' button.

    :param item: Normalized search result.
    :param on_details: Awaited with the item's id when the button is clicked.
    :return: The card element.
    """
    if item.poster_url:
        thumb = h('img', {'class': 'thumb', 'src': item.poster_url, 'alt': item.title})
    else:
        thumb = h('div', {'class': 'thumb'}, NO_POSTER_TEXT)

    button = h('button', {'class': 'btn', 'type': 'button', 'data-id': item.id}, 'Details')
    if on_details is not None:
        async def on_click(event: Event) -> None:
            await on_details(item.id)
        button.add_event_listener('click', on_click)

    return h(
        'article', {'class': 'card'},
        thumb,
        h('h2', None, item.title),
        h('div', {'class': 'meta'}, item.year),
        button,
    )


def render_results(
    results: Element,
    items: Optional[Sequence[SearchResultItem]],
    on_details: Optional[DetailsHandler] = None,
) -> None:
    """
    Replace the results region with one card per item, in order, or with
    the no-results message when there is nothing to show.
    """
    if not items:
        render_message(results, NO_RESULTS_MESSAGE)
        return
    results.replace_children(*(build_card(item, on_details) for item in items))
