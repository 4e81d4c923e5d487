from typing import TYPE_CHECKING

from loguru import logger

from .nodes import Event
from .renderer import render_message, render_results
from ..errors import ValidationError

if TYPE_CHECKING:
    from ..clients.omdb_client import OmdbClient
    from .modal import ModalController
    from .page import PageContext

EMPTY_QUERY_MESSAGE = 'Type a movie title to search!'
SEARCH_FAILED_MESSAGE = 'Something went wrong - try again'


def validate_query(raw: str) -> str:
    query = (raw or '').strip()
    if not query:
        raise ValidationError(EMPTY_QUERY_MESSAGE)
    return query


class FormController:
    """Turns search-form submissions into a search and a re-render of the results."""

    def __init__(self, ctx: 'PageContext', client: 'OmdbClient', modal: 'ModalController'):
        self.ctx = ctx
        self.client = client
        self.modal = modal
        self._ticket = 0

    def attach(self) -> None:
        self.ctx.form.add_event_listener('submit', self.on_submit)

    async def on_submit(self, event: Event) -> None:
        event.prevent_default()
        # a blank submit also supersedes any search still in flight
        self._ticket += 1
        ticket = self._ticket
        try:
            query = validate_query(self.ctx.query_input.value)
        except ValidationError as exc:
            render_message(self.ctx.results, str(exc))
            return

        render_message(self.ctx.results, f'Searching for: {query}...')
        try:
            movies = await self.client.search_by_title(query)
        except Exception:
            if ticket != self._ticket:
                logger.debug("[Form] dropping stale failure for {!r}", query)
                return
            logger.exception("[Form] search for {!r} failed", query)
            render_message(self.ctx.results, SEARCH_FAILED_MESSAGE)
            return

        if ticket != self._ticket:
            logger.debug("[Form] dropping stale results for {!r}", query)
            return
        logger.info("[Form] {} result(s) for {!r}", len(movies), query)
        render_results(self.ctx.results, movies, self.modal.open_details)
