from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from loguru import logger

from .nodes import Element, Event, Listener, h
from ..schemas.movies_schemas import MovieDetail
from ..utils.utils_omdb_client import DETAIL_FALLBACK_ERROR

if TYPE_CHECKING:
    from ..clients.omdb_client import OmdbClient
    from .page import PageContext

LOADING_DETAILS = 'Loading details...'
LOADING_DEFAULT = 'Loading...'
CLOSE_BUTTON_ID = 'overlayClose'


class OverlayStatus(str, Enum):
    CLOSED = 'closed'
    LOADING = 'loading'
    DETAIL = 'detail'
    ERROR = 'error'


@dataclass(frozen=True)
class OverlayState:
    status: OverlayStatus
    message: Optional[str] = None
    detail: Optional[MovieDetail] = None


CLOSED = OverlayState(OverlayStatus.CLOSED)


class ModalController:
    """
    Owns the page's single overlay.

    Every open swaps the panel, unhides the overlay and installs one
    backdrop-click listener on the overlay and one keydown listener on the
    document; close hides it again and removes exactly those two. Errors
    reuse the message panel of the loading view.
    """

    def __init__(self, ctx: 'PageContext', client: 'OmdbClient'):
        self.ctx = ctx
        self.client = client
        self.state: OverlayState = CLOSED
        self._installed: List[Tuple[Element, str, Listener]] = []
        self._ticket = 0

    @property
    def is_open(self) -> bool:
        return self.state.status is not OverlayStatus.CLOSED

    @property
    def overlay(self) -> Element:
        return self.ctx.overlay

    # -- transitions ------------------------------------------------------

    def show_loading(self, text: Optional[str] = None) -> None:
        message = text or LOADING_DEFAULT
        self._open_with(_message_panel(message), OverlayState(OverlayStatus.LOADING, message=message))

    def show_error(self, message: Optional[str] = None) -> None:
        message = message or DETAIL_FALLBACK_ERROR
        self._open_with(_message_panel(message), OverlayState(OverlayStatus.ERROR, message=message))

    def show_details(self, detail: MovieDetail) -> None:
        panel = _detail_panel(detail)
        self._open_with(panel, OverlayState(OverlayStatus.DETAIL, detail=detail))
        close_button = panel.get_element_by_id(CLOSE_BUTTON_ID)
        close_button.add_event_listener('click', self._on_close_click)

    def close(self) -> None:
        # a fetch still in flight must not reopen a dismissed overlay
        self._ticket += 1
        self.overlay.set_attribute('hidden', 'true')
        self.overlay.set_attribute('aria-hidden', 'true')
        self._detach_listeners()
        self.state = CLOSED

    async def open_details(self, movie_id: Optional[str]) -> None:
        """
        Show the loading panel, fetch the record and swap in the detail
        panel. Failures stay on screen as a message until dismissed.
        """
        self._ticket += 1
        ticket = self._ticket
        self.show_loading(LOADING_DETAILS)
        try:
            detail = await self.client.fetch_by_id(movie_id)
        except Exception as exc:
            if ticket != self._ticket:
                logger.debug("[Modal] dropping stale failure for {}", movie_id)
                return
            logger.exception("[Modal] could not load details for {}", movie_id)
            self.show_error(str(exc) or DETAIL_FALLBACK_ERROR)
            return
        if ticket != self._ticket:
            logger.debug("[Modal] dropping stale details for {}", movie_id)
            return
        self.show_details(detail)

    # -- wiring -----------------------------------------------------------

    def _open_with(self, panel: Element, state: OverlayState) -> None:
        self.overlay.replace_children(panel)
        self.overlay.remove_attribute('hidden')
        self.overlay.set_attribute('aria-hidden', 'false')
        self._detach_listeners()
        self._install(self.overlay, 'click', self._on_backdrop_click)
        self._install(self.ctx.document, 'keydown', self._on_keydown)
        self.state = state

    def _install(self, target: Element, type: str, listener: Listener) -> None:
        target.add_event_listener(type, listener)
        self._installed.append((target, type, listener))

    def _detach_listeners(self) -> None:
        for target, type, listener in self._installed:
            target.remove_event_listener(type, listener)
        self._installed = []

    def _on_backdrop_click(self, event: Event) -> None:
        if event.target is self.overlay:
            self.close()

    def _on_keydown(self, event: Event) -> None:
        if event.key == 'Escape':
            self.close()

    def _on_close_click(self, event: Event) -> None:
        self.close()


def _panel(*children) -> Element:
    return h('div', {'class': 'overlay__panel', 'role': 'dialog', 'aria-modal': 'true'}, *children)


def _message_panel(text: str) -> Element:
    return _panel(
        h('div', {'class': 'overlay__placeholder'}, '...'),
        h('div', None, h('p', None, text)),
    )


def _pill(text: str) -> Element:
    return h('span', {'class': 'pill'}, text)


def _detail_panel(detail: MovieDetail) -> Element:
    if detail.poster_url:
        poster = h('img', {'class': 'overlay__poster', 'src': detail.poster_url, 'alt': detail.title})
    else:
        poster = h('div', {'class': 'overlay__placeholder'}, 'No poster')

    return _panel(
        h('div', None, poster),
        h('div', None,
          h('div', {'class': 'overlay__header'},
            h('h2', None, detail.title, ' ', h('span', {'class': 'year'}, f'({detail.year or "N/A"})')),
            h('button', {'class': 'btn', 'id': CLOSE_BUTTON_ID, 'type': 'button'}, 'Close')),
          h('div', {'class': 'pills'},
            _pill(detail.rated or 'Unrated'),
            _pill(detail.runtime or 'N/A'),
            _pill(detail.genre or '')),
          h('p', {'class': 'plot'}, detail.plot or 'No plot available.'),
          h('div', {'class': 'pills ratings'},
            *(_pill(f'{r.source}: {r.value}') for r in detail.ratings)),
          h('p', {'class': 'meta'}, f'Director: {detail.director or "Unknown"}'),
          h('p', {'class': 'meta'}, f'IMDb: {detail.id or "N/A"}')),
    )
