from dataclasses import dataclass
from typing import TYPE_CHECKING

from .nodes import Element, h

if TYPE_CHECKING:
    from ..clients.omdb_client import OmdbClient
    from .form import FormController
    from .modal import ModalController


@dataclass
class PageContext:
    """Handles to the parts of the page the controllers work on."""
    document: Element
    form: Element
    query_input: Element
    results: Element
    overlay: Element


@dataclass
class MountedPage:
    ctx: PageContext
    form: 'FormController'
    modal: 'ModalController'


def build_page(title: str = 'Movie Finder') -> PageContext:
    """
    Build the static page: a search form, a results region and a single
    hidden overlay root.
    """
    query_input = h('input', {
        'id': 'query', 'type': 'search', 'name': 'title',
        'placeholder': 'Search movies by title', 'autocomplete': 'off',
    })
    form = h(
        'form', {'id': 'searchForm', 'action': '/search', 'method': 'get'},
        query_input,
        h('button', {'class': 'btn', 'type': 'submit'}, 'Search'),
    )
    results = h('section', {'id': 'results', 'class': 'grid'})
    overlay = h('div', {'id': 'overlay', 'class': 'overlay', 'hidden': '', 'aria-hidden': 'true'})
    document = h(
        'html', {'lang': 'en'},
        h('head', None,
          h('meta', {'charset': 'utf-8'}),
          h('title', None, title)),
        h('body', None,
          h('header', None, h('h1', None, title), form),
          h('main', None, results),
          overlay),
    )
    return PageContext(
        document=document,
        form=form,
        query_input=query_input,
        results=results,
        overlay=overlay,
    )


def mount(ctx: PageContext, client: 'OmdbClient') -> MountedPage:
    """Wire the modal and form controllers onto a built page."""
    from .form import FormController
    from .modal import ModalController

    modal = ModalController(ctx, client)
    form = FormController(ctx, client, modal)
    form.attach()
    return MountedPage(ctx=ctx, form=form, modal=modal)


def to_document_html(ctx: PageContext) -> str:
    return '<!DOCTYPE html>' + ctx.document.to_html()
