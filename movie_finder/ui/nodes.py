import inspect
from html import escape
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Union

TEXT = '#text'
VOID_TAGS = frozenset({'img', 'input', 'br', 'hr', 'meta', 'link'})

Listener = Callable[['Event'], Optional[Awaitable[None]]]
Child = Union['Element', str]


class Event:
    """A UI event travelling from its target up through the parents."""

    def __init__(self, type: str, *, key: Optional[str] = None, target: Optional['Element'] = None):
        self.type = type
        self.key = key
        self.target = target
        self.current_target: Optional['Element'] = None
        self.default_prevented = False
        self.propagation_stopped = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class Element:
    """
    Node of the UI tree.

    Attributes are kept as strings; text is held by child nodes tagged
    '#text', so titles and plots are escaped when the tree is serialized
    and never parsed as markup.
    """

    def __init__(
        self,
        tag: str,
        attrs: Optional[Dict[str, Any]] = None,
        children: Optional[List[Child]] = None,
        text: Optional[str] = None,
    ):
        self.tag = tag
        self.attrs: Dict[str, str] = {}
        self.children: List['Element'] = []
        self.parent: Optional['Element'] = None
        self.text = text
        self._listeners: Dict[str, List[Listener]] = {}
        for name, value in (attrs or {}).items():
            if value is not None:
                self.set_attribute(name, value)
        for child in children or []:
            self.append(child)

    # -- tree -------------------------------------------------------------

    def append(self, child: Child) -> 'Element':
        if isinstance(child, str):
            child = text_node(child)
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: 'Element') -> None:
        self.children.remove(child)
        child.parent = None

    def clear(self) -> None:
        for child in self.children:
            child.parent = None
        self.children = []

    def replace_children(self, *children: Child) -> None:
        self.clear()
        for child in children:
            self.append(child)

    def iter(self) -> Iterator['Element']:
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, tag: Optional[str] = None, class_name: Optional[str] = None) -> List['Element']:
        return [
            el for el in self.iter()
            if el.tag != TEXT
            and (tag is None or el.tag == tag)
            and (class_name is None or class_name in el.class_list)
        ]

    def find(self, tag: Optional[str] = None, class_name: Optional[str] = None) -> Optional['Element']:
        found = self.find_all(tag, class_name)
        return found[0] if found else None

    def get_element_by_id(self, element_id: str) -> Optional['Element']:
        for el in self.iter():
            if el.attrs.get('id') == element_id:
                return el
        return None

    @property
    def text_content(self) -> str:
        if self.tag == TEXT:
            return self.text or ''
        return ''.join(child.text_content for child in self.children)

    # -- attributes -------------------------------------------------------

    def set_attribute(self, name: str, value: Any) -> None:
        self.attrs[name] = str(value)

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attrs.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self.attrs

    def remove_attribute(self, name: str) -> None:
        self.attrs.pop(name, None)

    @property
    def class_list(self) -> List[str]:
        return self.attrs.get('class', '').split()

    @property
    def value(self) -> str:
        return self.attrs.get('value', '')

    @value.setter
    def value(self, new: str) -> None:
        self.set_attribute('value', new)

    # -- events -----------------------------------------------------------

    def add_event_listener(self, type: str, listener: Listener) -> None:
        """Register a listener; registering the same one twice is a no-op."""
        listeners = self._listeners.setdefault(type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        listeners = self._listeners.get(type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, type: str) -> int:
        return len(self._listeners.get(type, []))

    async def dispatch(self, event: Event) -> Event:
        """
        Deliver an event to this node and then to each ancestor.
        Coroutine listeners are awaited before the next listener runs.
        """
        if event.target is None:
            event.target = self
        node: Optional[Element] = self
        while node is not None and not event.propagation_stopped:
            event.current_target = node
            for listener in list(node._listeners.get(event.type, [])):
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            node = node.parent
        return event

    # -- serialization ----------------------------------------------------

    def to_html(self) -> str:
        if self.tag == TEXT:
            return escape(self.text or '', quote=False)
        attrs = ''.join(
            f' {name}' if value == '' else f' {name}="{escape(value)}"'
            for name, value in self.attrs.items()
        )
        if self.tag in VOID_TAGS:
            return f'<{self.tag}{attrs}>'
        inner = ''.join(child.to_html() for child in self.children)
        return f'<{self.tag}{attrs}>{inner}</{self.tag}>'

    def __repr__(self) -> str:
        if self.tag == TEXT:
            return f'Text({self.text!r})'
        return f'Element({self.tag!r}, {self.attrs!r}, children={len(self.children)})'


def text_node(text: Any) -> Element:
    return Element(TEXT, text='' if text is None else str(text))


def h(tag: str, attrs: Optional[Dict[str, Any]] = None, *children: Child) -> Element:
    """Build an element: h('p', {'class': 'meta'}, 'Director: ', name)."""
    return Element(tag, attrs, list(children))
