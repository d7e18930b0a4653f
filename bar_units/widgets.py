"""
BAR Units Catalog - Widget Handles
===================================
The page collaborators the search engine talks to: the table widget, the
multi-select combobox, the free-text input and the browser location.

Bridges receive these handles explicitly. The in-memory implementations
here back the CLI and the tests; a browser binding only has to provide the
same methods.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


# ---------------------------------------------------------------------------
# DOM element (attribute bag used for idempotency markers)
# ---------------------------------------------------------------------------

@dataclass
class Element:
    id: str = ""
    attrs: Dict[str, str] = field(default_factory=dict)
    text: str = ""

    def has_attr(self, name: str) -> bool:
        return name in self.attrs

    def get_attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(name, default)

    def set_attr(self, name: str, value: str = "true"):
        self.attrs[name] = value


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

Order = List[Tuple[int, str]]
RowPredicate = Callable[[Dict[str, str]], bool]


class TableWidget(Protocol):
    element: Element

    def header_sort_keys(self) -> List[Optional[str]]: ...
    def add_search(self, predicate: RowPredicate) -> None: ...
    def draw(self) -> None: ...
    def get_order(self) -> Order: ...
    def set_order(self, column: int, direction: str) -> None: ...
    def on_order(self, callback: Callable[[], None]) -> None: ...


class MultiSelectWidget(Protocol):
    element: Element
    options: List[dict]

    def get_selected(self) -> List[str]: ...
    def set_selected(self, values: Sequence[str]) -> None: ...
    def on_change(self, callback: Callable[[], None]) -> None: ...
    def open(self) -> None: ...
    def close(self) -> None: ...


class TextInput(Protocol):
    element: Element
    value: str

    def on_input(self, callback: Callable[[], None]) -> None: ...
    def on_keydown(self, callback: Callable[[str], None]) -> None: ...
    def on_focus(self, callback: Callable[[], None]) -> None: ...


class Location(Protocol):
    href: str

    def replace_state(self, url: str) -> None: ...


# ---------------------------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------------------------

class MultiSelect:
    """Multi-select combobox. Selection order is kept (last = most recent)."""

    def __init__(self, options: Sequence[dict], element: Optional[Element] = None):
        self.options = list(options)
        self.element = element or Element(id="unit-search")
        self.is_open = False
        self._selected: List[str] = []
        self._listeners: List[Callable[[], None]] = []

    def get_selected(self) -> List[str]:
        return list(self._selected)

    def set_selected(self, values: Sequence[str]):
        known = {o["value"] for o in self.options}
        self._selected = [v for v in dict.fromkeys(values) if v in known]

    def on_change(self, callback: Callable[[], None]):
        self._listeners.append(callback)

    def open(self):
        self.is_open = True

    def close(self):
        self.is_open = False

    def option(self, value: str) -> Optional[dict]:
        for opt in self.options:
            if opt["value"] == value:
                return opt
        return None

    # User interaction: toggles an option and notifies listeners
    def click_option(self, value: str):
        if value in self._selected:
            self._selected.remove(value)
        elif self.option(value) is not None:
            self._selected.append(value)
        for cb in list(self._listeners):
            cb()


class TextBox:
    def __init__(self, element: Optional[Element] = None):
        self.element = element or Element(id="unit-search-text")
        self.value = ""
        self._input: List[Callable[[], None]] = []
        self._keydown: List[Callable[[str], None]] = []
        self._focus: List[Callable[[], None]] = []

    def on_input(self, callback):
        self._input.append(callback)

    def on_keydown(self, callback):
        self._keydown.append(callback)

    def on_focus(self, callback):
        self._focus.append(callback)

    def type(self, text: str):
        self.value = text
        for cb in list(self._input):
            cb()

    def press(self, key: str):
        for cb in list(self._keydown):
            cb(key)

    def focus(self):
        for cb in list(self._focus):
            cb()


class BrowserLocation:
    """window.location + window.history, enough for replaceState."""

    def __init__(self, href: str = "http://localhost/"):
        self.history: List[str] = [href]

    @property
    def href(self) -> str:
        return self.history[-1]

    def replace_state(self, url: str):
        self.history[-1] = url

    def push_state(self, url: str):
        self.history.append(url)


def get_query_param(href: str, name: str) -> Optional[str]:
    for key, value in parse_qsl(urlsplit(href).query, keep_blank_values=True):
        if key == name:
            return value
    return None


def set_query_param(href: str, name: str, value: Optional[str]) -> str:
    """Return href with `name` set to value, or removed when value is None."""
    parts = urlsplit(href)
    params = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != name]
    if value is not None:
        params.append((name, value))
    return urlunsplit(parts._replace(query=urlencode(params)))
