"""A small in-process document model for the page behaviors.

Covers what the behaviors touch: elements with classes, attributes, inline
styles and text; selector queries; event listeners with bubbling up to the
document; and a window with a virtual clock for timers, scroll position,
viewport width, alerts and intersection observers.
"""

from __future__ import annotations

import functools
import heapq
import itertools
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

Listener = Callable[["Event"], Any]


@dataclass
class Event:
    type: str
    key: Optional[str] = None
    bubbles: bool = True
    target: Optional["Element"] = None
    current_target: Any = None
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class EventTarget:
    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add_event_listener(self, type: str, listener: Listener) -> None:
        listeners = self._listeners.setdefault(type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        listeners = self._listeners.get(type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, type: str) -> int:
        return len(self._listeners.get(type, []))

    def _fire(self, event: Event) -> None:
        event.current_target = self
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)

    def dispatch_event(self, event: Event) -> bool:
        if event.target is None:
            event.target = self  # type: ignore[assignment]
        self._fire(event)
        return not event.default_prevented


class ClassList:
    def __init__(self, names: str = "") -> None:
        self._names: list[str] = []
        for name in names.split():
            self.add(name)

    def add(self, *names: str) -> None:
        for name in names:
            if name not in self._names:
                self._names.append(name)

    def remove(self, *names: str) -> None:
        for name in names:
            if name in self._names:
                self._names.remove(name)

    def toggle(self, name: str, force: Optional[bool] = None) -> bool:
        present = name in self._names if force is None else not force
        if present:
            self.remove(name)
            return False
        self.add(name)
        return True

    def contains(self, name: str) -> bool:
        return name in self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __str__(self) -> str:
        return " ".join(self._names)


_COMPOUND_TOKEN = re.compile(
    r"""
    (?P<tag>^\*|^[a-zA-Z][\w-]*)
    |\.(?P<cls>[\w-]+)
    |\#(?P<id>[\w-]+)
    |\[(?P<attr>[\w-]+)(?:(?P<op>\^?=)["']?(?P<val>[^"'\]]*)["']?)?\]
    """,
    re.VERBOSE,
)


@dataclass
class _Compound:
    tag: Optional[str] = None
    classes: list[str] = field(default_factory=list)
    id: Optional[str] = None
    attrs: list[tuple[str, Optional[str], Optional[str]]] = field(default_factory=list)

    def matches(self, el: "Element") -> bool:
        if self.tag and self.tag != "*" and el.tag_name != self.tag:
            return False
        if self.id and el.get_attribute("id") != self.id:
            return False
        if any(not el.class_list.contains(c) for c in self.classes):
            return False
        for name, op, val in self.attrs:
            actual = el.get_attribute(name)
            if actual is None:
                return False
            if op == "=" and actual != val:
                return False
            if op == "^=" and not actual.startswith(val or ""):
                return False
        return True


def _parse_compound(text: str) -> _Compound:
    compound = _Compound()
    pos = 0
    while pos < len(text):
        m = _COMPOUND_TOKEN.match(text, pos)
        if m is None or m.end() == pos:
            raise ValueError(f"Unsupported selector: {text!r}")
        if m.group("tag"):
            compound.tag = m.group("tag").lower()
        elif m.group("cls"):
            compound.classes.append(m.group("cls"))
        elif m.group("id"):
            compound.id = m.group("id")
        else:
            compound.attrs.append((m.group("attr"), m.group("op"), m.group("val")))
        pos = m.end()
    return compound


def _parse_selector(selector: str) -> list[list[_Compound]]:
    return [[_parse_compound(part) for part in group.split()] for group in selector.split(",") if group.strip()]


def _matches_chain(el: "Element", chain: list[_Compound]) -> bool:
    if not chain[-1].matches(el):
        return False
    ancestor = el.parent
    for compound in reversed(chain[:-1]):
        while ancestor is not None and not compound.matches(ancestor):
            ancestor = ancestor.parent
        if ancestor is None:
            return False
        ancestor = ancestor.parent
    return True


class Element(EventTarget):
    def __init__(self, tag: str, *, text: str = "", **attrs: str) -> None:
        super().__init__()
        self.tag_name = tag.lower()
        self.attributes: dict[str, str] = {}
        self.class_list = ClassList()
        self.style: dict[str, str] = {}
        self.children: list[Element] = []
        self.parent: Optional[Element] = None
        self.text_content = text
        self.inner_html = ""
        self.disabled = False
        self.offset_top = 0
        self.offset_height = 0
        self._owner: Optional[Document] = None
        for name, value in attrs.items():
            self.set_attribute(name.rstrip("_").replace("_", "-"), value)
        self.default_value = self.attributes.get("value", "")
        self.value = self.default_value

    def __repr__(self) -> str:
        classes = "".join(f".{c}" for c in self.class_list)
        return f"<{self.tag_name}{classes}>"

    # attributes

    def get_attribute(self, name: str) -> Optional[str]:
        if name == "class":
            return str(self.class_list) if len(list(self.class_list)) else None
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        if name == "class":
            self.class_list = ClassList(value)
        else:
            self.attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    @property
    def class_name(self) -> str:
        return str(self.class_list)

    @class_name.setter
    def class_name(self, value: str) -> None:
        self.class_list = ClassList(value)

    @property
    def dataset(self) -> dict[str, str]:
        return {k[5:]: v for k, v in self.attributes.items() if k.startswith("data-")}

    @property
    def type(self) -> str:
        if self.tag_name == "textarea":
            return "textarea"
        if self.tag_name == "button":
            return self.attributes.get("type", "submit")
        if self.tag_name == "input":
            return self.attributes.get("type", "text")
        return ""

    # tree

    def append_child(self, child: "Element") -> "Element":
        if child.parent is not None:
            child.remove()
        child.parent = self
        self.children.append(child)
        return child

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def contains(self, other: Optional["Element"]) -> bool:
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def iter_descendants(self) -> Iterator["Element"]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def query_selector_all(self, selector: str) -> list["Element"]:
        chains = _parse_selector(selector)
        return [el for el in self.iter_descendants() if any(_matches_chain(el, c) for c in chains)]

    def query_selector(self, selector: str) -> Optional["Element"]:
        found = self.query_selector_all(selector)
        return found[0] if found else None

    @property
    def owner_document(self) -> Optional["Document"]:
        node = self
        while node.parent is not None:
            node = node.parent
        return node._owner

    # forms

    @property
    def elements(self) -> list["Element"]:
        return self.query_selector_all("input, textarea, select, button")

    def reset(self) -> None:
        for control in self.elements:
            control.value = control.default_value

    def form_data(self) -> dict[str, str]:
        return {
            el.get_attribute("name"): el.value
            for el in self.elements
            if el.get_attribute("name") and el.type != "submit"
        }

    # events

    def dispatch_event(self, event: Event) -> bool:
        if event.target is None:
            event.target = self
        node: Optional[Element] = self
        while node is not None and not event.propagation_stopped:
            node._fire(event)
            if not event.bubbles:
                return not event.default_prevented
            node = node.parent
        document = self.owner_document
        if document is not None and not event.propagation_stopped:
            document._fire(event)
        return not event.default_prevented

    def click(self) -> bool:
        return self.dispatch_event(Event("click"))


class Document(EventTarget):
    def __init__(self) -> None:
        super().__init__()
        self.document_element = Element("html")
        self.document_element._owner = self
        self.head = self.document_element.append_child(Element("head"))
        self.body = self.document_element.append_child(Element("body"))

    def create_element(self, tag: str, **attrs: str) -> Element:
        return Element(tag, **attrs)

    def query_selector_all(self, selector: str) -> list[Element]:
        return self.document_element.query_selector_all(selector)

    def query_selector(self, selector: str) -> Optional[Element]:
        return self.document_element.query_selector(selector)


@dataclass
class IntersectionObserverEntry:
    target: Element
    is_intersecting: bool


class IntersectionObserver:
    def __init__(
        self,
        callback: Callable[[list[IntersectionObserverEntry], "IntersectionObserver"], Any],
        *,
        threshold: float = 0.0,
        root_margin: str = "0px",
    ) -> None:
        self.callback = callback
        self.threshold = threshold
        self.root_margin = root_margin
        self.observed: list[Element] = []

    def observe(self, el: Element) -> None:
        if el not in self.observed:
            self.observed.append(el)

    def unobserve(self, el: Element) -> None:
        if el in self.observed:
            self.observed.remove(el)

    def disconnect(self) -> None:
        self.observed.clear()


@dataclass(order=True)
class _Timer:
    due: float
    seq: int
    id: int = field(compare=False)
    callback: Callable[[], Any] = field(compare=False)
    interval: Optional[float] = field(compare=False, default=None)


class Window(EventTarget):
    def __init__(
        self,
        document: Optional[Document] = None,
        *,
        hostname: str = "localhost",
        inner_width: int = 1280,
    ) -> None:
        super().__init__()
        self.document = document or Document()
        self.hostname = hostname
        self.inner_width = inner_width
        self.page_y_offset = 0
        self.alerts: list[str] = []
        self.scroll_calls: list[tuple[int, str]] = []
        self.observers: list[IntersectionObserver] = []
        self.now = 0.0
        self._timers: dict[int, _Timer] = {}
        self._queue: list[_Timer] = []
        self._ids = itertools.count(1)
        self._seq = itertools.count()
        self.attached: dict[str, Any] = {}

    # dialogs and viewport

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def scroll_to(self, top: int, behavior: str = "auto") -> None:
        self.scroll_calls.append((top, behavior))
        self.page_y_offset = max(0, top)
        self.dispatch_event(Event("scroll", bubbles=False))

    def resize(self, inner_width: int) -> None:
        self.inner_width = inner_width
        self.dispatch_event(Event("resize", bubbles=False))

    # timers

    def _schedule(self, callback: Callable[[], Any], delay: float, interval: Optional[float]) -> int:
        timer_id = next(self._ids)
        timer = _Timer(self.now + delay, next(self._seq), timer_id, callback, interval)
        self._timers[timer_id] = timer
        heapq.heappush(self._queue, timer)
        return timer_id

    def set_timeout(self, callback: Callable[[], Any], delay: float = 0) -> int:
        return self._schedule(callback, delay, None)

    def set_interval(self, callback: Callable[[], Any], interval: float) -> int:
        return self._schedule(callback, interval, interval)

    def clear_timeout(self, timer_id: int) -> None:
        self._timers.pop(timer_id, None)

    clear_interval = clear_timeout

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def advance(self, ms: float) -> None:
        """Move the virtual clock forward, running every timer that falls due."""
        target = self.now + ms
        while self._queue and self._queue[0].due <= target:
            timer = heapq.heappop(self._queue)
            if self._timers.get(timer.id) is not timer:
                continue
            self.now = timer.due
            if timer.interval is None:
                del self._timers[timer.id]
            else:
                nxt = _Timer(timer.due + timer.interval, next(self._seq), timer.id, timer.callback, timer.interval)
                self._timers[timer.id] = nxt
                heapq.heappush(self._queue, nxt)
            timer.callback()
        self.now = target

    # visibility

    def intersection_observer(self, callback, **options: Any) -> IntersectionObserver:
        observer = IntersectionObserver(callback, **options)
        self.observers.append(observer)
        return observer

    def reveal(self, el: Element) -> None:
        """Report ``el`` as scrolled into view to every observer watching it."""
        for observer in list(self.observers):
            if el in observer.observed:
                observer.callback([IntersectionObserverEntry(el, True)], observer)


def attach_once(init: Callable[..., Any]) -> Callable[..., Any]:
    """Make a behavior's ``init`` a no-op after its first call on a window.

    Later calls return whatever the first call returned.
    """
    key = f"{init.__module__}.{init.__qualname__}"

    @functools.wraps(init)
    def wrapper(window: Window, *args: Any, **kwargs: Any) -> Any:
        if key not in window.attached:
            window.attached[key] = init(window, *args, **kwargs)
        return window.attached[key]

    return wrapper
