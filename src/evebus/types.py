from __future__ import annotations

from collections.abc import Hashable, MutableMapping, MutableSet
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")

EventHandler = Callable[[Any], Any]
WildcardEventHandler = Callable[[Any, Any], Any]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True, eq=False)
class EventKey(Generic[T]):
    """Opaque event key compared by identity.

    Two keys created with the same name are still distinct events. The type
    parameter declares the payload type so handlers can be checked statically::

        SCORE: EventKey[int] = EventKey("score")
        bus.on(SCORE, lambda points: print(points + 1))
    """

    name: str

    def __repr__(self) -> str:
        return f"EventKey({self.name!r})"


class WildcardKey:
    """Type of the reserved key whose handlers observe every emission."""

    _instance: Optional["WildcardKey"] = None

    def __new__(cls) -> "WildcardKey":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "'*'"

    def __reduce__(self) -> str:
        return "WILDCARD"


WILDCARD = WildcardKey()


class HandlerSet(MutableSet):
    """Insertion-ordered set of handlers registered under one key.

    Adding a handler that is already present keeps its original position.
    """

    def __init__(self, handlers: Iterable[Callable[..., Any]] = ()) -> None:
        self._items: Dict[Callable[..., Any], None] = dict.fromkeys(handlers)

    def __contains__(self, handler: object) -> bool:
        return handler in self._items

    def __iter__(self) -> Iterator[Callable[..., Any]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add(self, handler: Callable[..., Any]) -> None:
        self._items.setdefault(handler, None)

    def discard(self, handler: Callable[..., Any]) -> None:
        self._items.pop(handler, None)

    def clear(self) -> None:
        self._items.clear()

    def __repr__(self) -> str:
        return f"HandlerSet({list(self._items)!r})"


HandlerTable = MutableMapping[Hashable, HandlerSet]
