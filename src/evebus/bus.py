from __future__ import annotations

import logging
from collections.abc import Hashable
from threading import RLock
from typing import Any, Callable, List, Optional, Tuple, TypeVar, overload

from .config import EveBusConfig
from .errors import EmitError
from .types import (
    WILDCARD,
    EventHandler,
    EventKey,
    HandlerSet,
    HandlerTable,
    Unsubscribe,
    WildcardEventHandler,
    WildcardKey,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING: Any = object()


def _handler_name(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__name__", repr(handler))


class EventBus:
    """Lightweight, threadsafe publish/subscribe event bus.

    Handlers are registered per event key and called synchronously, in
    registration order, by :meth:`emit`. Handlers registered under
    :data:`~evebus.types.WILDCARD` receive ``(key, payload)`` for every
    emission, after the handlers of the emitted key.

    The handler table is available as :attr:`all`. A table passed as
    ``initial_events`` is adopted as-is, so the caller keeps seeing (and may
    keep mutating) the live registrations.
    """

    def __init__(
        self,
        config: Optional[EveBusConfig] = None,
        *,
        initial_events: Optional[HandlerTable] = _MISSING,
        on_error: Optional[Callable[[Exception], Any]] = _MISSING,
        raise_errors: bool = _MISSING,
    ) -> None:
        overrides = {
            name: value
            for name, value in (
                ("initial_events", initial_events),
                ("on_error", on_error),
                ("raise_errors", raise_errors),
            )
            if value is not _MISSING
        }
        if config is None:
            config = EveBusConfig(**overrides)
        elif overrides:
            current = {name: getattr(config, name) for name in EveBusConfig.model_fields}
            config = EveBusConfig(**{**current, **overrides})
        self._config = config
        self._table: HandlerTable = config.initial_events if config.initial_events is not None else {}
        self._lock = RLock()

    @property
    def all(self) -> HandlerTable:
        """The live handler table (key -> handler set)."""
        return self._table

    @property
    def config(self) -> EveBusConfig:
        return self._config

    @overload
    def on(self, key: WildcardKey, handler: WildcardEventHandler) -> Unsubscribe: ...

    @overload
    def on(self, key: EventKey[T], handler: Callable[[T], Any]) -> Unsubscribe: ...

    @overload
    def on(self, key: Hashable, handler: EventHandler) -> Unsubscribe: ...

    def on(self, key: Any, handler: Callable[..., Any]) -> Unsubscribe:
        """Register ``handler`` for ``key`` (or for every event with WILDCARD).

        Registering the same handler twice for one key is a no-op.

        Returns:
            A function that unregisters exactly this ``(key, handler)`` pair.
        """
        with self._lock:
            handlers = self._table.get(key)
            if handlers is None:
                self._table[key] = HandlerSet([handler])
            else:
                handlers.add(handler)
            logger.debug("Subscribed handler %s to event %r", _handler_name(handler), key)

        def unsubscribe() -> None:
            self.off(key, handler)

        return unsubscribe

    def off(self, key: Any = _MISSING, handler: Optional[Callable[..., Any]] = None) -> None:
        """Unregister handlers.

        ``off()`` removes every key, ``off(key)`` clears the handlers of one
        key and ``off(key, handler)`` removes a single registration, dropping the
        key once its last handler is gone. Removing something that is not
        registered is silently ignored.
        """
        with self._lock:
            if key is _MISSING:
                self._table.clear()
                logger.debug("Cleared all event handlers")
                return
            handlers = self._table.get(key)
            if handlers is None:
                return
            if handler is None:
                handlers.clear()
                logger.debug("Cleared handlers for event %r", key)
            elif handler in handlers:
                handlers.discard(handler)
                logger.debug("Unsubscribed handler %s from event %r", _handler_name(handler), key)
                if not handlers:
                    del self._table[key]

    @overload
    def emit(self, key: EventKey[T], payload: T) -> None: ...

    @overload
    def emit(self, key: Hashable, payload: Any = None) -> None: ...

    def emit(self, key: Any, payload: Any = None) -> None:
        """Emit ``payload`` to the handlers of ``key``, then to wildcard handlers.

        The handlers to call are captured before the first one runs, so
        handlers registered or removed during the emission only affect later
        emissions. An exception raised by a handler is passed to ``on_error``
        (or discarded) and the remaining handlers still run.

        Raises:
            EmitError: only when the bus was built with ``raise_errors=True``
                and at least one handler failed; raised after all handlers ran.
            ValueError: if ``key`` is WILDCARD, which only observes emissions.
        """
        if key is WILDCARD:
            raise ValueError("emit() is not supported for the wildcard key")
        with self._lock:
            handlers: Tuple[Callable[..., Any], ...] = tuple(self._table.get(key, ()))
            wildcard_handlers: Tuple[Callable[..., Any], ...] = tuple(self._table.get(WILDCARD, ()))
        logger.debug(
            "Emitting event %r to %d handlers (+%d wildcard) with payload: %r",
            key,
            len(handlers),
            len(wildcard_handlers),
            payload,
        )
        errors: List[Exception] = []
        for handler in handlers:
            self._invoke(key, handler, (payload,), errors)
        for handler in wildcard_handlers:
            self._invoke(key, handler, (key, payload), errors)
        if errors and self._config.raise_errors:
            raise EmitError(key, errors)

    @overload
    def once(self, key: EventKey[T], handler: Callable[[T], Any]) -> Unsubscribe: ...

    @overload
    def once(self, key: Hashable, handler: EventHandler) -> Unsubscribe: ...

    def once(self, key: Any, handler: Callable[[Any], Any]) -> Unsubscribe:
        """Register ``handler`` for the next emission of ``key`` only.

        The returned function cancels the subscription if it has not fired yet.
        """
        if key is WILDCARD:
            raise ValueError("once() is not supported for the wildcard key")
        fired = False

        def handle_once(payload: Any) -> None:
            nonlocal fired
            with self._lock:
                if fired:
                    return
                fired = True
                self.off(key, handle_once)
            handler(payload)

        return self.on(key, handle_once)

    def listeners(self, key: Any) -> Tuple[Callable[..., Any], ...]:
        """Return the handlers currently registered for ``key``, in order."""
        with self._lock:
            return tuple(self._table.get(key, ()))

    def _invoke(
        self,
        key: Any,
        handler: Callable[..., Any],
        args: Tuple[Any, ...],
        errors: List[Exception],
    ) -> None:
        try:
            handler(*args)
        except Exception as exc:  # noqa: BLE001 - any handler failure is isolated
            errors.append(exc)
            on_error = self._config.on_error
            if on_error is None:
                logger.debug(
                    "Discarding error from handler %s for event %r: %s",
                    _handler_name(handler),
                    key,
                    exc,
                    exc_info=True,
                )
                return
            on_error(exc)


def evebus(config: Optional[EveBusConfig] = None, **options: Any) -> EventBus:
    """Create an EventBus.

    Example::

        bus = evebus(on_error=lambda exc: log.error("handler failed: %s", exc))
        bus.on("greeting", print)
        bus.emit("greeting", "Hello, World!")
    """
    return EventBus(config, **options)


# Global default bus (optional use)
GLOBAL_EVENT_BUS: Optional[EventBus] = None


def get_global_bus() -> EventBus:
    """Return a process-global EventBus, creating one if necessary."""
    global GLOBAL_EVENT_BUS
    if GLOBAL_EVENT_BUS is None:
        GLOBAL_EVENT_BUS = EventBus()
    return GLOBAL_EVENT_BUS


def reset_global_bus() -> None:
    """Drop the process-global EventBus (useful in tests)."""
    global GLOBAL_EVENT_BUS
    GLOBAL_EVENT_BUS = None
