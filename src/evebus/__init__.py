"""evebus: a small, typed, in-process publish/subscribe event bus."""

from .bus import EventBus, evebus, get_global_bus, reset_global_bus
from .config import EveBusConfig
from .errors import EmitError, EveBusError
from .logging_config import configure_logging
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

__all__ = [
    "EmitError",
    "EveBusConfig",
    "EveBusError",
    "EventBus",
    "EventHandler",
    "EventKey",
    "HandlerSet",
    "HandlerTable",
    "Unsubscribe",
    "WILDCARD",
    "WildcardEventHandler",
    "WildcardKey",
    "configure_logging",
    "evebus",
    "get_global_bus",
    "reset_global_bus",
]

__version__ = "0.1.0"
