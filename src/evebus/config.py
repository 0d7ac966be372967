from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

RAISE_ERRORS_ENV = "EVEBUS_RAISE_ERRORS"
_TRUTHY = {"1", "true", "yes", "on"}


class EveBusConfig(BaseModel):
    """Construction options for an EventBus."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Typed as Any so pydantic hands back the caller's mapping instead of a copy.
    initial_events: Optional[Any] = Field(
        default=None, description="Handler table adopted by reference"
    )
    on_error: Optional[Callable[[Exception], Any]] = Field(
        default=None, description="Called with each exception raised by a handler"
    )
    raise_errors: bool = Field(
        default=False, description="Raise EmitError after an emission in which handlers failed"
    )

    @field_validator("initial_events")
    @classmethod
    def ensure_mutable_mapping(cls, v: Any) -> Any:
        if v is not None and not isinstance(v, MutableMapping):
            raise ValueError("initial_events must be a mutable mapping of key -> handler set")
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> "EveBusConfig":
        """Build a config from EVEBUS_* environment variables plus overrides."""
        data: dict = {}
        raw = os.getenv(RAISE_ERRORS_ENV)
        if raw is not None:
            data["raise_errors"] = raw.strip().lower() in _TRUTHY
            logger.debug("%s=%r -> raise_errors=%s", RAISE_ERRORS_ENV, raw, data["raise_errors"])
        data.update(overrides)
        return cls(**data)
