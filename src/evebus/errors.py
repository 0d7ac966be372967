from __future__ import annotations

from typing import Any, List, Sequence


class EveBusError(Exception):
    """Base error for evebus exceptions."""


class EmitError(EveBusError):
    """Raised after an emission in which one or more handlers failed.

    Only raised by buses configured with ``raise_errors=True``; every handler
    of the emission has already run when this is raised.
    """

    def __init__(self, key: Any, errors: Sequence[Exception]) -> None:
        self.key = key
        self.errors: List[Exception] = list(errors)
        super().__init__(f"{len(self.errors)} handler(s) failed while emitting {key!r}")
