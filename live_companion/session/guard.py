"""Reentrancy guard for reconnect sequences."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass
class ReconnectGuard:
    """Non-blocking mutual-exclusion flag scoped to one controller.

    ``attempt()`` yields True when the guard was acquired and False when it
    was already held. An acquired guard is released on every exit path,
    including early returns, exceptions and task cancellation.
    """

    _held: bool = False

    @property
    def held(self) -> bool:
        return self._held

    @contextmanager
    def attempt(self) -> Iterator[bool]:
        if self._held:
            yield False
            return
        self._held = True
        try:
            yield True
        finally:
            self._held = False
