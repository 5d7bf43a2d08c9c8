"""Scoped execution of configuration blocks against a freshly built receiver.

A configuration block is any callable taking the receiver as its only
argument. While the block runs, the runner reports that receiver as its
:attr:`ScopedRunner.current` object; once the block finishes, normally or by
raising, the binding is removed again.

Receivers are tracked on a per-thread stack, so two threads running blocks for
the same definition do not see each other's receivers, and a block that builds
another instance of the same definition gets the outer receiver back when the
inner block completes.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

__all__ = ["ScopedRunner", "Block"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

Block = Callable[[Any], Any]
"""A configuration block: called with the receiver, its return value is ignored."""


class ScopedRunner:
    """Run configuration blocks with a temporarily designated receiver."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._local = threading.local()

    @property
    def _receivers(self) -> list:
        receivers = getattr(self._local, "receivers", None)
        if receivers is None:
            receivers = self._local.receivers = []
        return receivers

    @property
    def current(self) -> Optional[Any]:
        """The receiver of the innermost block running on this thread, or None when idle."""
        receivers = self._receivers
        return receivers[-1] if receivers else None

    @property
    def running(self) -> bool:
        return len(self._receivers) > 0

    @contextmanager
    def scoped(self, instance: T) -> Iterator[T]:
        """Designate ``instance`` as the current receiver for the duration of a with-block."""
        receivers = self._receivers
        receivers.append(instance)
        try:
            yield instance
        finally:
            receivers.pop()

    def run(self, instance: T, block: Block) -> T:
        """Call ``block`` with ``instance`` as its receiver and return ``instance``.

        The receiver binding is cleared even if the block raises; the exception
        then propagates to the caller.
        """
        logger.debug("Configuring %r for %s", instance, self.name or "anonymous definition")
        with self.scoped(instance):
            block(instance)
        return instance

    def __repr__(self):
        return f"ScopedRunner({self.name!r})"
