"""Cooperative cancellation token shared by the caller and a stream."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancelToken:
    """One-way cancellation flag with listeners.

    The caller keeps the token and calls :meth:`cancel`; the process
    supervisor listens for it (to terminate the CLI) and finalisation
    checks :attr:`is_cancelled` to pick the aborted outcome.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._listeners: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Fire the token. Listeners run once; later calls are no-ops."""
        if self._cancelled:
            return
        self._cancelled = True
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener()

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register *listener*; it runs immediately if already cancelled."""
        if self._cancelled:
            listener()
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        """Deregister *listener*. Unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            logger.debug("cancel listener %r was not registered", listener)
