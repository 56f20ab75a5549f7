"""
Transport interfaces for deep-link messaging.

The transport opens request URLs in the wallet and delivers inbound callback
URLs to listeners. Implementations wrap whatever the host platform provides.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

UrlListener = Callable[[str], None]


class Subscription(ABC):
    """Handle returned by Linking.add_listener."""

    @abstractmethod
    def remove(self) -> None:
        """Stop delivering URLs to the listener."""
        pass


class Linking(ABC):
    """Abstract base class for a deep-link transport."""

    @abstractmethod
    async def open_url(self, url: str) -> None:
        """Open a request URL in the wallet."""
        pass

    @abstractmethod
    def add_listener(self, listener: UrlListener) -> Subscription:
        """Register a listener for every inbound URL."""
        pass


class _InMemorySubscription(Subscription):
    def __init__(self, linking: "InMemoryLinking", listener: UrlListener) -> None:
        self._linking = linking
        self._listener = listener

    def remove(self) -> None:
        self._linking._remove(self._listener)


class InMemoryLinking(Linking):
    """
    In-memory implementation of Linking.

    Opened URLs are recorded in ``opened`` and, if a responder is set, handed
    to it. ``deliver`` pushes an inbound URL to every current listener.
    """

    def __init__(self) -> None:
        self._listeners: list[UrlListener] = []
        self.opened: list[str] = []
        self.responder: Optional[UrlListener] = None

    async def open_url(self, url: str) -> None:
        self.opened.append(url)
        if self.responder is not None:
            self.responder(url)

    def add_listener(self, listener: UrlListener) -> Subscription:
        self._listeners.append(listener)
        return _InMemorySubscription(self, listener)

    def deliver(self, url: str) -> None:
        """Deliver an inbound URL to all listeners."""
        logger.debug("Delivering inbound URL to %d listener(s)", len(self._listeners))
        for listener in list(self._listeners):
            listener(url)

    @property
    def listener_count(self) -> int:
        """Number of active listeners."""
        return len(self._listeners)

    def _remove(self, listener: UrlListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass
