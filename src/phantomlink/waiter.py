"""
Correlation of outbound requests with inbound callbacks.

Every inbound URL arrives on one shared stream. A PendingRequest listens on
that stream for the first URL addressed to its route id and settles with it.
"""

import asyncio
import logging
import uuid
from typing import Any, Callable, Generator, Generic, TypeVar

from .codec import Callback, parse_callback
from .config import WalletConfig
from .linking import Linking, Subscription
from .types import MalformedEncodingError, PARAM_ERROR_CODE, PARAM_ERROR_MESSAGE, RemoteError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ResponseHandler = Callable[[Callback], T]


def new_route_id(route: str) -> str:
    """Create a route id unique to one request, e.g. ``onConnect/3f2a...``."""
    return f"{route}/{uuid.uuid4().hex}"


class PendingRequest(Generic[T]):
    """
    A request awaiting its callback.

    Await the object to get the handler's result. The inbound subscription is
    removed exactly once, whichever way the request settles.
    """

    def __init__(
        self,
        route_id: str,
        future: "asyncio.Future[T]",
        subscription: Subscription,
    ) -> None:
        self.route_id = route_id
        self._future = future
        self._subscription = subscription
        self._released = False
        future.add_done_callback(lambda _: self._release())

    @property
    def done(self) -> bool:
        """Whether the request has settled."""
        return self._future.done()

    @property
    def released(self) -> bool:
        """Whether the inbound subscription has been removed."""
        return self._released

    async def result(self) -> T:
        """Wait for the callback and return the handler's result."""
        try:
            return await self._future
        finally:
            self._release()

    def cancel(self) -> None:
        """Abandon the request and stop listening."""
        self._future.cancel()
        self._release()

    def __await__(self) -> Generator[Any, None, T]:
        return self.result().__await__()

    def _release(self) -> None:
        if self._released:
            return
        self._released = True
        self._subscription.remove()
        logger.debug("Stopped listening on %s", self.route_id)


class ResponseWaiter:
    """Creates PendingRequests bound to a transport's inbound stream."""

    def __init__(self, linking: Linking, config: WalletConfig) -> None:
        self.linking = linking
        self.config = config

    def wait_for(self, route_id: str, handler: ResponseHandler[T]) -> PendingRequest[T]:
        """
        Start listening for the callback addressed to route_id.

        The subscription is in place when this returns, so the request may be
        dispatched right after. No timeout is applied; wrap the await in
        ``asyncio.wait_for`` to bound it.

        Args:
            route_id: Route the callback will arrive on
            handler: Turns the matching callback into a result; whatever it
                raises becomes the request's error

        Returns:
            PendingRequest to await
        """
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()

        def on_url(url: str) -> None:
            if future.done():
                return

            try:
                callback = parse_callback(url, self.config.scheme, self.config.app_url)
            except MalformedEncodingError:
                logger.warning("Ignoring unparseable inbound URL")
                return

            if not callback.matches(route_id):
                return

            if PARAM_ERROR_CODE in callback.params:
                code = callback.params[PARAM_ERROR_CODE]
                logger.warning("Wallet returned error %s on %s", code, route_id)
                future.set_exception(RemoteError(code, callback.params.get(PARAM_ERROR_MESSAGE)))
                return

            try:
                future.set_result(handler(callback))
            except Exception as e:
                future.set_exception(e)

        subscription = self.linking.add_listener(on_url)
        logger.debug("Listening on %s", route_id)
        return PendingRequest(route_id, future, subscription)
