import logging
from typing import Callable

from pollframe.core.http.codec import Response
from pollframe.core.models.message import ReceiveRequest, SendResponse
from pollframe.core.routing.router import Router, RouteHandler


class FrameApplication:
    """
    Application implementation that answers every request of a session
    with the body produced by the handler registered in a `Router`.

    - For each incoming request, the application resolves the handler from
      the request line.
    - If no handler matches (another method or path, or a malformed request
      line), an empty 200 response is sent.
    - If a handler exists, it is awaited and its bytes become the response
      body.
    - Any exception raised by a handler is logged and results in an empty
      200 response; the session carries on.

    The application terminates when `receive()` returns None, at which point
    the Streamer closes the underlying connection.
    """

    def __init__(self) -> None:
        self.router = Router()
        self._logger = logging.getLogger("core.routing.app")

    async def __call__(self, receive: ReceiveRequest, send: SendResponse) -> None:
        while True:
            request = await receive()
            if request is None:
                break

            handler = self.router.resolve(request)

            if handler is None:
                self._logger.debug(f"No route for '{request.line}'")
                await send(Response())
                continue

            try:
                body = await handler(request)
            except Exception as exc:
                self._logger.error(f"Error in handler for '{request.line}': {exc}", exc_info=exc)
                body = b""

            await send(Response(body=body or b""))

    def route(self, method: str, path: str) -> Callable[[RouteHandler], RouteHandler]:
        return self.router.route(method, path)
