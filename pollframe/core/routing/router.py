import functools
import logging
from typing import Awaitable, Callable

from pollframe.core.http.codec import Request


RouteHandler = Callable[[Request], Awaitable[bytes]]


class Router:
    """
    A minimal request-routing component used by FrameApplication.

    The Router maps a method and a path to an asynchronous handler returning
    the response body. A request matches a route when its request line starts
    with ``"<METHOD> <path> "``, so ``GET / HTTP/1.1`` matches ``("GET", "/")``
    while ``GET /favicon.ico HTTP/1.1`` does not.

    Handlers are registered exactly once per route. Attempting to register a
    second handler for the same route raises a RuntimeError.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], RouteHandler] = {}
        self._logger = logging.getLogger("core.routing.router")

    def route(self, method: str, path: str) -> Callable[[RouteHandler], RouteHandler]:
        key = (method.upper(), path)

        def decorator(func: RouteHandler) -> RouteHandler:
            if key in self._routes:
                raise RuntimeError(f"Handler already registered for '{method} {path}'")

            @functools.wraps(func)
            async def wrapper(*args, **kwargs):
                return await func(*args, **kwargs)

            self._routes[key] = wrapper
            return wrapper

        return decorator

    def resolve(self, request: Request) -> RouteHandler | None:
        for (method, path), handler in self._routes.items():
            if request.line.startswith(f"{method} {path} "):
                return handler
        return None

    def routes(self) -> dict[tuple[str, str], RouteHandler]:
        return dict(self._routes)
