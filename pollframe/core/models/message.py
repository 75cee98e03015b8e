from typing import Awaitable, Callable

from pollframe.core.http.codec import Request, Response


ReceiveRequest = Callable[[], Awaitable[Request | None]]
"""
Coroutine provided to the application for receiving the next request.
It suspends until a complete request is available and returns None once
the session is over.
"""


SendResponse = Callable[[Response], Awaitable[None]]
"""
Coroutine provided to the application for sending a response. It applies
the session pacing before writing.
"""
