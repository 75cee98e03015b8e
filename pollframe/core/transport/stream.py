import asyncio
import logging
from enum import StrEnum

from pollframe.core.http.codec import Request, Response
from pollframe.core.throttling.ratelimiter import RateLimiter
from pollframe.core.transport.application import Application
from pollframe.core.transport.flow import FlowControl


class SessionState(StrEnum):
    AWAITING_REQUEST = "awaiting_request"
    REQUEST_RECEIVED = "request_received"
    RESPONSE_SENT = "response_sent"
    PEER_CLOSED = "peer_closed"
    IO_ERROR = "io_error"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = frozenset({
    SessionState.PEER_CLOSED,
    SessionState.IO_ERROR,
    SessionState.TIMED_OUT,
})


class Streamer:
    """
    Runs the request/response cycle of a single connection.

    It receives decoded Request objects from the Protocol through an internal
    queue and exposes them to the Application via `receive()`. When the
    Application sends a Response, the Streamer waits for the pacer, waits for
    the transport to be writable, then writes the whole encoded response in
    one call. The pacer is only advanced once the write went through.

    Because the Application awaits `send()` before calling `receive()` again,
    request N+1 is never handed out before response N has been written.

    The session ends when the Protocol pushes the None sentinel (peer closed
    or I/O error), when no request arrives within `read_timeout`, or when the
    Application returns. In every case the transport is closed by
    `run_app()`.
    """
    def __init__(
        self,
        transport: asyncio.Transport,
        flow: FlowControl,
        pacer: RateLimiter,
        queue: asyncio.Queue[Request | None],
        read_timeout: float | None = None,
    ) -> None:
        self.queue = queue
        self.state = SessionState.AWAITING_REQUEST
        self.cycles = 0
        self._transport = transport
        self._flow = flow
        self._pacer = pacer
        self._read_timeout = read_timeout
        self._error: Exception | None = None
        self._logger = logging.getLogger("core.transport.stream")

    @property
    def error(self) -> Exception | None:
        return self._error

    async def receive(self) -> Request | None:
        if self.state in TERMINAL_STATES:
            return None

        self.state = SessionState.AWAITING_REQUEST
        try:
            request = await asyncio.wait_for(self.queue.get(), timeout=self._read_timeout)
        except TimeoutError:
            self._logger.warning(f"No request within {self._read_timeout}s, closing session")
            self.state = SessionState.TIMED_OUT
            return None

        if request is None:
            self.state = SessionState.IO_ERROR if self._error else SessionState.PEER_CLOSED
            return None

        self.state = SessionState.REQUEST_RECEIVED
        return request

    async def send(self, response: Response) -> None:
        await self._pacer.wait()

        if self._flow.write_paused:
            await self._flow.drain()

        try:
            self._transport.write(response.encode())
        except Exception as exc:
            self._logger.error(f"Failed to send response: {exc}")
            self._error = exc
            self.state = SessionState.IO_ERROR
            self._pacer.on_error()
            self._transport.close()
            return

        self._pacer.on_success()
        self.cycles += 1
        self.state = SessionState.RESPONSE_SENT

    def terminate(self, exc: Exception | None = None) -> None:
        """Wake up `receive()` with the end-of-session sentinel."""
        if exc is not None:
            self._error = exc
        self.queue.put_nowait(None)

    async def run_app(self, app: Application) -> None:
        self._pacer.start()
        try:
            await app(self.receive, self.send)
        except Exception as exc:
            self._logger.error("Exception in Application", exc_info=exc)
        finally:
            self._transport.close()
