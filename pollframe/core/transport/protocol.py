import asyncio
import logging

from pollframe.core.http.codec import HttpError, RequestAssembler, decode_request
from pollframe.core.models.config import ServerConfig
from pollframe.core.models.state import ServerState
from pollframe.core.throttling.pacer import FixedRatePacer
from pollframe.core.transport.flow import FlowControl
from pollframe.core.transport.stream import Streamer


def get_remote_addr(transport: asyncio.BaseTransport) -> tuple[str, int] | None:
    info = transport.get_extra_info("peername")
    if isinstance(info, (list, tuple)) and len(info) >= 2:
        return str(info[0]), int(info[1])
    return None


class Protocol(asyncio.Protocol):
    """
    Implements the connection lifecycle and request reassembly for a
    single browser connection. It receives raw bytes from the transport,
    reconstructs complete HTTP requests, decodes them, and forwards the
    resulting Request objects to the Streamer of the connection.

    When a connection is established, Protocol creates a FlowControl and a
    per-session FixedRatePacer, registers itself in the server's connection
    set, and starts the Streamer task that runs the application. That task is
    exposed as `session` so the server can tell when the session is over.

    Incoming bytes go through a RequestAssembler, so a request split across
    several reads, or several requests in one read, are handled. A framing
    violation (buffer overflow, invalid Content-Length) closes the connection
    immediately.

    A zero-length read is an orderly peer shutdown: it is logged and the
    sentinel is queued behind the requests already received. The transport
    stays open so that their responses are still written; the Streamer
    closes it once the queue is drained. When the connection is lost, Protocol removes
    itself from the server state, logs I/O errors, and signals termination to
    the Streamer by pushing the sentinel into its queue.

    Protocol does not interpret requests, render frames, or pace responses.
    These responsibilities belong to the Application and the Streamer.
    """
    def __init__(
        self,
        config: ServerConfig,
        server_state: ServerState,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._transport: asyncio.Transport = None   # type: ignore[assignment]
        self._flow: FlowControl = None  # type: ignore[assignment]
        self._streamer: Streamer = None   # type: ignore[assignment]
        self.session: asyncio.Task[None] | None = None

        self._config = config
        self._app = config.app
        self._loop = loop or asyncio.get_event_loop()
        self._connections = server_state.connections
        self._tasks = server_state.tasks
        self._assembler = RequestAssembler(config.max_buffer_size)
        self._client: tuple[str, int] | None = None
        self._logger = logging.getLogger("core.transport.protocol")

    @property
    def who(self) -> str:
        return "%s:%d" % self._client if self._client else ""

    @property
    def streamer(self) -> Streamer:
        return self._streamer

    def connection_made(self, transport: asyncio.Transport) -> None:
        self._transport = transport
        self._flow = FlowControl()
        self._connections.add(self)
        self._streamer = Streamer(
            transport=self._transport,
            flow=self._flow,
            pacer=FixedRatePacer(interval=self._config.pacing_interval),
            queue=asyncio.Queue(),
            read_timeout=self._config.read_timeout,
        )
        task = self._loop.create_task(self._streamer.run_app(self._app))
        task.add_done_callback(self._tasks.discard)
        self._tasks.add(task)
        self.session = task

        self._client = get_remote_addr(transport)
        self._logger.debug(f"{self.who} - Connection made")

    def connection_lost(self, exc: Exception | None) -> None:
        self._connections.discard(self)

        if exc is None:
            self._logger.debug(f"{self.who} - Connection lost.")
        else:
            self._logger.error(f"{self.who} - I/O error: {exc}")

        if self._flow is not None:
            self._flow.resume_writing()
        if exc is None:
            self._transport.close()

        self._streamer.terminate(exc)

    def eof_received(self) -> bool | None:
        self._logger.info(f"{self.who} - Peer shutdown")
        self._streamer.terminate()
        return True

    def data_received(self, data: bytes) -> None:
        try:
            requests = self._assembler.feed(data)
        except HttpError as exc:
            self._logger.warning(f"{self.who} - {exc}, closing connection")
            self._streamer.terminate(exc)
            self._transport.close()
            return

        for raw in requests:
            self._streamer.queue.put_nowait(decode_request(raw))

    def pause_writing(self) -> None:
        self._flow.pause_writing()

    def resume_writing(self) -> None:
        self._flow.resume_writing()

    def shutdown(self) -> None:
        self._transport.close()
