import asyncio
import logging
import socket

from pollframe.core.models.config import ServerConfig
from pollframe.core.models.state import ServerState
from pollframe.core.transport.protocol import Protocol


class FrameServer:
    """
    Owns the listening socket and the accept loop of the frame server.

    It binds to the configured host and port with address reuse enabled and
    listens with the configured backlog. The accept loop takes a session slot
    before every accept(), so with `limit_concurrency=1` the next connection
    stays in the kernel backlog until the current session has ended: only
    one client is ever served at a time. Each accepted socket is handed to a
    fresh Protocol whose Streamer runs the configured application.

    An accept() failure ends the accept loop; `accepting` completes and the
    owner decides what to do (the control plane shuts the process down).
    A bind/listen failure is raised from `start()`.

    On shutdown, FrameServer stops accepting, closes the listening socket,
    asks all active connections to close, and waits for both connections and
    session tasks to complete. If the graceful shutdown timeout is exceeded,
    any remaining tasks are cancelled and an error is logged.
    """
    def __init__(
        self,
        config: ServerConfig,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._config = config
        self._loop = loop or asyncio.get_event_loop()
        self.state = ServerState(limit_concurrency=config.limit_concurrency)
        self._logger = logging.getLogger("core.transport.server")

        self._sock: socket.socket | None = None
        self._accept_task: asyncio.Task[None] | None = None

    @property
    def port(self) -> int:
        if self._sock is None:
            raise RuntimeError("Server is not started")
        return self._sock.getsockname()[1]

    @property
    def accepting(self) -> asyncio.Task[None] | None:
        return self._accept_task

    def create_protocol(self) -> Protocol:
        return Protocol(
            config=self._config,
            server_state=self.state,
            loop=self._loop,
        )

    async def start(self) -> None:
        config = self._config
        sock = socket.create_server(
            (config.host, config.port),
            family=socket.AF_INET,
            backlog=config.backlog,
        )
        sock.setblocking(False)
        self._sock = sock
        self._logger.info(f"Listening on {config.host}:{self.port}")

        self._accept_task = self._loop.create_task(self._accept_loop())

    async def _accept_loop(self) -> None:
        sessions = self.state.sessions

        while True:
            await sessions.acquire()
            try:
                conn, _ = await self._loop.sock_accept(self._sock)
            except OSError as exc:
                sessions.release()
                self._logger.error(f"Accept failed, stop serving: {exc}")
                return

            try:
                _, protocol = await self._loop.connect_accepted_socket(
                    self.create_protocol, conn
                )
            except OSError as exc:
                sessions.release()
                conn.close()
                self._logger.error(f"Failed to set up connection: {exc}")
                continue

            protocol.session.add_done_callback(lambda _: sessions.release())

    async def shutdown(self) -> None:
        if self._accept_task:
            self._accept_task.cancel()
            try:
                await self._accept_task
            except asyncio.CancelledError:
                pass

        if self._sock:
            self._sock.close()

        for connection in self.state.connections.copy():
            connection.shutdown()

        try:
            await asyncio.wait_for(
                self._wait_task_complete(),
                timeout=self._config.timeout_graceful_shutdown
            )
        except TimeoutError:
            self._logger.error(
                f"Cancel {len(self.state.tasks)} running task(s), "
                f"timeout graceful shutdown: {self.state.tasks}"
            )
            for task in self.state.tasks:
                task.cancel("Task cancelled, timeout graceful shutdown exceeded")

    async def _wait_task_complete(self) -> None:
        if self.state.connections:
            self._logger.info("Waiting for client connections to close.")

        while self.state.connections:
            await asyncio.sleep(0.1)

        if self.state.tasks:
            self._logger.info("Waiting for session tasks to complete.")

        while self.state.tasks:
            await asyncio.sleep(0.1)
