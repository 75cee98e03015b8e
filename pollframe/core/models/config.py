from dataclasses import dataclass

from pollframe.core.transport.application import Application


@dataclass
class ServerConfig:
    """
    Static configuration for a FrameServer.

    This structure defines all parameters required to start a server:
    networking, session limits, pacing, and graceful shutdown behavior.
    """
    app: Application
    """
    The per-connection application coroutine with the signature:
        async def app(receive, send)
    It receives decoded requests and sends one response for each.
    """

    host: str = "0.0.0.0"
    """
    IP address or hostname on which the server listens.
    """

    port: int = 8080
    """
    TCP port to bind. If set to 0, the OS selects an available port.
    """

    backlog: int = 1
    """
    Maximum number of pending TCP connections waiting for accept().
    """

    limit_concurrency: int = 1
    """
    Maximum number of sessions served at the same time. With the default of
    one, the next connection is only accepted once the current session ends.
    """

    pacing_interval: float = 0.1
    """
    Minimum time (in seconds) between two responses sent on one session.
    """

    read_timeout: float | None = None
    """
    Close a session that stays this long (in seconds) without a complete
    request. None waits forever.
    """

    max_buffer_size: int = 64 * 1024  # 64KB
    """
    Maximum size of the per-connection receive buffer.
    Protects against requests that never complete.
    """

    timeout_graceful_shutdown: float = 5.0
    """
    Maximum time (in seconds) allowed for graceful shutdown:
    - active connections must close
    - session tasks registered in ServerState.tasks must complete
    After this timeout, remaining tasks are cancelled.
    """
