import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pollframe.core.transport.protocol import Protocol


@dataclass
class ServerState:
    """
    Shared runtime state for a FrameServer.

    This object is mutated by:
    - Protocol: adds/removes active connections, registers session tasks
    - FrameServer: acquires a session slot before every accept()
    - FrameServer.shutdown(): waits for connections and tasks to complete
    """
    connections: set["Protocol"] = field(default_factory=set)
    """
    Set of active Protocol instances. Each TCP connection corresponds
    to one Protocol.
    """

    tasks: set[asyncio.Task[None]] = field(default_factory=set)
    """
    Set of session tasks, one per connection, each running the application.
    Tasks remove themselves through task.add_done_callback(tasks.discard).
    """

    limit_concurrency: int = 1
    """
    Number of session slots.
    """

    sessions: asyncio.Semaphore = field(init=False)
    """
    Session slots. One is held from accept() until the session task ends.
    """

    def __post_init__(self) -> None:
        self.sessions = asyncio.Semaphore(self.limit_concurrency)
