from typing import Protocol

from pollframe.core.models.message import ReceiveRequest, SendResponse


class Application(Protocol):
    """
    This interface defines the per-connection handler executed by the Streamer.

    An Application is an asynchronous callable that receives two functions:
    `receive`, which waits for and returns the next decoded Request, and
    `send`, which paces and transmits a Response. It implements one session
    by alternating `receive()` and `send(response)` until `receive()`
    returns None.

    When the Application exits, the underlying connection is closed by the
    Streamer. It does not deal with reassembly, pacing, or transport-level
    concerns; those belong to the Protocol and the Streamer.
    """
    async def __call__(self, receive: ReceiveRequest, send: SendResponse) -> None:
        ...
