from typing import Protocol


class RateLimiter(Protocol):
    """
    Interface for the pacing policy applied to outgoing responses.

    A rate limiter exposes how long the sender must still wait before the
    next response may leave, and is told whether the last send went out.
    """

    @property
    def delay(self) -> float:
        """Return the remaining wait (in seconds) before the next send."""

    def start(self) -> None:
        """Anchor the schedule at the beginning of a session."""

    async def wait(self) -> None:
        """Suspend until the next send is allowed."""

    def on_success(self) -> None:
        """Notify the limiter that a response was sent."""

    def on_error(self) -> None:
        """Notify the limiter that sending a response failed."""
