import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class FixedRatePacer:
    """
    Enforces a minimum spacing between consecutive responses of a session.

    The schedule is anchored at `start()` and advances by exactly
    `interval` after every successful send:

        next_send = next_send + interval

    rather than ``now + interval``. This makes the pacer a fixed-rate ticker:
    a response produced late is sent immediately, and lateness does not push
    back the following deadlines. The pacer only ever throttles a fast
    producer, it never speeds up a slow one.

    A failed send does not consume a slot of the schedule: `on_error` leaves
    `next_send` unchanged.

    An interval of 0 disables pacing.
    """

    interval: float = 0.1
    """Minimum time (in seconds) between two response sends."""

    clock: Callable[[], float] = time.monotonic
    """Monotonic clock used to evaluate the schedule."""

    _next_send: float | None = field(default=None, init=False)
    """Earliest time at which the next response may be sent."""

    def __post_init__(self):
        if self.interval < 0:
            raise ValueError(f"Pacing interval must be >= 0, got {self.interval}")

    @property
    def next_send(self) -> float | None:
        return self._next_send

    @property
    def delay(self) -> float:
        if self._next_send is None:
            return 0.0
        return max(0.0, self._next_send - self.clock())

    def start(self) -> None:
        self._next_send = self.clock()

    async def wait(self) -> None:
        if self._next_send is None:
            self.start()

        delay = self.delay
        if delay > 0:
            await asyncio.sleep(delay)

    def advance(self) -> None:
        if self._next_send is None:
            self.start()
        self._next_send += self.interval

    def on_success(self) -> None:
        self.advance()

    def on_error(self) -> None:
        pass
