from typing import Protocol

from pollframe.core.models.inputs import InputVector
from pollframe.core.render.canvas import Canvas


class Scene(Protocol):
    """
    Interface for the simulation advanced once per POST cycle.

    `update` consumes the input vector of the current request and advances
    the simulation by one frame. `draw` paints the current state onto a
    canvas that has already been cleared to the background color.

    A Scene must be deterministic: the same starting state and the same
    sequence of input vectors always produce the same frames.
    """

    def update(self, inputs: InputVector) -> None:
        """Advance the simulation by one frame."""

    def draw(self, canvas: Canvas) -> None:
        """Paint the current state onto the canvas."""
