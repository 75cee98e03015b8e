from dataclasses import dataclass

from pollframe.core.models.inputs import InputVector, KeyCode
from pollframe.core.render.canvas import Canvas, Color, RED


@dataclass
class Hero:
    """
    A single square entity steered with the arrow keys.

    Each frame it moves `speed` pixels along every axis whose arrow key is
    held; opposite keys cancel out. Its position is not bounded: once it
    leaves the canvas it is simply clipped away by the drawing code.
    """

    x: float
    y: float
    speed: float = 8.0
    radius: float = 4.0
    color: Color = RED

    @classmethod
    def centered(cls, width: int, height: int, **kwargs) -> "Hero":
        return cls(x=0.5 * width, y=0.5 * height, **kwargs)

    def update(self, inputs: InputVector) -> None:
        if inputs.is_down(KeyCode.ArrowLeft):
            self.x -= self.speed
        if inputs.is_down(KeyCode.ArrowUp):
            self.y -= self.speed
        if inputs.is_down(KeyCode.ArrowRight):
            self.x += self.speed
        if inputs.is_down(KeyCode.ArrowDown):
            self.y += self.speed

    def draw(self, canvas: Canvas) -> None:
        r = self.radius
        canvas.draw_rect(self.x - r, self.y - r, 2.0 * r, 2.0 * r, self.color)
