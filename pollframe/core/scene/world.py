from pollframe.core.models.inputs import InputVector
from pollframe.core.ports.scene import Scene
from pollframe.core.render.canvas import BLACK, Canvas, Color
from pollframe.core.render.encoding import FrameEncoding, encode_frame


class World:
    """
    Owns the simulation state and the canvas it is rendered into.

    One World exists per server. Every session reaches it through the frame
    service, and `step` runs without suspending, so the canvas only ever
    has a single writer even when several sessions are served.
    """
    def __init__(
        self,
        canvas: Canvas,
        scene: Scene,
        encoding: FrameEncoding = FrameEncoding.raw,
        background: Color = BLACK,
    ) -> None:
        self.canvas = canvas
        self.scene = scene
        self.encoding = encoding
        self.background = background
        self.frames = 0

    def step(self, inputs: InputVector) -> bytes:
        """Advance one frame and return it encoded for the wire."""
        self.scene.update(inputs)
        self.canvas.clear(self.background)
        self.scene.draw(self.canvas)
        self.frames += 1
        return encode_frame(self.canvas.to_bytes(), self.encoding)
