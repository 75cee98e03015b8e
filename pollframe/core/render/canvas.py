from dataclasses import dataclass


@dataclass(frozen=True)
class Color:
    """An opaque-by-default RGBA color."""
    r: int
    g: int
    b: int
    a: int = 255

    def to_bytes(self) -> bytes:
        return bytes((self.r, self.g, self.b, self.a))


BLACK = Color(0, 0, 0)
RED = Color(255, 0, 0)

DEPTH = 4


class Canvas:
    """
    Fixed-size RGBA raster used as the render target of every frame.

    The pixels live in a single bytearray of ``width * height * 4`` bytes,
    row-major, 4 bytes per pixel in (R, G, B, A) order. The buffer is
    allocated once and mutated in place; its length never changes.

    All drawing is clamped to the buffer bounds: a rectangle that straddles
    an edge only paints its visible part, and coordinates outside the raster
    are ignored. Nothing is ever written outside the buffer.
    """
    def __init__(self, width: int = 256, height: int = 256) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self._data = bytearray(width * height * DEPTH)

    def __len__(self) -> int:
        return len(self._data)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        offset = (x + y * self.width) * DEPTH
        self._data[offset:offset + DEPTH] = color.to_bytes()

    def pixel(self, x: int, y: int) -> Color:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} canvas")
        offset = (x + y * self.width) * DEPTH
        return Color(*self._data[offset:offset + DEPTH])

    def draw_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        """
        Fill the part of the rectangle that lies inside the canvas.

        Coordinates are truncated toward zero, then the origin is clamped to
        ``[0, width]`` / ``[0, height]`` and the far edge to the canvas size.
        """
        x, y, w, h = int(x), int(y), int(w), int(h)

        cx = min(max(x, 0), self.width)
        cy = min(max(y, 0), self.height)
        cw = min(x + w, self.width) - cx
        ch = min(y + h, self.height) - cy
        if cw <= 0 or ch <= 0:
            return

        row = color.to_bytes() * cw
        for yi in range(cy, cy + ch):
            start = (cx + yi * self.width) * DEPTH
            self._data[start:start + len(row)] = row

    def clear(self, color: Color = BLACK) -> None:
        self._data[:] = color.to_bytes() * (self.width * self.height)

    def to_bytes(self) -> bytes:
        return bytes(self._data)
