from dataclasses import dataclass
from enum import IntEnum


KEY_SLOTS = 256
"""Length of the input vector the bootstrap page sends on every POST."""

KEY_DOWN = ord("1")


class KeyCode(IntEnum):
    """Browser ``KeyboardEvent.keyCode`` values understood by the scene."""
    ArrowLeft = 37
    ArrowUp = 38
    ArrowRight = 39
    ArrowDown = 40


@dataclass(frozen=True)
class InputVector:
    """
    Transient view over the body of a POST request.

    The body is a string of single-character flags, one per key code:
    ``"1"`` when the key is held, ``"0"`` otherwise. A body shorter than the
    requested index reads as "not held".
    """
    raw: bytes

    def is_down(self, code: int) -> bool:
        if 0 <= code < len(self.raw):
            return self.raw[code] == KEY_DOWN
        return False

    def held(self) -> list[KeyCode]:
        return [code for code in KeyCode if self.is_down(code)]
