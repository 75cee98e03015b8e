import json
from enum import StrEnum


class FrameEncoding(StrEnum):
    """Wire format of a frame in a POST response body."""

    raw = "raw"
    """The pixel buffer bytes, verbatim."""

    json = "json"
    """A JSON array of the pixel bytes, e.g. ``[0,0,0,255,...]``."""


def encode_frame(data: bytes, encoding: FrameEncoding = FrameEncoding.raw) -> bytes:
    if encoding is FrameEncoding.raw:
        return bytes(data)
    if encoding is FrameEncoding.json:
        return json.dumps(list(data), separators=(",", ":")).encode("ascii")
    raise ValueError(f"Unsupported frame encoding: {encoding!r}")
