from dataclasses import dataclass

CRLF = b"\r\n"
HEADER_TERMINATOR = b"\r\n\r\n"


class HttpError(Exception):
    """Raised when the incoming byte stream cannot be split into requests."""


class RequestTooLarge(HttpError):
    pass


class MalformedRequest(HttpError):
    pass


@dataclass(frozen=True)
class Request:
    """A decoded request: its request line and, for POST, its body."""
    line: str
    body: bytes = b""

    @property
    def method(self) -> str:
        return self.line.split(" ", 1)[0]

    @property
    def path(self) -> str:
        parts = self.line.split(" ")
        return parts[1] if len(parts) > 1 else ""


@dataclass(frozen=True)
class Response:
    """
    A 200 response with the fixed header block.

    The content type is always ``text/html``, including for binary frame
    bodies: the bootstrap page reads the raw bytes and ignores it.
    """
    body: bytes = b""

    def encode(self) -> bytes:
        header = (
            "HTTP/1.1 200 OK\r\n"
            "Content-Type: text/html\r\n"
            f"Content-Length: {len(self.body)}\r\n"
            "\r\n"
        )
        return header.encode("ascii") + self.body


def decode_request(raw: bytes) -> Request:
    """
    Extract the request line and the POST body from one complete request.

    The request line is everything before the first CRLF. A body is only
    kept when the method token starts with ``POST``; it is everything after
    the first blank line. Malformed input never raises, it degrades to an
    empty line and/or body.
    """
    line_end = raw.find(CRLF)
    line = raw if line_end == -1 else raw[:line_end]

    body = b""
    if line.startswith(b"POST"):
        separator = raw.find(HEADER_TERMINATOR)
        if separator != -1:
            body = raw[separator + len(HEADER_TERMINATOR):]

    return Request(line=line.decode("latin-1"), body=bytes(body))


def _content_length(head: bytes) -> int | None:
    for header in head.split(CRLF)[1:]:
        name, sep, value = header.partition(b":")
        if not sep or name.strip().lower() != b"content-length":
            continue
        try:
            length = int(value.strip())
        except ValueError:
            raise MalformedRequest(f"Invalid Content-Length: {value.strip()!r}") from None
        if length < 0:
            raise MalformedRequest(f"Negative Content-Length: {length}")
        return length
    return None


class RequestAssembler:
    """
    Reassembles complete HTTP requests from an arbitrarily chunked stream.

    Bytes are accumulated until the header terminator has arrived. If the
    headers carry a Content-Length, the request is complete once that many
    body bytes are buffered. A POST without Content-Length takes every byte
    that followed the blank line at the time it arrived; any other request
    without Content-Length has no body.

    Several requests arriving in one chunk are split and returned in order.
    A declared body larger than `max_buffer_size`, or a partial request that
    grows past it, raises RequestTooLarge.
    """
    def __init__(self, max_buffer_size: int) -> None:
        self._buffer = bytearray()
        self._max_buffer_size = max_buffer_size

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def feed(self, data: bytes) -> list[bytes]:
        self._buffer.extend(data)
        requests: list[bytes] = []

        while True:
            head_end = self._buffer.find(HEADER_TERMINATOR)
            if head_end == -1:
                break

            head = bytes(self._buffer[:head_end])
            body_start = head_end + len(HEADER_TERMINATOR)
            length = _content_length(head)

            if length is None:
                end = len(self._buffer) if head.startswith(b"POST") else body_start
            else:
                if length > self._max_buffer_size:
                    raise RequestTooLarge(f"Declared body of {length} bytes is too large")
                end = body_start + length
                if len(self._buffer) < end:
                    break

            requests.append(bytes(self._buffer[:end]))
            del self._buffer[:end]

        if len(self._buffer) > self._max_buffer_size:
            raise RequestTooLarge(f"Incomplete request exceeds {self._max_buffer_size} bytes")

        return requests
