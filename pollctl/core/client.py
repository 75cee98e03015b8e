import socket
from dataclasses import dataclass, field

from pollframe.core.models.inputs import KEY_SLOTS, KeyCode

HEADER_TERMINATOR = b"\r\n\r\n"


@dataclass
class FrameResponse:
    status: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")


def input_vector(held: list[KeyCode] | tuple[KeyCode, ...] = (), slots: int = KEY_SLOTS) -> bytes:
    """Build the key flag body the bootstrap page would post."""
    flags = bytearray(b"0" * slots)
    for code in held:
        if 0 <= code < slots:
            flags[int(code)] = ord("1")
    return bytes(flags)


class FrameClient:
    """
    Synchronous client for a pollframe server.

    It behaves like the bootstrap page: one kept-alive TCP connection, a GET
    for the page, then one POST per frame. Responses are read by header and
    Content-Length, so the connection can be reused for the next request.

    This client is minimal and blocking. It is intended for CLI usage,
    debugging, and simple scripts.
    """
    def __init__(self, host: str, port: int, timeout: float | None = 5.0):
        self._host = host
        self._port = port
        self._timeout = timeout
        self._sock: socket.socket | None = None
        self._pending = b""

    def __enter__(self) -> "FrameClient":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def connect(self) -> None:
        if self._sock is not None:
            return

        self._sock = socket.create_connection((self._host, self._port), timeout=self._timeout)

    def close(self) -> None:
        if self._sock:
            try:
                self._sock.close()
            finally:
                self._sock = None
                self._pending = b""

    def request(self, method: str, path: str = "/", body: bytes = b"") -> FrameResponse:
        if not self._sock:
            self.connect()

        head = f"{method} {path} HTTP/1.1\r\nHost: {self._host}:{self._port}\r\n"
        if body or method == "POST":
            head += f"Content-Length: {len(body)}\r\n"
        self._sock.sendall(head.encode("ascii") + b"\r\n" + body)

        return self._recv_response()

    def page(self) -> FrameResponse:
        return self.request("GET")

    def frame(self, held: list[KeyCode] | tuple[KeyCode, ...] = (), slots: int = KEY_SLOTS) -> FrameResponse:
        return self.request("POST", body=input_vector(held, slots))

    def _recv_response(self) -> FrameResponse:
        while HEADER_TERMINATOR not in self._pending:
            self._pending += self._recv_some()

        head, _, rest = self._pending.partition(HEADER_TERMINATOR)
        lines = head.decode("latin-1").split("\r\n")
        status = lines[0].split(" ", 1)[1] if " " in lines[0] else lines[0]
        headers = {}
        for line in lines[1:]:
            name, _, value = line.partition(":")
            headers[name.strip().lower()] = value.strip()

        length = int(headers.get("content-length", "0"))
        while len(rest) < length:
            rest += self._recv_some()

        self._pending = rest[length:]
        return FrameResponse(status=status, headers=headers, body=rest[:length])

    def _recv_some(self) -> bytes:
        chunk = self._sock.recv(65536)
        if not chunk:
            raise ConnectionError("Connection closed by peer")
        return chunk
