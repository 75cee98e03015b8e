import asyncio
import socket
import time

import pytest

from pollframe.core.http.page import render_page
from pollframe.core.models.config import ServerConfig
from pollframe.core.models.inputs import KeyCode
from pollframe.core.render.canvas import Canvas
from pollframe.core.routing.app import FrameApplication
from pollframe.core.scene.hero import Hero
from pollframe.core.scene.world import World
from pollframe.core.service.frame import FrameService
from pollframe.core.transport.server import FrameServer
from pollctl.core.client import input_vector
from tests.helpers import http_request, read_response

WIDTH, HEIGHT = 32, 16


def make_app(page: bytes = b"<page>") -> tuple[FrameApplication, World]:
    world = World(canvas=Canvas(WIDTH, HEIGHT), scene=Hero.centered(WIDTH, HEIGHT))
    frames = FrameService(world=world, page=page)
    app = FrameApplication()
    app.route("GET", "/")(frames.index)
    app.route("POST", "/")(frames.step)
    return app, world


async def start_server(app, **overrides) -> FrameServer:
    options = dict(
        app=app,
        host="127.0.0.1",
        port=0,
        backlog=1,
        limit_concurrency=1,
        pacing_interval=0.0,
        max_buffer_size=4096,
        timeout_graceful_shutdown=1.0,
    )
    options.update(overrides)

    server = FrameServer(config=ServerConfig(**options), loop=asyncio.get_running_loop())
    await server.start()
    return server


async def connect(server: FrameServer):
    return await asyncio.open_connection("127.0.0.1", server.port)


async def close(writer: asyncio.StreamWriter) -> None:
    writer.close()
    await writer.wait_closed()


@pytest.mark.it
@pytest.mark.asyncio
async def test_get_root_serves_page():
    page = render_page(WIDTH, HEIGHT)
    app, _ = make_app(page)
    server = await start_server(app)

    reader, writer = await connect(server)
    writer.write(http_request("GET"))
    status, headers, body = await read_response(reader)

    assert status == "HTTP/1.1 200 OK"
    assert headers["content-type"] == "text/html"
    assert int(headers["content-length"]) == len(page)
    assert body == page

    await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_keep_alive_frame_loop():
    app, world = make_app()
    server = await start_server(app)

    reader, writer = await connect(server)
    writer.write(http_request("GET"))
    await read_response(reader)

    for held in ([], [KeyCode.ArrowLeft], [KeyCode.ArrowUp, KeyCode.ArrowRight], [KeyCode.ArrowDown]):
        writer.write(http_request("POST", body=input_vector(held)))
        status, headers, body = await read_response(reader)
        assert status == "HTTP/1.1 200 OK"
        assert headers["content-type"] == "text/html"
        assert len(body) == WIDTH * HEIGHT * 4
        assert body == world.canvas.to_bytes()

    assert world.frames == 4

    await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_other_routes_get_empty_body():
    app, world = make_app()
    server = await start_server(app)

    reader, writer = await connect(server)
    for raw in (http_request("GET", "/favicon.ico"), http_request("DELETE"), b"BREW / HTCPCP/1.0\r\n\r\n"):
        writer.write(raw)
        status, headers, body = await read_response(reader)
        assert status == "HTTP/1.1 200 OK"
        assert headers["content-length"] == "0"
        assert body == b""

    assert world.frames == 0

    await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_request_split_across_writes():
    app, _ = make_app()
    server = await start_server(app)

    reader, writer = await connect(server)
    raw = http_request("POST", body=input_vector([KeyCode.ArrowLeft]))
    for i in range(0, len(raw), 50):
        writer.write(raw[i:i + 50])
        await writer.drain()
        await asyncio.sleep(0.005)

    _, _, body = await read_response(reader)
    assert len(body) == WIDTH * HEIGHT * 4

    await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_responses_are_paced():
    interval = 0.05
    app, _ = make_app()
    server = await start_server(app, pacing_interval=interval)

    reader, writer = await connect(server)
    writer.write(http_request("GET"))
    await read_response(reader)

    arrivals = []
    for _ in range(4):
        writer.write(http_request("POST", body=input_vector()))
        await read_response(reader)
        arrivals.append(time.monotonic())

    for earlier, later in zip(arrivals, arrivals[1:]):
        assert later - earlier >= interval - 0.01

    await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_paced_responses_survive_peer_half_close():
    app, world = make_app()
    server = await start_server(app, pacing_interval=0.1)

    reader, writer = await connect(server)
    writer.write(http_request("GET"))
    await read_response(reader)

    writer.write(http_request("GET") + http_request("POST", body=input_vector()))
    await writer.drain()
    writer.write_eof()

    _, _, page = await asyncio.wait_for(read_response(reader), timeout=1)
    _, _, frame = await asyncio.wait_for(read_response(reader), timeout=1)
    assert page == b"<page>"
    assert len(frame) == WIDTH * HEIGHT * 4
    assert world.frames == 1

    assert await asyncio.wait_for(reader.read(), timeout=1) == b""

    await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_next_connection_is_served_after_peer_close():
    app, _ = make_app()
    server = await start_server(app)

    for _ in range(3):
        reader, writer = await connect(server)
        writer.write(http_request("GET"))
        _, _, body = await asyncio.wait_for(read_response(reader), timeout=1)
        assert body == b"<page>"
        await close(writer)

    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_one_session_at_a_time():
    app, _ = make_app()
    server = await start_server(app)

    first_reader, first_writer = await connect(server)
    first_writer.write(http_request("GET"))
    await read_response(first_reader)

    second_reader, second_writer = await connect(server)
    second_writer.write(http_request("GET"))

    with pytest.raises(TimeoutError):
        await asyncio.wait_for(second_reader.readuntil(b"\r\n\r\n"), timeout=0.2)

    # The first session is still served while the second one waits.
    first_writer.write(http_request("POST", body=input_vector()))
    _, _, frame = await asyncio.wait_for(read_response(first_reader), timeout=1)
    assert len(frame) == WIDTH * HEIGHT * 4

    await close(first_writer)

    _, _, body = await asyncio.wait_for(read_response(second_reader), timeout=1)
    assert body == b"<page>"

    await close(second_writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_concurrent_sessions_when_allowed():
    app, _ = make_app()
    server = await start_server(app, limit_concurrency=2, backlog=4)

    clients = [await connect(server) for _ in range(2)]
    for _, writer in clients:
        writer.write(http_request("GET"))

    for reader, _ in clients:
        _, _, body = await asyncio.wait_for(read_response(reader), timeout=1)
        assert body == b"<page>"

    for _, writer in clients:
        await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_read_timeout_frees_the_server():
    app, _ = make_app()
    server = await start_server(app, read_timeout=0.1)

    idle_reader, idle_writer = await connect(server)

    reader, writer = await connect(server)
    writer.write(http_request("GET"))
    _, _, body = await asyncio.wait_for(read_response(reader), timeout=1)
    assert body == b"<page>"

    assert await asyncio.wait_for(idle_reader.read(), timeout=1) == b""

    await close(idle_writer)
    await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_oversized_request_closes_connection():
    app, _ = make_app()
    server = await start_server(app, max_buffer_size=64)

    reader, writer = await connect(server)
    writer.write(b"POST / HTTP/1.1\r\nContent-Length: 1000\r\n\r\n")

    assert await asyncio.wait_for(reader.read(), timeout=1) == b""

    await close(writer)
    await server.shutdown()


@pytest.mark.it
@pytest.mark.asyncio
async def test_start_fails_when_port_is_taken():
    app, _ = make_app()

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]

        server = FrameServer(
            config=ServerConfig(app=app, host="127.0.0.1", port=port),
            loop=asyncio.get_running_loop(),
        )
        with pytest.raises(OSError):
            await server.start()


@pytest.mark.it
@pytest.mark.asyncio
async def test_shutdown_with_open_connection():
    app, _ = make_app()
    server = await start_server(app)

    reader, writer = await connect(server)
    writer.write(http_request("GET"))
    await read_response(reader)

    await server.shutdown()

    assert await asyncio.wait_for(reader.read(), timeout=1) == b""
    assert not server.state.connections
    assert not server.state.tasks
    await close(writer)
