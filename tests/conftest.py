import os
from typing import Generator
from unittest.mock import AsyncMock

import pytest
import yaml

from pollframe.core.models.config import ServerConfig
from pollframe.core.models.state import ServerState
from pollframe.core.render.canvas import Canvas
from pollframe.core.scene.hero import Hero
from pollframe.core.scene.world import World
from tests.fake.fake_transport import FakeClock, FakeTransport
from tests.helpers import FakePollFrameConfig


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def server_state():
    return ServerState()


@pytest.fixture
def config():
    return ServerConfig(
        app=AsyncMock(),
        host="1.1.1.1",
        port=1234,
        backlog=1,
        pacing_interval=0.0,
        max_buffer_size=1024,
    )


@pytest.fixture
def world():
    canvas = Canvas(64, 64)
    return World(canvas=canvas, scene=Hero.centered(64, 64))


@pytest.fixture
def config_file(tmp_path):
    file = tmp_path / "pollframe.yaml"

    data = {
        "server": {
            "host": "127.0.0.1",
            "port": 0,
            "backlog": 2,
            "limit_concurrency": 1,
            "read_timeout": 30,
            "max_buffer_size": 8192,
            "timeout_graceful_shutdown": 1,
        },
        "frame": {
            "width": 32,
            "height": 16,
            "pacing_ms": 20,
            "encoding": "raw",
        },
        "scene": {
            "speed": 2.0,
            "radius": 3.0,
        },
    }

    file.write_text(yaml.dump(data))
    return file


@pytest.fixture
def pollframe_config(config_file) -> Generator[FakePollFrameConfig, None, None]:
    backup = os.environ.copy()

    try:
        os.environ["TEST_POLLFRAMECONFIG"] = str(config_file)
        yield FakePollFrameConfig()
    finally:
        os.environ.clear()
        os.environ.update(backup)
