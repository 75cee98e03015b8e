import asyncio
import logging

from pollframe.bootstrap.config.settings import PollFrameConfig
from pollframe.core.http.page import render_page
from pollframe.core.models.config import ServerConfig
from pollframe.core.render.canvas import Canvas
from pollframe.core.scene.hero import Hero
from pollframe.core.scene.world import World
from pollframe.core.service.frame import FrameService
from pollframe.core.transport.application import Application
from pollframe.core.transport.server import FrameServer


class ControlPlane:
    def __init__(
        self,
        config: PollFrameConfig,
        app: Application,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._config = config
        self._app = app
        self._loop = loop or self._create_event_loop()
        self._logger = logging.getLogger("pollframe.controlplane")

        self._world = self._build_world()
        self._frames = FrameService(
            world=self._world,
            page=render_page(
                width=config.frame.width,
                height=config.frame.height,
                key_slots=config.frame.key_slots,
                encoding=config.frame.encoding,
            )
        )
        self._server_config = self._build_server_config()
        self._server = FrameServer(config=self._server_config, loop=self._loop)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def frames(self) -> FrameService:
        return self._frames

    @property
    def server(self) -> FrameServer:
        return self._server

    async def start(self, stop_event: asyncio.Event) -> None:
        try:
            await self._server.start()
        except OSError as exc:
            self._logger.error(f"Cannot listen on {self._server_config.host}:{self._server_config.port}: {exc}")
            raise SystemExit(1)

        stopper = self._loop.create_task(stop_event.wait())
        await asyncio.wait(
            {stopper, self._server.accepting},
            return_when=asyncio.FIRST_COMPLETED,
        )
        stopper.cancel()

        self._logger.info("Shutting down.")
        await self._server.shutdown()

    def _build_world(self) -> World:
        frame = self._config.frame
        scene = self._config.scene
        return World(
            canvas=Canvas(frame.width, frame.height),
            scene=Hero.centered(frame.width, frame.height, speed=scene.speed, radius=scene.radius),
            encoding=frame.encoding,
        )

    def _build_server_config(self) -> ServerConfig:
        server_config = self._config.server

        return ServerConfig(
            app=self._app,
            host=server_config.host,
            port=server_config.port,
            backlog=server_config.backlog,
            limit_concurrency=server_config.limit_concurrency,
            pacing_interval=self._config.pacing_interval,
            read_timeout=server_config.read_timeout,
            max_buffer_size=server_config.max_buffer_size,
            timeout_graceful_shutdown=server_config.timeout_graceful_shutdown,
        )

    @staticmethod
    def _create_event_loop() -> asyncio.AbstractEventLoop:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        return loop
