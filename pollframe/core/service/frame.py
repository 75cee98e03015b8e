import logging

from pollframe.core.http.codec import Request
from pollframe.core.models.inputs import InputVector
from pollframe.core.scene.world import World


class FrameService:
    """
    Produces the response bodies of the two routes of the frame loop.

    ``GET /`` returns the bootstrap document, which is built once and served
    verbatim for the lifetime of the process. ``POST /`` reads the input
    vector from the request body, advances the world by one frame, and
    returns the encoded frame.
    """
    def __init__(self, world: World, page: bytes) -> None:
        self._world = world
        self._page = page
        self._logger = logging.getLogger("core.service.frame")

    @property
    def world(self) -> World:
        return self._world

    @property
    def page(self) -> bytes:
        return self._page

    async def index(self, request: Request) -> bytes:
        return self._page

    async def step(self, request: Request) -> bytes:
        inputs = InputVector(request.body)
        frame = self._world.step(inputs)
        self._logger.debug(f"Frame {self._world.frames}: held={[k.name for k in inputs.held()]}")
        return frame
