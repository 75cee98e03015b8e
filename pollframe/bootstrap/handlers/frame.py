from pollframe.bootstrap.deps import get_app, get_frames
from pollframe.core.http.codec import Request


app = get_app()


@app.route("GET", "/")
async def index(request: Request) -> bytes:
    frames = get_frames()
    return await frames.index(request)


@app.route("POST", "/")
async def frame(request: Request) -> bytes:
    frames = get_frames()
    return await frames.step(request)
