import asyncio


class FlowControl:
    """
    Tracks whether the transport accepts more data.

    asyncio transports buffer every write in full and call
    `pause_writing()` / `resume_writing()` on their protocol when that buffer
    crosses its high/low water marks. The Streamer awaits `drain()` before
    writing a frame so that a slow browser holds back the frame loop instead
    of piling frames up in memory.
    """

    def __init__(self) -> None:
        self._writable = asyncio.Event()
        self._writable.set()
        self.write_paused = False
        self.pauses = 0

    async def drain(self) -> None:
        await self._writable.wait()

    def pause_writing(self) -> None:
        if not self.write_paused:
            self.pauses += 1
        self.write_paused = True
        self._writable.clear()

    def resume_writing(self) -> None:
        if self.write_paused:
            self.write_paused = False
            self._writable.set()
