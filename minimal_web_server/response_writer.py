import asyncio
from enum import IntEnum, auto

from .responses import Response


class WriterState(IntEnum):
    PENDING = auto()
    SENT = auto()

class Writer:
    """Writes exactly one response to a connection."""

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self.writer_state = WriterState.PENDING
        self.writer = writer
        self.bytes_written = 0

    @property
    def started(self) -> bool:
        return self.writer_state != WriterState.PENDING

    async def send(self, response: Response) -> None:
        if self.writer_state != WriterState.PENDING:
            msg = f"cannot send response in state {self.writer_state}"
            raise ValueError(msg)
        data = response.to_bytes()
        self.writer_state = WriterState.SENT
        self.writer.write(data)
        self.bytes_written += len(data)
        await self.writer.drain()
