import logging
from contextlib import nullcontext
from typing import AsyncIterator, Optional

from linereader.buffer import LineBuffer
from linereader.reader import Line, LineResult, Signal
from linereader.sources import handle_source_exception


logger = logging.getLogger(__name__)

#: Default upper bound of a single read from the stream.
DEFAULT_CHUNK_SIZE = 1024 * 1024


class StreamLineReader:
    """
    Handles StreamReader readline without buffer limit and with ``\\r\\n`` terminators

    :param handle_exception: context manager factory translating errors of the stream
        before the generic I/O mapping of :func:`~linereader.sources.handle_source_exception`
    """
    def __init__(self, reader, chunk_size: int = DEFAULT_CHUNK_SIZE, handle_exception=nullcontext):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive, got {}".format(chunk_size))
        self._reader = reader
        self._handle_exception = handle_exception
        self._chunk_size = chunk_size
        self._buffer = LineBuffer()
        self._exhausted = False

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self):
        while True:
            line = await self.readline()
            if line is None:
                return
            yield line

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    async def next_line(self) -> LineResult:
        """Wait for the next line; returns :attr:`Signal.EndOfStream` at EOF, never :attr:`Signal.NeedMore`"""
        if self._exhausted:
            return Signal.EndOfStream

        self._buffer.trim()
        while True:
            line = self._buffer.take_line()
            if line is not None:
                return Line(line)

            with handle_source_exception(), self._handle_exception():
                chunk = await self._reader.read(self._chunk_size)
            if not chunk:
                logger.debug("Received EOF")
                self._exhausted = True
                return Signal.EndOfStream
            logger.debug("Received %d bytes of data", len(chunk))
            self._buffer.extend(chunk)

    async def readline(self) -> Optional[bytes]:
        """Return the next line or ``None`` at EOF; an empty line is ``b""``"""
        result = await self.next_line()
        if result is Signal.EndOfStream:
            return None
        return bytes(result)

    def remainder(self) -> bytes:
        return self._buffer.remainder()
