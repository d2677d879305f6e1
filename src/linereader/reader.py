"""
Incremental line reader over sequential byte sources.

    .. code-block:: python

        from linereader import LineReader, Signal

        with LineReader(open("server.log", "rb")) as reader:
            while True:
                result = reader.next_line()
                if result is Signal.EndOfStream:
                    break
                if result is Signal.NeedMore:
                    continue
                print(result.text())

Lines end at ``\\n`` or ``\\r\\n``; a lone ``\\r`` is line content.
Unterminated bytes at the end of the stream are never returned as a line,
use :meth:`LineReader.remainder` to get them explicitly.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

from linereader.buffer import LineBuffer
from linereader.scanner import find_terminator
from linereader.sources import PeekSource, open_source


logger = logging.getLogger(__name__)

#: Default upper bound of a single read from the source.
DEFAULT_CHUNK_SIZE = 1024


class Signal(Enum):
    """Results of :meth:`LineReader.next_line` carrying no line"""
    NeedMore = "need_more"
    EndOfStream = "end_of_stream"


@dataclass(frozen=True)
class Line:
    """
    Line content without its terminator.

    ``data`` is a view into the reader's buffer, valid until the next call on the
    reader. Use ``bytes(line)`` or :meth:`text` to keep it longer.
    """
    data: memoryview

    def __bytes__(self):
        return self.data.tobytes()

    def __len__(self):
        return len(self.data)

    def text(self, encoding: str = "utf-8") -> str:
        """Decode the line, replacing invalid byte sequences"""
        return self.data.tobytes().decode(encoding, errors="replace")


LineResult = Union[Line, Signal]


class LineReader:
    """
    Splits a byte source into lines.

    :param source: file, socket, bytes-like object, iterable of byte chunks
        or an adapter from :mod:`~linereader.sources`
    :param chunk_size: upper bound of a single read from the source
    :param zero_copy: serve lines directly from the bytes buffered by the source
        (requires ``peek`` on a blocking stream); ``None`` decides based on the source
    """

    def __init__(self, source, chunk_size: int = DEFAULT_CHUNK_SIZE, zero_copy: Optional[bool] = None):
        self._source = open_source(source, chunk_size, zero_copy)
        self._buffer = LineBuffer()
        self._exhausted = False
        self._pending_consume = 0
        if isinstance(self._source, PeekSource):
            self._next = self._next_peeked
        else:
            self._next = self._next_chunked

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __iter__(self) -> Iterator[bytes]:
        while True:
            line = self.readline()
            if line is None:
                return
            yield line

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def buffered(self) -> int:
        """Number of bytes held in the reader's own buffer"""
        return len(self._buffer)

    def next_line(self) -> LineResult:
        """
        Return the next line, :attr:`Signal.NeedMore` if no complete line is available
        yet or :attr:`Signal.EndOfStream` once the source is exhausted.

        Reads at most one chunk per call beyond what is already buffered.
        Source failures are raised as :class:`~linereader.errors.SourceError`;
        buffered bytes are kept, so the call may be repeated.
        """
        if self._exhausted:
            return Signal.EndOfStream
        return self._next()

    def readline(self) -> Optional[bytes]:
        """
        Return the next line as bytes or ``None`` at the end of the stream.
        Keeps reading while lines are incomplete, so it is meant for blocking sources.
        """
        while True:
            result = self.next_line()
            if result is Signal.EndOfStream:
                return None
            if result is not Signal.NeedMore:
                return bytes(result)

    def lines(self, encoding: str = "utf-8") -> Iterator[str]:
        """Iterate over decoded lines, invalid byte sequences are replaced"""
        for line in self:
            yield line.decode(encoding, errors="replace")

    def remainder(self) -> bytes:
        """Unterminated bytes buffered so far, not consumed"""
        return self._buffer.remainder()

    def close(self):
        self._buffer.clear()
        self._source.close()

    def _end_of_stream(self) -> Signal:
        logger.debug("Received EOF, %d unterminated bytes left", len(self._buffer) - self._buffer.pending_trim)
        self._exhausted = True
        return Signal.EndOfStream

    def _next_chunked(self) -> LineResult:
        self._buffer.trim()
        line = self._buffer.take_line()
        if line is not None:
            return Line(line)

        chunk = self._source.read_chunk()
        if chunk is None:
            return Signal.NeedMore
        if not chunk:
            return self._end_of_stream()
        logger.debug("Received %d bytes of data", len(chunk))
        self._buffer.extend(chunk)

        line = self._buffer.take_line()
        if line is not None:
            return Line(line)
        return Signal.NeedMore

    def _next_peeked(self) -> LineResult:
        self._buffer.trim()
        self._consume_pending()

        if not len(self._buffer):
            data = self._source.peek()
            if not data:
                return self._signal(data)
            found = find_terminator(data)
            if found is not None:
                offset, term_len = found
                self._pending_consume = offset + term_len
                return Line(data[:offset])
            # line continues past the bytes the source buffers
            self._carry(data)

        data = self._source.peek()
        if not data:
            return self._signal(data)
        logger.debug("Peeked %d bytes of data", len(data))
        found = find_terminator(data)
        if found is None:
            self._carry(data)
            return Signal.NeedMore
        offset, term_len = found
        self._carry(data[:offset + term_len])
        return Line(self._buffer.take_line())

    def _signal(self, data) -> Signal:
        if data is None:
            return Signal.NeedMore
        return self._end_of_stream()

    def _carry(self, data):
        self._source.consume(len(data))
        self._buffer.extend(data)

    def _consume_pending(self):
        if self._pending_consume:
            self._source.consume(self._pending_consume)
            self._pending_consume = 0
