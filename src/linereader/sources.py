"""
Adapters presenting byte sources to the readers.

Two capabilities are supported:

* read-into (:class:`ChunkSource`, :class:`IterableSource`) - every chunk is
  copied into the reader's own buffer,
* peek-and-consume (:class:`PeekSource`) - lines are served directly from the
  bytes the source already buffers, e.g. :class:`io.BufferedReader`.

Use :func:`open_source` to select one for an arbitrary object.
"""

import io
import logging
import os
import socket
from contextlib import contextmanager
from typing import Optional

from linereader.errors import SourceClosed, SourceNotSupported, SourceReadError, SourceTimeout


logger = logging.getLogger(__name__)

_EMPTY = memoryview(b"")


@contextmanager
def handle_source_exception():
    """
    Context manager translating I/O exceptions of byte sources
    to :mod:`~linereader.errors`.
    """
    try:
        yield
    except (socket.timeout, TimeoutError) as error:
        raise SourceTimeout(repr(error))
    except OSError as error:
        raise SourceReadError(repr(error))
    except ValueError as error:
        # io raises ValueError for operations on closed files
        if "closed" in str(error):
            raise SourceClosed(str(error))
        raise


def _is_blocking(stream) -> bool:
    fileno = getattr(stream, "fileno", None)
    if not callable(fileno):
        return True
    try:
        return os.get_blocking(fileno())
    except (OSError, ValueError):
        # no file descriptor behind the stream, or it is closed
        return True


def _close(stream):
    close = getattr(stream, "close", None)
    if callable(close):
        close()


class ChunkSource:
    """Blocking or non-blocking read-into source with a reused chunk region."""

    def __init__(self, stream, chunk_size: int):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive, got {}".format(chunk_size))
        self._stream = stream
        self._region = memoryview(bytearray(chunk_size))
        self._read_into = self._select_read_into(stream)

    @property
    def chunk_size(self) -> int:
        return len(self._region)

    @staticmethod
    def _select_read_into(stream):
        for name in ("readinto", "recv_into"):
            method = getattr(stream, name, None)
            if callable(method):
                return method

        for name in ("read", "recv"):
            method = getattr(stream, name, None)
            if callable(method):
                def read_into(region, read=method):
                    data = read(len(region))
                    if data is None:
                        return None
                    if isinstance(data, str):
                        raise SourceNotSupported("Text streams are not supported, pass the binary buffer instead")
                    region[:len(data)] = data
                    return len(data)
                return read_into

        raise SourceNotSupported("Object of type {} can not be read".format(type(stream).__name__))

    def read_chunk(self) -> Optional[memoryview]:
        """
        Read one chunk.

        :return: view of the bytes read (valid until the next call), an empty view
            when the source is exhausted or ``None`` when no bytes are available right now
        """
        with handle_source_exception():
            try:
                count = self._read_into(self._region)
            except BlockingIOError:
                return None
        if count is None:
            return None
        return self._region[:count]

    def close(self):
        _close(self._stream)


class IterableSource:
    """Read-into source over an iterator of byte chunks."""

    def __init__(self, iterable, chunk_size: int):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive, got {}".format(chunk_size))
        self._iterable = iterable
        self._iterator = iter(iterable)
        self._chunk_size = chunk_size
        self._pending = _EMPTY

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def read_chunk(self) -> Optional[memoryview]:
        while not self._pending:
            with handle_source_exception():
                try:
                    chunk = next(self._iterator)
                except StopIteration:
                    return _EMPTY
            if chunk is None:
                return None
            if isinstance(chunk, str):
                raise SourceNotSupported("Iterable yielded text, expected bytes")
            self._pending = memoryview(chunk).cast("B")

        chunk, self._pending = self._pending[:self._chunk_size], self._pending[self._chunk_size:]
        return chunk

    def close(self):
        _close(self._iterable)


class PeekSource:
    """
    Peek-and-consume source, e.g. :class:`io.BufferedReader`.

    :meth:`io.BufferedReader.peek` returns a new ``bytes`` object holding all
    the bytes it buffers. The result is kept and handed out as a view until it
    has been consumed, so the stream is peeked once per buffer fill rather
    than once per line.

    Only blocking streams can report exhaustion: a non-blocking stream peeks
    empty both at EOF and when nothing is ready, which is reported as ``None``.
    """

    def __init__(self, stream, chunk_size: int):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive, got {}".format(chunk_size))
        self._stream = stream
        self._chunk_size = chunk_size
        self._peeked = _EMPTY

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def peek(self) -> Optional[memoryview]:
        """
        Return the bytes currently available without consuming them.
        Empty means the source is exhausted, ``None`` that nothing is available right now.
        """
        if self._peeked:
            return self._peeked
        with handle_source_exception():
            try:
                data = self._stream.peek(self._chunk_size)
            except BlockingIOError:
                return None
        if not data and not _is_blocking(self._stream):
            return None
        self._peeked = memoryview(data).cast("B")
        return self._peeked

    def consume(self, count: int) -> None:
        if count <= 0:
            return
        with handle_source_exception():
            self._stream.read(count)
        self._peeked = self._peeked[count:]

    def close(self):
        self._peeked = _EMPTY
        _close(self._stream)


def open_source(source, chunk_size: int, zero_copy: Optional[bool] = None):
    """
    Wrap ``source`` in the adapter matching its capabilities.

    :param source: file, socket, bytes-like object, iterable of byte chunks or an adapter
    :param chunk_size: upper bound of a single read
    :param zero_copy: ``True`` requires peek-and-consume, ``False`` forces read-into,
        ``None`` uses peek-and-consume whenever ``source`` can peek and is blocking
    """
    if isinstance(source, (ChunkSource, IterableSource, PeekSource)):
        return source

    can_peek = callable(getattr(source, "peek", None))
    if zero_copy and not can_peek:
        raise SourceNotSupported("Object of type {} can not peek".format(type(source).__name__))
    if zero_copy and not _is_blocking(source):
        raise SourceNotSupported("Non-blocking streams can not signal EOF through peek")
    if zero_copy is None:
        zero_copy = can_peek and _is_blocking(source)

    if zero_copy:
        adapter = PeekSource(source, chunk_size)
    elif isinstance(source, (bytes, bytearray, memoryview)):
        adapter = ChunkSource(io.BytesIO(source), chunk_size)
    elif isinstance(source, str):
        raise SourceNotSupported("Text is not supported, encode it first")
    elif any(callable(getattr(source, name, None)) for name in ("readinto", "recv_into", "read", "recv")):
        adapter = ChunkSource(source, chunk_size)
    elif hasattr(source, "__iter__") or hasattr(source, "__next__"):
        adapter = IterableSource(source, chunk_size)
    else:
        raise SourceNotSupported("Object of type {} is not a byte source".format(type(source).__name__))

    logger.debug("Reading %s through %s", type(source).__name__, type(adapter).__name__)
    return adapter
