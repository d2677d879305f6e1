import logging
from typing import Optional

from linereader.scanner import find_terminator


logger = logging.getLogger(__name__)


class LineBuffer:
    """
    Growable byte buffer handing out lines as views into itself.

    The bytes of a returned line stay in place until :meth:`trim` is called,
    so the view given to the caller remains valid until then. Trimming is
    deferred to the beginning of the next read operation.
    """
    def __init__(self):
        self._data = bytearray()
        self._pending_trim = 0
        self._scanned = 0
        self._view: Optional[memoryview] = None

    def __len__(self):
        return len(self._data)

    @property
    def pending_trim(self) -> int:
        return self._pending_trim

    def extend(self, chunk) -> None:
        self._data += chunk

    def trim(self) -> None:
        """Drop the bytes of the previously returned line and its terminator."""
        self._release_view()
        count, self._pending_trim = self._pending_trim, 0
        if not count:
            return
        try:
            del self._data[:count]
        except BufferError:
            # previous line is still exported by the caller, leave it untouched
            logger.debug("Line view still in use, copying %d buffered bytes", len(self._data) - count)
            self._data = self._data[count:]
        self._scanned = 0

    def take_line(self) -> Optional[memoryview]:
        """
        Return a view of the first complete line, terminator excluded,
        or ``None`` if the buffer holds no terminator yet.
        Must be preceded by :meth:`trim` once a line has been returned.
        """
        found = find_terminator(self._data, self._scanned)
        if found is None:
            self._scanned = len(self._data)
            return None
        offset, term_len = found
        self._pending_trim = offset + term_len
        self._view = memoryview(self._data)[:offset]
        return self._view

    def remainder(self) -> bytes:
        return bytes(self._data[self._pending_trim:])

    def clear(self) -> None:
        self._release_view()
        self._data = bytearray()
        self._pending_trim = 0
        self._scanned = 0

    def _release_view(self):
        view, self._view = self._view, None
        if view is None:
            return
        try:
            view.release()
        except BufferError:
            # caller holds exports of the view; trim() falls back to copying
            logger.debug("Line view has active exports, not released")
