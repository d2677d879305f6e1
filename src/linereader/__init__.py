from linereader.errors import (
    LineReaderError, SourceClosed, SourceError, SourceNotSupported, SourceReadError, SourceTimeout
)
from linereader.reader import DEFAULT_CHUNK_SIZE, Line, LineReader, LineResult, Signal
from linereader.scanner import find_terminator

__all__ = [
    "DEFAULT_CHUNK_SIZE", "Line", "LineReader", "LineResult", "Signal", "find_terminator",
    "LineReaderError", "SourceClosed", "SourceError", "SourceNotSupported", "SourceReadError", "SourceTimeout"
]
