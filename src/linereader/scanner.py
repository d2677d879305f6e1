"""
Line terminator detection.

A line ends at ``\\n`` or ``\\r\\n``. A ``\\r`` that is not immediately followed
by ``\\n`` is plain content. Every piece of code that needs to know where a line
ends goes through :func:`find_terminator`.
"""

import re
from typing import Optional, Tuple

CR = 0x0D

# memoryview has no find(), regular expressions search any buffer in place
_LF = re.compile(b"\n")


def find_terminator(data, start: int = 0) -> Optional[Tuple[int, int]]:
    """
    Find the first line terminator in ``data`` at or after ``start``.

    :param data: bytes-like object, not modified
    :param start: offset to resume scanning from; bytes before it are known to contain no ``\\n``
    :return: ``(offset, terminator_length)`` where ``offset`` is the end of the line content,
        or ``None`` if no ``\\n`` is present
    """
    if isinstance(data, memoryview):
        match = _LF.search(data, start)
        index = match.start() if match is not None else -1
    else:
        index = data.find(b"\n", start)
    if index < 0:
        return None
    if index > 0 and data[index - 1] == CR:
        return index - 1, 2
    return index, 1
