import pytest

from linereader.scanner import find_terminator


@pytest.mark.parametrize("data, expected", [
    (b"", None),
    (b"abc", None),
    (b"abc\r", None),
    (b"a\rb\rc", None),
    (b"\n", (0, 1)),
    (b"\r\n", (0, 2)),
    (b"12\n", (2, 1)),
    (b"12\r\n", (2, 2)),
    (b"12\r\r\n", (3, 2)),
    (b"a\rb\nc\r\n", (3, 1)),
    (b"\n\r\n", (0, 1)),
])
def test_find_terminator(data, expected):
    assert find_terminator(data) == expected


@pytest.mark.parametrize("kind", [bytes, bytearray, memoryview])
def test_bytes_like_input(kind):
    assert find_terminator(kind(b"ab\r\ncd")) == (2, 2)


def test_start_skips_scanned_bytes():
    data = b"a\nbc\r\n"
    assert find_terminator(data, 2) == (4, 2)


def test_carriage_return_before_start_still_pairs():
    # "\r" was scanned in an earlier pass, "\n" arrived later
    assert find_terminator(b"ab\r\n", 3) == (2, 2)


def test_memoryview_slice_searched_in_place():
    view = memoryview(b"xx\nab\r\ncd")[3:]
    assert find_terminator(view) == (2, 2)
    assert find_terminator(view[4:]) is None
    assert find_terminator(view, 2) == (2, 2)
