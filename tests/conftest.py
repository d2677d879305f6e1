import logging
from unittest.mock import MagicMock

import pytest

from linereader.unittest.mock import ScriptedStream


@pytest.fixture()
def reader():
    stream = MagicMock(name="stream_reader")
    stream.read = MagicMock()
    yield stream


@pytest.fixture()
def read(reader):
    yield reader.read


@pytest.fixture()
def scripted():
    """Factory of read-into streams delivering the given chunks"""
    return ScriptedStream


@pytest.fixture(autouse=True)
def my_caplog(caplog):
    caplog.set_level(logging.DEBUG)
