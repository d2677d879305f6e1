import asyncio
from http import HTTPStatus
from unittest.mock import MagicMock

import aiohttp
import pytest
from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

from linereader.errors import (
    BackendError, NetworkError, SourceReadError, SourceTimeout, SourceUnavailable, UnknownError
)
from linereader.http import create_client_session, fetch_lines, handle_exception, iter_response_lines
from linereader.unittest.mock import async_raise, async_return_value

request_info = aiohttp.RequestInfo(URL("http://o.pl"), "GET", CIMultiDictProxy(CIMultiDict()))


@pytest.mark.parametrize(
    "aiohttp_exception,expected_exception_type",
    [
        (asyncio.TimeoutError(), SourceTimeout),
        (aiohttp.ServerDisconnectedError(), SourceUnavailable),
        (aiohttp.ClientConnectionError(), NetworkError),
        (aiohttp.ClientPayloadError("truncated"), SourceReadError),
        (aiohttp.ClientResponseError(request_info, (), status=HTTPStatus.SERVICE_UNAVAILABLE), SourceUnavailable),
        (aiohttp.ClientResponseError(request_info, (), status=HTTPStatus.INTERNAL_SERVER_ERROR), BackendError),
        (aiohttp.ClientResponseError(request_info, (), status=HTTPStatus.NOT_IMPLEMENTED), BackendError),
        (aiohttp.ClientResponseError(request_info, (), status=HTTPStatus.BAD_REQUEST), UnknownError),
        (aiohttp.ClientResponseError(request_info, (), status=HTTPStatus.NOT_FOUND), UnknownError),
        (aiohttp.ClientError(), UnknownError)
    ]
)
def test_handle_exception(aiohttp_exception, expected_exception_type):
    with pytest.raises(expected_exception_type):
        with handle_exception():
            raise aiohttp_exception


def response_with_body(*chunks):
    response = MagicMock(name="response")
    response.content.read.side_effect = [async_return_value(chunk) for chunk in chunks]
    return response


@pytest.mark.asyncio
async def test_iter_response_lines():
    response = response_with_body(b"a\r", b"\nb\nc", b"")
    assert [line async for line in iter_response_lines(response)] == [b"a", b"b"]


@pytest.mark.asyncio
async def test_iter_response_lines_payload_error():
    response = MagicMock(name="response")
    response.content.read.side_effect = [async_raise(aiohttp.ClientPayloadError("truncated"))]
    with pytest.raises(SourceReadError):
        async for _ in iter_response_lines(response):
            pass


@pytest.mark.asyncio
async def test_iter_response_lines_connection_error():
    response = MagicMock(name="response")
    response.content.read.side_effect = [
        async_return_value(b"a\n"),
        async_raise(aiohttp.ClientOSError(104, "Connection reset by peer"))
    ]
    lines = []
    with pytest.raises(NetworkError):
        async for line in iter_response_lines(response):
            lines.append(line)
    assert lines == [b"a"]


@pytest.mark.asyncio
async def test_fetch_lines():
    response = response_with_body(b"one\r\ntwo\n", b"")
    session = MagicMock(name="session")
    session.request.return_value = async_return_value(response)

    lines = [line async for line in fetch_lines(session, "GET", "http://o.pl/log", params={"tail": 1})]

    assert lines == [b"one", b"two"]
    session.request.assert_called_once_with("GET", "http://o.pl/log", params={"tail": 1})
    response.__aexit__.assert_called_once()


@pytest.mark.asyncio
async def test_fetch_lines_request_error():
    session = MagicMock(name="session")
    session.request.return_value = async_raise(aiohttp.ServerDisconnectedError())
    with pytest.raises(SourceUnavailable):
        async for _ in fetch_lines(session, "GET", "http://o.pl/log"):
            pass


@pytest.mark.asyncio
async def test_client_session_defaults():
    session = create_client_session()
    try:
        assert session.timeout.total == 60
        assert session.connector.limit == 20
    finally:
        await session.close()
