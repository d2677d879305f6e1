"""
Reading lines of HTTP response bodies with aiohttp.

    .. code-block:: python

        from linereader.http import create_client_session, fetch_lines

        async def tail(url):
            async with create_client_session() as session:
                async for line in fetch_lines(session, "GET", url):
                    print(line.decode("utf-8", errors="replace"))
"""

import asyncio
import logging
import ssl
from contextlib import contextmanager
from http import HTTPStatus

import aiohttp
import certifi

from linereader.aio import DEFAULT_CHUNK_SIZE, StreamLineReader
from linereader.errors import (
    BackendError, NetworkError, SourceReadError, SourceTimeout, SourceUnavailable, UnknownError
)


logger = logging.getLogger(__name__)

#: Default limit of the simultaneous connections for ssl connector.
DEFAULT_LIMIT = 20
#: Default timeout in seconds used for client session.
DEFAULT_TIMEOUT = 60


def create_tcp_connector(*args, **kwargs) -> aiohttp.TCPConnector:
    """
    Creates TCP connector with reasonable defaults.
    For details about available parameters refer to
    `aiohttp.TCPConnector <https://docs.aiohttp.org/en/stable/client_reference.html#tcpconnector>`_
    """
    ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ssl_context.load_verify_locations(certifi.where())
    kwargs.setdefault("ssl", ssl_context)
    kwargs.setdefault("limit", DEFAULT_LIMIT)
    return aiohttp.TCPConnector(*args, **kwargs)


def create_client_session(*args, **kwargs) -> aiohttp.ClientSession:
    """
    Creates client session with reasonable defaults.
    For details about available parameters refer to
    `aiohttp.ClientSession <https://docs.aiohttp.org/en/stable/client_reference.html>`_
    """
    kwargs.setdefault("connector", create_tcp_connector())
    kwargs.setdefault("timeout", aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT))
    kwargs.setdefault("raise_for_status", True)
    return aiohttp.ClientSession(*args, **kwargs)


@contextmanager
def handle_exception():
    """
    Context manager translating network related exceptions
    to :mod:`~linereader.errors`.
    """
    try:
        yield
    except asyncio.TimeoutError:
        raise SourceTimeout()
    except aiohttp.ServerDisconnectedError:
        raise SourceUnavailable()
    except aiohttp.ClientConnectionError:
        raise NetworkError()
    except aiohttp.ClientPayloadError as error:
        raise SourceReadError(repr(error))
    except aiohttp.ClientResponseError as error:
        if error.status == HTTPStatus.SERVICE_UNAVAILABLE:
            raise SourceUnavailable(error.message)
        if error.status >= 500:
            raise BackendError(error.message)
        logger.warning(
            "Got status %d while performing %s request for %s",
            error.status, error.request_info.method, str(error.request_info.url)
        )
        raise UnknownError(error.message)
    except aiohttp.ClientError as e:
        logger.exception("Caught exception while performing request")
        raise UnknownError(repr(e))


async def iter_response_lines(response, chunk_size=DEFAULT_CHUNK_SIZE):
    """Yield the lines of ``response`` body, terminators excluded"""
    reader = StreamLineReader(response.content, chunk_size, handle_exception)
    while True:
        line = await reader.readline()
        if line is None:
            return
        yield line


async def fetch_lines(session, method, url, *, chunk_size=DEFAULT_CHUNK_SIZE, **kwargs):
    """Perform a request and yield the lines of its body"""
    with handle_exception():
        response = await session.request(method, url, **kwargs)
    async with response:
        async for line in iter_response_lines(response, chunk_size):
            yield line
