from __future__ import annotations

import ssl

import aiohttp
import certifi

from shared.constants import HTTP_TIMEOUT_DEFAULT, USER_AGENT


def make_ssl_context() -> ssl.SSLContext:
    # SSL-контекст с сертификатами из certifi
    return ssl.create_default_context(cafile=certifi.where())


def make_http_session(timeout_s: float = HTTP_TIMEOUT_DEFAULT) -> aiohttp.ClientSession:
    """Plain aiohttp session; tile caching is done on disk by TileCache."""
    connector = aiohttp.TCPConnector(ssl=make_ssl_context(), limit=1)
    timeout = aiohttp.ClientTimeout(total=timeout_s)
    return aiohttp.ClientSession(
        connector=connector,
        timeout=timeout,
        headers={'User-Agent': USER_AGENT},
    )
