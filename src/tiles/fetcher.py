from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiohttp
from PIL import Image

from shared.constants import HTTP_OK, HTTP_TIMEOUT_DEFAULT, SITE_BASE_URL, TILE_PATH_TEMPLATE
from tiles.cache import TileCache, TileKey, decode_tile

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class TileFetchError(RuntimeError):
    """A single tile could not be obtained or decoded."""


class TileFetcher:
    """Загрузка тайлов: сначала кэш на диске, затем один HTTP-запрос.

    Повторов нет: неудачная загрузка окончательна для этого вызова.
    """

    def __init__(
        self,
        client: aiohttp.ClientSession,
        cache: TileCache,
        *,
        base_url: str = SITE_BASE_URL,
        timeout_s: float = HTTP_TIMEOUT_DEFAULT,
        decoder: Callable[[bytes], Image.Image] = decode_tile,
    ) -> None:
        self.client = client
        self.cache = cache
        self.base_url = base_url.rstrip('/')
        self.timeout_s = timeout_s
        self._decode = decoder
        self._stats_cache_hits = 0
        self._stats_cache_misses = 0
        self._stats_downloads = 0
        self._stats_errors = 0

    @property
    def stats(self) -> dict[str, int]:
        return {
            'cache_hits': self._stats_cache_hits,
            'cache_misses': self._stats_cache_misses,
            'downloads': self._stats_downloads,
            'errors': self._stats_errors,
        }

    def tile_url(self, key: TileKey) -> str:
        path = TILE_PATH_TEMPLATE.format(
            version=key.prefixed_version, zoom=key.zoom, x=key.x, y=key.y
        )
        return f'{self.base_url}{path}'

    async def fetch(self, version: str, zoom: int, x: int, y: int) -> Image.Image:
        """Return the decoded tile, raising TileFetchError on failure."""
        key = TileKey(version, zoom, x, y)
        cached = self.cache.load(key)
        if cached is not None:
            self._stats_cache_hits += 1
            return cached
        self._stats_cache_misses += 1

        url = self.tile_url(key)
        data = await self._download(url)
        try:
            img = self._decode(data)
        except (OSError, ValueError) as e:
            self._stats_errors += 1
            msg = f'PNG decode error for {url}: {e}'
            raise TileFetchError(msg) from e

        self._stats_downloads += 1
        logger.debug('Downloaded %s (%d bytes)', url, len(data))
        self.cache.store(key, data)
        return img

    async def _download(self, url: str) -> bytes:
        timeout = aiohttp.ClientTimeout(total=self.timeout_s)
        try:
            async with self.client.get(url, timeout=timeout) as resp:
                sc = resp.status
                if sc != HTTP_OK:
                    self._stats_errors += 1
                    msg = f'HTTP {sc} for {url}'
                    raise TileFetchError(msg)
                return await resp.read()
        except (TimeoutError, aiohttp.ClientError) as e:
            self._stats_errors += 1
            msg = f'Request failed for {url}: {e or type(e).__name__}'
            raise TileFetchError(msg) from e
