"""File-based tile cache.

One PNG file per (version, zoom, x, y) under the cache root. The file holds
the raw bytes exactly as received from the tile server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image

from shared.constants import CACHE_FILE_TEMPLATE, DEFAULT_CACHE_DIR, VERSION_PREFIX

logger = logging.getLogger(__name__)


def prefixed_version(version: str) -> str:
    """Версия с обязательным префиксом 'v'."""
    if version.startswith(VERSION_PREFIX):
        return version
    return VERSION_PREFIX + version


def decode_tile(data: bytes) -> Image.Image:
    """Decode tile bytes into a fully loaded RGBA image.

    Raises OSError (including UnidentifiedImageError) for corrupt data.
    """
    with Image.open(BytesIO(data)) as img:
        img.load()
        return img.convert('RGBA')


@dataclass(frozen=True)
class TileKey:
    """Identifies one raster tile on the server and in the cache."""

    version: str
    zoom: int
    x: int
    y: int

    @property
    def prefixed_version(self) -> str:
        return prefixed_version(self.version)

    @property
    def file_name(self) -> str:
        return CACHE_FILE_TEMPLATE.format(
            version=self.prefixed_version, zoom=self.zoom, x=self.x, y=self.y
        )

    def __str__(self) -> str:
        return f'{self.prefixed_version}/{self.zoom}/{self.x}/{self.y}'


class TileCache:
    """Read/write-through tile store on disk.

    Usage:
        cache = TileCache('tile_cache')
        img = cache.load(key)
        if img is None:
            cache.store(key, data)
    """

    def __init__(self, cache_dir: str | Path | None = None) -> None:
        self.cache_dir = Path(cache_dir or DEFAULT_CACHE_DIR)

    def path_for(self, key: TileKey) -> Path:
        return self.cache_dir / key.file_name

    def contains(self, key: TileKey) -> bool:
        return self.path_for(key).is_file()

    def load(self, key: TileKey) -> Image.Image | None:
        """Decoded tile on hit, None when missing or undecodable."""
        if not self.contains(key):
            return None
        path = self.path_for(key)
        try:
            return decode_tile(path.read_bytes())
        except (OSError, ValueError) as e:
            logger.debug('Ignoring unreadable cache entry %s: %s', path, e)
            return None

    def store(self, key: TileKey, data: bytes) -> bool:
        """Persist raw tile bytes. Failures are logged and reported as False."""
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.debug('Failed to write cache entry %s: %s', path, e)
            return False
        return True
