"""Tile acquisition: coordinates, disk cache, fetching and version layers.

This module provides:
- TileCache: one file per tile under the cache root
- TileFetcher: cache-first HTTP fetcher
- VersionResolver: base + diff layer composition
- coverage helpers: region strings to pixel region and tile range
"""

from tiles.cache import TileCache, TileKey
from tiles.coverage import compute_tile_range, resolve_region
from tiles.fetcher import TileFetcher, TileFetchError
from tiles.resolver import LayerOutcome, TileResolveError, VersionResolver

__all__ = [
    'LayerOutcome',
    'TileCache',
    'TileFetchError',
    'TileFetcher',
    'TileKey',
    'TileResolveError',
    'VersionResolver',
    'compute_tile_range',
    'resolve_region',
]
