"""
Перевод пользовательских строк координат в область и диапазон тайлов.

Поддерживаемые форматы:
- fullsize, 6 полей: tileX-tileY-pixelX-pixelY-width-height
- fullsize, 8 полей: два угла tileX-tileY-pixelX-pixelY в любом порядке
- диапазон тайлов: minTX-minTY_maxTX-maxTY (углы в любом порядке)
- один тайл: tileX-tileY
"""

from __future__ import annotations

import re

from domain.models import Region, RegionMode, RegionParseError, TileRange
from shared.constants import (
    COORD_FIELD_SEPARATOR,
    FULLSIZE_FIELDS_LONG,
    FULLSIZE_FIELDS_SHORT,
    TILE_RANGE_SEPARATOR,
    TILE_SIZE,
)

_FIELD_RE = re.compile(r'\d+', re.ASCII)


def _parse_fields(text: str, source: str, expected: tuple[int, ...]) -> list[int]:
    parts = text.split(COORD_FIELD_SEPARATOR)
    if len(parts) not in expected:
        wanted = ' or '.join(str(n) for n in expected)
        msg = f'Invalid coordinate format {source!r}: expected {wanted} fields, got {len(parts)}'
        raise RegionParseError(msg)
    values = []
    for part in parts:
        if not _FIELD_RE.fullmatch(part):
            msg = f'Invalid number {part!r} in {source!r}'
            raise RegionParseError(msg)
        values.append(int(part))
    return values


def _make_region(start_x: int, start_y: int, width: int, height: int, source: str) -> Region:
    if width <= 0 or height <= 0:
        msg = f'Empty region {width}x{height} in {source!r}'
        raise RegionParseError(msg)
    return Region(start_x, start_y, width, height)


def parse_fullsize(text: str, tile_size: int = TILE_SIZE) -> Region:
    """Разбирает fullsize-строку из 6 или 8 полей."""
    source = text
    vals = _parse_fields(
        text.strip(), source, (FULLSIZE_FIELDS_SHORT, FULLSIZE_FIELDS_LONG)
    )
    if len(vals) == FULLSIZE_FIELDS_SHORT:
        tx, ty, px, py, width, height = vals
        return _make_region(tx * tile_size + px, ty * tile_size + py, width, height, source)

    x1 = vals[0] * tile_size + vals[2]
    y1 = vals[1] * tile_size + vals[3]
    x2 = vals[4] * tile_size + vals[6]
    y2 = vals[5] * tile_size + vals[7]
    x1, x2 = min(x1, x2), max(x1, x2)
    y1, y2 = min(y1, y2), max(y1, y2)
    return _make_region(x1, y1, x2 - x1, y2 - y1, source)


def parse_tile_range(text: str) -> TileRange:
    """Разбирает 'minTX-minTY_maxTX-maxTY'; порядок углов не важен."""
    source = text
    corners = text.strip().split(TILE_RANGE_SEPARATOR)
    if len(corners) != 2:  # noqa: PLR2004
        msg = f'Invalid tile range format {source!r}: expected two points separated by {TILE_RANGE_SEPARATOR!r}'
        raise RegionParseError(msg)
    x1, y1 = _parse_fields(corners[0], source, (2,))
    x2, y2 = _parse_fields(corners[1], source, (2,))
    return TileRange(min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))


def parse_single_tile(text: str) -> TileRange:
    """Разбирает 'tileX-tileY'."""
    tx, ty = _parse_fields(text.strip(), text, (2,))
    return TileRange(tx, ty, tx, ty)


def region_from_tiles(tile_range: TileRange, tile_size: int = TILE_SIZE) -> Region:
    """Область из целых тайлов, включая обе границы диапазона."""
    return Region(
        start_x=tile_range.min_x * tile_size,
        start_y=tile_range.min_y * tile_size,
        width=(tile_range.max_x - tile_range.min_x + 1) * tile_size,
        height=(tile_range.max_y - tile_range.min_y + 1) * tile_size,
    )


def compute_tile_range(region: Region, tile_size: int = TILE_SIZE) -> TileRange:
    """Inclusive tile range covering the region."""
    return TileRange(
        min_x=region.start_x // tile_size,
        min_y=region.start_y // tile_size,
        max_x=(region.start_x + region.width - 1) // tile_size,
        max_y=(region.start_y + region.height - 1) // tile_size,
    )


def resolve_region(
    mode: RegionMode,
    text: str,
    tile_size: int = TILE_SIZE,
) -> tuple[Region, TileRange]:
    """Область и покрывающий её диапазон тайлов для выбранного формата."""
    if mode == RegionMode.FULLSIZE:
        region = parse_fullsize(text, tile_size)
    elif mode == RegionMode.TILE_RANGE:
        region = region_from_tiles(parse_tile_range(text), tile_size)
    elif mode == RegionMode.SINGLE_TILE:
        region = region_from_tiles(parse_single_tile(text), tile_size)
    else:
        msg = f'Unknown region mode: {mode!r}'
        raise RegionParseError(msg)
    return region, compute_tile_range(region, tile_size)
