"""Canvas assembly: one region image per version from overlapping tiles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image

from geometry import tile_overlap_rect
from shared.constants import TILE_SIZE
from tiles.fetcher import TileFetchError

if TYPE_CHECKING:
    from domain.models import Region, TileRange
    from tiles.resolver import VersionResolver

logger = logging.getLogger(__name__)


@dataclass
class CanvasResult:
    """Canvas of one version; canvas is None unless every tile resolved."""

    canvas: Image.Image | None
    valid: bool
    failed_tile: tuple[int, int] | None = None
    error: Exception | None = None


async def build_canvas(
    resolver: VersionResolver,
    version: str,
    region: Region,
    tile_range: TileRange,
    zoom: int,
    tile_size: int = TILE_SIZE,
) -> CanvasResult:
    """
    Склеивает область для одной версии.

    Тайлы перебираются по X (внешний цикл), затем по Y. Пересечение тайла с
    областью копируется в холст без смешивания. Версия либо собирается
    целиком, либо отбрасывается на первом недоступном тайле.
    """
    canvas = Image.new('RGBA', region.size)
    region_rect = region.rect

    for tx, ty in tile_range.tiles():
        try:
            tile = await resolver.resolve(version, zoom, tx, ty)
        except TileFetchError as e:
            logger.info('Version %s skipped: tile %d,%d unavailable (%s)', version, tx, ty, e)
            canvas.close()
            return CanvasResult(canvas=None, valid=False, failed_tile=(tx, ty), error=e)

        inter = tile_overlap_rect(tx, ty, region_rect, tile_size)
        if inter is None:
            continue
        x0, y0, x1, y1 = inter
        base_x = tx * tile_size
        base_y = ty * tile_size

        if tile.mode != 'RGBA':
            tile = tile.convert('RGBA')
        piece = tile.crop((x0 - base_x, y0 - base_y, x1 - base_x, y1 - base_y))
        canvas.paste(piece, (x0 - region.start_x, y0 - region.start_y))
        piece.close()

    return CanvasResult(canvas=canvas, valid=True)
