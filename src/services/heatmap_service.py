"""Heatmap service - orchestrates one heatmap run."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from imaging.composer import build_canvas
from imaging.heatmap import ChangeAccumulator, render_heatmap
from imaging.io import save_png
from infrastructure.http.client import make_http_session
from services.versions import load_versions
from shared.constants import TILE_SIZE
from shared.progress import ConsoleProgress
from tiles.cache import TileCache
from tiles.coverage import resolve_region
from tiles.fetcher import TileFetcher
from tiles.resolver import VersionResolver

if TYPE_CHECKING:
    from collections.abc import Sequence

    from PIL import Image

    from domain.models import HeatmapSettings, Region, TileRange

logger = logging.getLogger(__name__)


@dataclass
class HeatmapResult:
    output_path: str
    region: Region
    tile_range: TileRange
    versions_total: int
    versions_used: int
    versions_skipped: list[str] = field(default_factory=list)
    max_count: int = 0
    fetch_stats: dict[str, int] = field(default_factory=dict)


class HeatmapService:
    """Builds the change heatmap for one region over a version sequence."""

    def __init__(self, settings: HeatmapSettings, tile_size: int = TILE_SIZE) -> None:
        self.settings = settings
        self.tile_size = tile_size
        # Ошибки ввода проверяются до любых сетевых запросов
        mode, text = settings.region_selection
        self.region, self.tile_range = resolve_region(mode, text, tile_size)

    async def run(self) -> HeatmapResult:
        """Load versions, accumulate changes, render and save the heatmap."""
        started = time.monotonic()
        async with make_http_session(self.settings.http_timeout_s) as client:
            versions = await load_versions(self.settings, client)
            fetcher = TileFetcher(
                client,
                TileCache(self.settings.cache_dir),
                base_url=self.settings.site_url,
                timeout_s=self.settings.http_timeout_s,
            )
            accumulator, skipped = await self.accumulate(
                VersionResolver(fetcher), versions
            )

        heatmap = render_heatmap(accumulator.counts)
        self._save(heatmap)

        result = HeatmapResult(
            output_path=self.settings.output_path,
            region=self.region,
            tile_range=self.tile_range,
            versions_total=len(versions),
            versions_used=accumulator.canvases_seen,
            versions_skipped=skipped,
            max_count=accumulator.max_count,
            fetch_stats=fetcher.stats,
        )
        logger.info(
            'Saved %s (max changes: %d, versions used %d/%d, %.1fs)',
            result.output_path,
            result.max_count,
            result.versions_used,
            result.versions_total,
            time.monotonic() - started,
        )
        logger.info('Tile stats: %s', result.fetch_stats)
        return result

    async def accumulate(
        self,
        resolver: VersionResolver,
        versions: Sequence[str],
        accumulator: ChangeAccumulator | None = None,
    ) -> tuple[ChangeAccumulator, list[str]]:
        """
        Feed every version that builds completely into the accumulator.

        Returns:
            (accumulator, skipped versions in input order)

        """
        region = self.region
        if accumulator is None:
            accumulator = ChangeAccumulator(region.width, region.height)
        logger.info(
            'Generating heatmap: %dx%d px (tiles %d,%d to %d,%d), %d versions',
            region.width,
            region.height,
            self.tile_range.min_x,
            self.tile_range.min_y,
            self.tile_range.max_x,
            self.tile_range.max_y,
            len(versions),
        )

        skipped: list[str] = []
        progress = ConsoleProgress(total=len(versions))
        try:
            for version in versions:
                built = await build_canvas(
                    resolver,
                    version,
                    region,
                    self.tile_range,
                    self.settings.zoom,
                    self.tile_size,
                )
                if not built.valid:
                    skipped.append(version)
                    progress.skip(version)
                    continue
                changed = accumulator.observe(built.canvas)
                built.canvas.close()
                logger.debug('Version %s: %d pixels changed', version, changed)
                progress.step(version)
        finally:
            progress.close()
        return accumulator, skipped

    def _save(self, heatmap: Image.Image) -> None:
        logger.info('Normalization done, saving to %s', self.settings.output_path)
        try:
            save_png(heatmap, self.settings.output_path)
        finally:
            heatmap.close()