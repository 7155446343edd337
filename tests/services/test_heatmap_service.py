"""Tests for HeatmapService."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from PIL import Image

from domain.models import HeatmapSettings, RegionParseError
from imaging.heatmap import ChangeAccumulator
from services.heatmap_service import HeatmapService
from tiles.fetcher import TileFetchError

SITE = 'https://example.test'
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


class StubResolver:
    """Per-version solid tiles; versions listed in failing raise."""

    def __init__(self, colors: dict[str, tuple], failing=()) -> None:
        self.colors = colors
        self.failing = set(failing)

    async def resolve(self, version, zoom, x, y):
        if (version, x, y) in self.failing:
            msg = f'HTTP 404 for {version}'
            raise TileFetchError(msg)
        return Image.new('RGBA', (2, 2), self.colors[version])


@pytest.fixture
def settings(tmp_path):
    return HeatmapSettings(
        tile_range='0-0_1-0',
        auto_fetch=False,
        site_url=SITE,
        output_path=str(tmp_path / 'out' / 'heatmap.png'),
        cache_dir=str(tmp_path / 'cache'),
    )


class TestHeatmapService:
    """Tests for HeatmapService class."""

    def test_region_resolved_on_init(self, settings):
        service = HeatmapService(settings, tile_size=2)
        assert service.region.size == (4, 2)
        assert service.tile_range.count == 2

    def test_missing_region_rejected(self, tmp_path):
        with pytest.raises(RegionParseError):
            HeatmapService(HeatmapSettings(auto_fetch=False))

    def test_bad_region_rejected(self):
        with pytest.raises(RegionParseError):
            HeatmapService(HeatmapSettings(single_tile='1-2-3'))

    @pytest.mark.asyncio
    async def test_accumulate_skips_incomplete_versions(self, settings):
        """A version with a missing tile neither counts nor becomes the reference."""
        service = HeatmapService(settings, tile_size=2)
        resolver = StubResolver(
            {'1': WHITE, '2': BLACK, '3': WHITE},
            failing={('2', 1, 0)},
        )
        acc, skipped = await service.accumulate(resolver, ['1', '2', '3'])
        assert skipped == ['2']
        assert acc.canvases_seen == 2
        assert acc.max_count == 0

    @pytest.mark.asyncio
    async def test_accumulate_counts_changes(self, settings):
        service = HeatmapService(settings, tile_size=2)
        resolver = StubResolver({'1': WHITE, '2': BLACK, '3': WHITE})
        acc, skipped = await service.accumulate(resolver, ['1', '2', '3'])
        assert skipped == []
        assert acc.max_count == 2

    @pytest.mark.asyncio
    async def test_accumulate_continues_existing(self, settings):
        service = HeatmapService(settings, tile_size=2)
        acc = ChangeAccumulator(4, 2)
        acc.observe(Image.new('RGBA', (4, 2), BLACK))
        acc, _ = await service.accumulate(StubResolver({'1': WHITE}), ['1'], acc)
        assert acc.max_count == 1

    @pytest.mark.asyncio
    async def test_run_end_to_end(self, tmp_path, fake_session, png_bytes):
        """white, white, black at one pixel gives a single red pixel."""
        versions = tmp_path / 'versions.txt'
        versions.write_text('1\n2\n3.1\n', encoding='utf-8')
        out = tmp_path / 'heatmap.png'
        settings = HeatmapSettings(
            single_tile='0-0',
            auto_fetch=False,
            versions_file=str(versions),
            site_url=SITE,
            output_path=str(out),
            cache_dir=str(tmp_path / 'cache'),
        )

        changed = Image.new('RGBA', (2, 2), (0, 0, 0, 0))
        changed.putpixel((0, 0), BLACK)
        buf_path = tmp_path / 'diff.png'
        changed.save(buf_path, format='PNG')

        base = f'{SITE}/tiles'
        routes = {
            f'{base}/v1/11/0/0.png': (200, png_bytes(WHITE, (2, 2))),
            f'{base}/v2/11/0/0.png': (200, png_bytes(WHITE, (2, 2))),
            f'{base}/v3/11/0/0.png': (200, png_bytes(WHITE, (2, 2))),
            f'{base}/v3.1/11/0/0.png': (200, buf_path.read_bytes()),
        }
        session = fake_session(routes)

        with patch('services.heatmap_service.make_http_session', return_value=session):
            result = await HeatmapService(settings, tile_size=2).run()

        assert result.versions_total == 3
        assert result.versions_used == 3
        assert result.versions_skipped == []
        assert result.max_count == 1
        assert result.fetch_stats['downloads'] == 4
        with Image.open(out) as img:
            rgba = img.convert('RGBA')
            assert rgba.getpixel((0, 0)) == (255, 0, 0, 255)
            assert rgba.getpixel((1, 1)) == BLACK
        assert (tmp_path / 'cache' / 'v3.1_11_0_0.png').is_file()

    @pytest.mark.asyncio
    async def test_run_with_every_version_skipped(self, tmp_path, fake_session):
        versions = tmp_path / 'versions.txt'
        versions.write_text('1\n2\n', encoding='utf-8')
        settings = HeatmapSettings(
            single_tile='0-0',
            auto_fetch=False,
            versions_file=str(versions),
            output_path=str(tmp_path / 'h.png'),
            cache_dir=str(tmp_path / 'cache'),
        )
        with patch('services.heatmap_service.make_http_session', return_value=fake_session({})):
            result = await HeatmapService(settings, tile_size=2).run()
        assert result.versions_skipped == ['1', '2']
        assert result.max_count == 0
        with Image.open(tmp_path / 'h.png') as img:
            assert set(img.convert('RGBA').getdata()) == {BLACK}
