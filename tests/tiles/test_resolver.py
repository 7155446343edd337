"""Tests for base.diff version resolution."""

from __future__ import annotations

import pytest
from PIL import Image

from tiles.fetcher import TileFetchError
from tiles.resolver import (
    LayerOutcome,
    TileResolveError,
    VersionResolver,
    classify_layers,
    composite_layers,
    split_version,
)


class StubFetcher:
    """Returns preset images per version; missing versions fail."""

    def __init__(self, tiles: dict[str, Image.Image]) -> None:
        self.tiles = tiles
        self.calls: list[tuple[str, int, int, int]] = []

    async def fetch(self, version, zoom, x, y):
        self.calls.append((version, zoom, x, y))
        if version not in self.tiles:
            msg = f'HTTP 404 for {version}'
            raise TileFetchError(msg)
        return self.tiles[version]


RED = Image.new('RGBA', (2, 2), (255, 0, 0, 255))
HALF_BLUE = Image.new('RGBA', (2, 2), (0, 0, 255, 128))
CLEAR = Image.new('RGBA', (2, 2), (0, 0, 0, 0))


class TestHelpers:
    def test_split_version_plain(self):
        assert split_version('20250801') is None

    def test_split_version_compound(self):
        """Diff layer is addressed by the full identifier."""
        assert split_version('20250801.3') == ('20250801', '20250801.3')

    def test_split_version_multiple_dots(self):
        assert split_version('a.b.c') == ('a', 'a.b.c')

    @pytest.mark.parametrize(
        ('base_err', 'diff_err', 'expected'),
        [
            (ValueError(), ValueError(), LayerOutcome.BOTH_FAILED),
            (None, ValueError(), LayerOutcome.BASE_ONLY),
            (ValueError(), None, LayerOutcome.DIFF_ONLY),
            (None, None, LayerOutcome.BOTH_SUCCEEDED),
        ],
    )
    def test_classify_layers(self, base_err, diff_err, expected):
        assert classify_layers(base_err, diff_err) == expected

    def test_composite_transparent_diff_keeps_base(self):
        out = composite_layers(RED, CLEAR)
        assert out.getpixel((0, 0)) == (255, 0, 0, 255)

    def test_composite_source_over(self):
        out = composite_layers(RED, HALF_BLUE)
        r, g, b, a = out.getpixel((1, 1))
        assert a == 255
        assert g == 0
        assert 120 <= r <= 135
        assert 120 <= b <= 135

    def test_composite_size_mismatch(self):
        with pytest.raises(ValueError, match='size mismatch'):
            composite_layers(RED, Image.new('RGBA', (3, 3)))


class TestVersionResolver:
    """Tests for VersionResolver.resolve."""

    @pytest.mark.asyncio
    async def test_plain_version_delegates(self):
        fetcher = StubFetcher({'5': RED})
        img = await VersionResolver(fetcher).resolve('5', 11, 1, 2)
        assert img is RED
        assert fetcher.calls == [('5', 11, 1, 2)]

    @pytest.mark.asyncio
    async def test_plain_version_failure_propagates(self):
        with pytest.raises(TileFetchError):
            await VersionResolver(StubFetcher({})).resolve('5', 11, 1, 2)

    @pytest.mark.asyncio
    async def test_both_layers_composited(self):
        fetcher = StubFetcher({'5': RED, '5.1': CLEAR})
        img = await VersionResolver(fetcher).resolve('5.1', 11, 0, 0)
        assert img.getpixel((0, 0)) == (255, 0, 0, 255)
        assert [c[0] for c in fetcher.calls] == ['5', '5.1']

    @pytest.mark.asyncio
    async def test_base_only(self):
        img = await VersionResolver(StubFetcher({'5': RED})).resolve('5.1', 11, 0, 0)
        assert img is RED

    @pytest.mark.asyncio
    async def test_diff_only_used_verbatim(self):
        img = await VersionResolver(StubFetcher({'5.1': HALF_BLUE})).resolve('5.1', 11, 0, 0)
        assert img is HALF_BLUE

    @pytest.mark.asyncio
    async def test_both_failed(self):
        with pytest.raises(TileResolveError, match='both base and diff') as exc_info:
            await VersionResolver(StubFetcher({})).resolve('5.1', 11, 0, 0)
        assert exc_info.value.base_error is not None
        assert exc_info.value.diff_error is not None
        assert isinstance(exc_info.value, TileFetchError)

    @pytest.mark.asyncio
    async def test_layer_size_mismatch_fails_tile(self):
        fetcher = StubFetcher({'5': RED, '5.1': Image.new('RGBA', (3, 3))})
        with pytest.raises(TileResolveError, match='Cannot merge'):
            await VersionResolver(fetcher).resolve('5.1', 11, 0, 0)
