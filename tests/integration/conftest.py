"""Shared fixtures for integration tests.

These tests run real HeatmapService.run() against the live tile archive.
They are skipped unless WPLACE_INTEGRATION=1 is set. Tiles are cached in
the per-test cache directory only, so every run downloads again.
"""

from __future__ import annotations

import os

import pytest

from domain.models import HeatmapSettings


def pytest_collection_modifyitems(config, items):
    if os.environ.get('WPLACE_INTEGRATION') == '1':
        return
    skip = pytest.mark.skip(reason='set WPLACE_INTEGRATION=1 to run live tests')
    for item in items:
        if 'integration' in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def make_settings(tmp_path):
    """Factory for HeatmapSettings writing into tmp_path."""

    def _make(**overrides) -> HeatmapSettings:
        data = {
            'single_tile': os.environ.get('WPLACE_TEST_TILE', '1818-806'),
            'output_path': str(tmp_path / 'heatmap.png'),
            'cache_dir': str(tmp_path / 'tile_cache'),
            'versions_file': str(tmp_path / 'versions.txt'),
        }
        data.update(overrides)
        return HeatmapSettings.model_validate(data)

    return _make
