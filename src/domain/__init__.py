"""Domain layer - run settings, region models and profiles."""
from domain.models import (
    HeatmapSettings,
    Region,
    RegionMode,
    RegionParseError,
    TileRange,
)
from domain.profiles import load_profile, save_profile

__all__ = [
    'HeatmapSettings',
    'Region',
    'RegionMode',
    'RegionParseError',
    'TileRange',
    'load_profile',
    'save_profile',
]
