from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, field_validator, model_validator

from shared.constants import (
    DEFAULT_CACHE_DIR,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_VERSIONS_FILE,
    DEFAULT_ZOOM,
    HTTP_TIMEOUT_DEFAULT,
    SITE_BASE_URL,
)


class RegionParseError(ValueError):
    """Malformed or ambiguous region input."""


class RegionMode(str, Enum):
    FULLSIZE = 'fullsize'
    TILE_RANGE = 'tiles'
    SINGLE_TILE = 'tile'


@dataclass(frozen=True)
class Region:
    """Прямоугольник в абсолютных пиксельных координатах."""

    start_x: int
    start_y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f'Region must have positive size, got {self.width}x{self.height}'
            raise ValueError(msg)

    @property
    def rect(self) -> tuple[int, int, int, int]:
        """(x0, y0, x1, y1), правая и нижняя границы не включаются."""
        return (
            self.start_x,
            self.start_y,
            self.start_x + self.width,
            self.start_y + self.height,
        )

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class TileRange:
    """Inclusive range of tile indices."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def __post_init__(self) -> None:
        if self.max_x < self.min_x or self.max_y < self.min_y:
            msg = f'Empty tile range {self.min_x},{self.min_y}..{self.max_x},{self.max_y}'
            raise ValueError(msg)

    @property
    def count(self) -> int:
        return (self.max_x - self.min_x + 1) * (self.max_y - self.min_y + 1)

    def tiles(self) -> Iterator[tuple[int, int]]:
        """Yield (x, y), X in the outer loop."""
        for tx in range(self.min_x, self.max_x + 1):
            for ty in range(self.min_y, self.max_y + 1):
                yield tx, ty


class HeatmapSettings(BaseModel):
    """Параметры одного запуска построения тепловой карты."""

    model_config = {
        'extra': 'ignore',
    }

    zoom: int = DEFAULT_ZOOM

    # Ровно одна из трёх кодировок области
    fullsize: str | None = None
    tile_range: str | None = None
    single_tile: str | None = None

    # Источник списка версий
    versions_file: str = DEFAULT_VERSIONS_FILE
    auto_fetch: bool = True
    site_url: str = SITE_BASE_URL

    output_path: str = DEFAULT_OUTPUT_PATH
    cache_dir: str = DEFAULT_CACHE_DIR
    http_timeout_s: float = HTTP_TIMEOUT_DEFAULT

    @field_validator('zoom')
    @classmethod
    def validate_zoom(cls, v: int) -> int:
        v = int(v)
        if v < 0:
            msg = 'zoom must not be negative'
            raise ValueError(msg)
        return v

    @field_validator('fullsize', 'tile_range', 'single_tile', mode='before')
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator('http_timeout_s')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        v = float(v)
        if v <= 0:
            msg = 'http_timeout_s must be positive'
            raise ValueError(msg)
        return v

    @field_validator('site_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @model_validator(mode='after')
    def check_single_region(self) -> HeatmapSettings:
        if len(self._region_fields()) > 1:
            msg = 'only one of fullsize, tile_range, single_tile may be set'
            raise ValueError(msg)
        return self

    def _region_fields(self) -> list[tuple[RegionMode, str]]:
        candidates = (
            (RegionMode.FULLSIZE, self.fullsize),
            (RegionMode.TILE_RANGE, self.tile_range),
            (RegionMode.SINGLE_TILE, self.single_tile),
        )
        return [(mode, text) for mode, text in candidates if text]

    @property
    def region_selection(self) -> tuple[RegionMode, str]:
        selected = self._region_fields()
        if not selected:
            msg = 'No region selected: set one of fullsize, tile_range, single_tile'
            raise RegionParseError(msg)
        if len(selected) > 1:
            names = ', '.join(mode.value for mode, _ in selected)
            msg = f'Ambiguous region selection: {names}'
            raise RegionParseError(msg)
        return selected[0]
