"""
Сборка тайла версии из двух слоёв.

Версия вида 'base.diff' состоит из полного снимка base и разностного
слоя, который накладывается поверх (source-over). Если один из слоёв
недоступен, используется второй как есть.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from PIL import Image

from shared.constants import VERSION_LAYER_SEPARATOR
from tiles.fetcher import TileFetchError

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)


class TileSource(Protocol):
    def fetch(self, version: str, zoom: int, x: int, y: int) -> Awaitable[Image.Image]: ...


class TileResolveError(TileFetchError):
    """Neither layer of a compound version could be obtained."""

    def __init__(
        self,
        msg: str,
        *,
        base_error: Exception | None = None,
        diff_error: Exception | None = None,
    ) -> None:
        super().__init__(msg)
        self.base_error = base_error
        self.diff_error = diff_error


class LayerOutcome(str, Enum):
    BOTH_FAILED = 'both_failed'
    BASE_ONLY = 'base_only'
    DIFF_ONLY = 'diff_only'
    BOTH_SUCCEEDED = 'both_succeeded'


def classify_layers(
    base_error: Exception | None,
    diff_error: Exception | None,
) -> LayerOutcome:
    if base_error is not None and diff_error is not None:
        return LayerOutcome.BOTH_FAILED
    if diff_error is not None:
        return LayerOutcome.BASE_ONLY
    if base_error is not None:
        return LayerOutcome.DIFF_ONLY
    return LayerOutcome.BOTH_SUCCEEDED


def split_version(version: str) -> tuple[str, str] | None:
    """(base, diff) для составной версии или None для простой."""
    if VERSION_LAYER_SEPARATOR not in version:
        return None
    return version.split(VERSION_LAYER_SEPARATOR, 1)[0], version


def composite_layers(base: Image.Image, diff: Image.Image) -> Image.Image:
    """New image: diff alpha-composited over base, pixel for pixel."""
    if base.size != diff.size:
        msg = f'Layer size mismatch: base {base.size}, diff {diff.size}'
        raise ValueError(msg)
    base_rgba = base if base.mode == 'RGBA' else base.convert('RGBA')
    diff_rgba = diff if diff.mode == 'RGBA' else diff.convert('RGBA')
    return Image.alpha_composite(base_rgba, diff_rgba)


class VersionResolver:
    def __init__(self, fetcher: TileSource) -> None:
        self.fetcher = fetcher

    async def _try_fetch(
        self, version: str, zoom: int, x: int, y: int
    ) -> tuple[Image.Image | None, TileFetchError | None]:
        try:
            return await self.fetcher.fetch(version, zoom, x, y), None
        except TileFetchError as e:
            return None, e

    async def resolve(self, version: str, zoom: int, x: int, y: int) -> Image.Image:
        layers = split_version(version)
        if layers is None:
            return await self.fetcher.fetch(version, zoom, x, y)

        base_version, diff_version = layers
        base_img, base_error = await self._try_fetch(base_version, zoom, x, y)
        diff_img, diff_error = await self._try_fetch(diff_version, zoom, x, y)
        outcome = classify_layers(base_error, diff_error)

        if outcome == LayerOutcome.BOTH_FAILED:
            msg = (
                f'Failed to download both base and diff for {version} '
                f'(base: {base_error}; diff: {diff_error})'
            )
            raise TileResolveError(
                msg, base_error=base_error, diff_error=diff_error
            ) from diff_error
        if outcome == LayerOutcome.BASE_ONLY:
            logger.debug('Diff layer unavailable for %s, using base: %s', version, diff_error)
            return base_img
        if outcome == LayerOutcome.DIFF_ONLY:
            # Без базового слоя diff используется как самостоятельный тайл
            logger.debug('Base layer unavailable for %s, using diff: %s', version, base_error)
            return diff_img

        try:
            return composite_layers(base_img, diff_img)
        except ValueError as e:
            msg = f'Cannot merge layers for {version} at {zoom}/{x}/{y}: {e}'
            raise TileResolveError(msg) from e
