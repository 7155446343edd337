"""Per-pixel change accumulation across versions and heatmap rendering."""

from __future__ import annotations

import numpy as np
from PIL import Image

from services.color_utils import ColorStops, gradient_rgb
from shared.constants import GRADIENT_STOPS, ZERO_CHANGE_COLOR


def canvas_to_array(canvas: Image.Image) -> np.ndarray:
    """RGBA pixels as an owned (height, width, 4) uint8 array."""
    rgba = canvas if canvas.mode == 'RGBA' else canvas.convert('RGBA')
    return np.array(rgba, dtype=np.uint8)


class ChangeAccumulator:
    """Counts how many times each pixel differs between consecutive canvases.

    The first observed canvas only becomes the reference. Each later canvas is
    compared on all four channels against the previous one and then replaces it.
    Comparison is on straight (non-premultiplied) RGBA bytes, so fully
    transparent pixels with different RGB values count as a change.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.counts = np.zeros((height, width), dtype=np.uint32)
        self.canvases_seen = 0
        self._previous: np.ndarray | None = None

    @property
    def has_previous(self) -> bool:
        return self._previous is not None

    @property
    def max_count(self) -> int:
        return int(self.counts.max()) if self.counts.size else 0

    def observe(self, canvas: Image.Image) -> int:
        """Feed the next canvas; returns the number of changed pixels."""
        if canvas.size != (self.width, self.height):
            msg = f'Canvas size {canvas.size} does not match region {(self.width, self.height)}'
            raise ValueError(msg)
        current = canvas_to_array(canvas)
        self.canvases_seen += 1
        if self._previous is None:
            self._previous = current
            return 0
        changed = np.any(current != self._previous, axis=2)
        self.counts += changed.astype(np.uint32)
        self._previous = current
        return int(np.count_nonzero(changed))


def render_heatmap(counts: np.ndarray, stops: ColorStops = GRADIENT_STOPS) -> Image.Image:
    """
    Map change counts to colours relative to the maximum count.

    Pixels with zero changes are opaque black; others go through the gradient
    at count / max_count. Alpha is always 255.
    """
    height, width = counts.shape
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[...] = ZERO_CHANGE_COLOR
    max_count = int(counts.max()) if counts.size else 0
    if max_count > 0:
        ratio = counts.astype(np.float64) / max_count
        changed = counts > 0
        out[changed, :3] = gradient_rgb(ratio[changed], stops)
    return Image.fromarray(out)
