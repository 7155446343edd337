"""Gradient helpers for the change heatmap."""

from __future__ import annotations

import math

import numpy as np

from shared.constants import GRADIENT_STOPS

ColorStops = tuple[tuple[float, tuple[int, int, int]], ...]


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + (b - a) * t


def round_channel(v: float) -> int:
    """Round half up and clamp to [0, 255]."""
    return max(0, min(255, math.floor(v + 0.5)))


def gradient_color(t: float, stops: ColorStops = GRADIENT_STOPS) -> tuple[int, int, int]:
    """
    Colour of the piecewise-linear gradient at t.

    Segments are half-open [t0, t1) except the last one, which includes its
    upper bound. t outside the stop range is clamped.

    Args:
        t: Position, normally in [0, 1]
        stops: (position, (R, G, B)) pairs sorted by position

    Returns:
        RGB tuple

    """
    if t <= stops[0][0]:
        return stops[0][1]
    if t >= stops[-1][0]:
        return stops[-1][1]
    for j in range(1, len(stops)):
        t0, c0 = stops[j - 1]
        t1, c1 = stops[j]
        if t < t1:
            local = 0.0 if t1 == t0 else (t - t0) / (t1 - t0)
            return (
                round_channel(lerp(c0[0], c1[0], local)),
                round_channel(lerp(c0[1], c1[1], local)),
                round_channel(lerp(c0[2], c1[2], local)),
            )
    return stops[-1][1]


def gradient_rgb(ratio: np.ndarray, stops: ColorStops = GRADIENT_STOPS) -> np.ndarray:
    """Vectorised gradient_color: array of t -> uint8 array with a trailing RGB axis."""
    xp = np.array([s[0] for s in stops], dtype=np.float64)
    out = np.empty((*ratio.shape, 3), dtype=np.uint8)
    for ch in range(3):
        fp = np.array([s[1][ch] for s in stops], dtype=np.float64)
        values = np.interp(ratio, xp, fp)
        out[..., ch] = np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)
    return out
