"""Imaging package - canvas assembly, change heatmap and output."""

from imaging.composer import CanvasResult, build_canvas
from imaging.heatmap import ChangeAccumulator, render_heatmap
from imaging.io import save_png

__all__ = [
    'CanvasResult',
    'ChangeAccumulator',
    'build_canvas',
    'render_heatmap',
    'save_png',
]
