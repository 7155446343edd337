from __future__ import annotations


def tile_overlap_rect(
    tx: int,
    ty: int,
    region_rect: tuple[int, int, int, int],
    tile_px: int,
) -> tuple[int, int, int, int] | None:
    """
    Compute overlap rectangle between tile (tx, ty) and region_rect.

    region_rect is (x0, y0, x1, y1) in absolute pixels, right/bottom exclusive.
    Returns (x0, y0, x1, y1) or None if there is no intersection.
    """
    base_x = tx * tile_px
    base_y = ty * tile_px
    rx0, ry0, rx1, ry1 = region_rect
    x0 = max(base_x, rx0)
    y0 = max(base_y, ry0)
    x1 = min(base_x + tile_px, rx1)
    y1 = min(base_y + tile_px, ry1)
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1
