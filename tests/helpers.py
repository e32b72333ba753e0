"""Pixel-box helpers shared by the compositor tests."""


def cell_box(geometry, row, col):
    x0, y0 = geometry.module_origin(row, col)
    m = geometry.module_size
    return x0, y0, x0 + m, y0 + m


def finder_block_boxes(geometry, size=9):
    """Pixel boxes of the three protected corner blocks."""
    n, m, off = geometry.n, geometry.module_size, geometry.offset
    side = size * m
    far = off + (n - size) * m
    return [
        (off, off, off + side, off + side),
        (far, off, far + side, off + side),
        (off, far, off + side, far + side),
    ]


def quiet_band_boxes(geometry):
    return [(x, y, x + w, y + h) for x, y, w, h in geometry.quiet_zone_bands()]
