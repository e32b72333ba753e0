"""Heart silhouette membership on normalised symbol coordinates."""

import numpy as np
from PIL import Image

from heartqr.config import HeartParams

DEFAULT_HEART = HeartParams()


def heart_value(x: float, y: float) -> float:
    """Implicit heart curve ``(x² + y² - 1)³ - x²y³``; <= 0 inside.

    Works equally on floats and numpy arrays.
    """
    a = x * x + y * y - 1
    return a * a * a - x * x * y * y * y


def in_heart(nx: float, ny: float, params: HeartParams = DEFAULT_HEART) -> bool:
    """True when the normalised point lies inside the (expanded) heart."""
    x = nx / params.sx
    y = (ny + params.y_shift) / params.sy
    return bool(heart_value(x, y) <= params.expand_threshold)


def normalize(row: int, col: int, n: int, size_factor: float) -> tuple[float, float]:
    """Map a grid cell to heart space: centred on (n-1)/2, y up, scaled by size_factor."""
    center = (n - 1) / 2
    if center == 0:
        return 0.0, 0.0
    nx = ((col - center) / center) * size_factor
    ny = (-(row - center) / center) * size_factor
    return nx, ny


def heart_mask(
    n: int,
    module_size: int,
    params: HeartParams = DEFAULT_HEART,
    size_factor: float = 0.92,
) -> Image.Image:
    """Rasterise the silhouette over the data area as an 'L' mask (255 = inside).

    Pixel centres are mapped to fractional module coordinates so the curve
    lines up with the per-module ``in_heart`` test.
    """
    side = n * module_size
    center = (n - 1) / 2
    coords = (np.arange(side, dtype=np.float64) + 0.5) / module_size - 0.5
    if center == 0:
        inside = np.ones((side, side), dtype=bool)
    else:
        nx = ((coords - center) / center) * size_factor
        ny = (-(coords - center) / center) * size_factor
        x = nx[np.newaxis, :] / params.sx
        y = (ny[:, np.newaxis] + params.y_shift) / params.sy
        inside = heart_value(x, y) <= params.expand_threshold
    return Image.fromarray(np.where(inside, 255, 0).astype(np.uint8))
