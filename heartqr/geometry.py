"""Module grid planner: pixel geometry of the symbol on the output canvas."""

from dataclasses import dataclass

from heartqr.errors import SizeTooSmall
from heartqr.logging import audit, get_logger, trace

log = get_logger("geometry")

MIN_MODULE_SIZE = 2
MIN_QUIET_ZONE = 4  # QR specification minimum

Rect = tuple[int, int, int, int]  # x, y, w, h


@dataclass(frozen=True)
class GridGeometry:
    """Pixel layout of one render.

    ``final_size == module_size * (n + 2 * quiet_zone) + 2 * outer_pad`` and
    ``offset`` is the canvas position of module (0, 0).
    """

    n: int
    module_size: int
    quiet_zone: int
    offset: int
    outer_pad: int
    final_size: int

    @property
    def draw_size(self) -> int:
        """Side of the QR footprint: data area plus quiet zone."""
        return self.module_size * (self.n + 2 * self.quiet_zone)

    @property
    def quiet_px(self) -> int:
        return self.quiet_zone * self.module_size

    def module_origin(self, row: int, col: int) -> tuple[int, int]:
        """Top-left canvas pixel of a module."""
        return self.offset + col * self.module_size, self.offset + row * self.module_size

    def footprint_rect(self) -> Rect:
        return self.outer_pad, self.outer_pad, self.draw_size, self.draw_size

    def data_rect(self) -> Rect:
        side = self.n * self.module_size
        return self.offset, self.offset, side, side

    def quiet_zone_bands(self) -> list[Rect]:
        """Top, bottom, left and right bands of the quiet-zone ring."""
        x, y, size, _ = self.footprint_rect()
        q = self.quiet_px
        return [
            (x, y, size, q),
            (x, y + size - q, size, q),
            (x, y, q, size),
            (x + size - q, y, q, size),
        ]


@trace
def plan(
    n: int,
    target_size: int,
    quiet_zone: int = 8,
    outer_pad_min: int = 24,
    outer_pad_ratio: float = 0.08,
) -> GridGeometry:
    """Lay out an n x n symbol inside a target square of *target_size* pixels.

    Raises:
        SizeTooSmall: fewer than MIN_MODULE_SIZE pixels per module.
        ValueError: quiet zone below the QR minimum of 4 modules.
    """
    if n <= 0:
        raise ValueError(f"Module count must be positive, got {n}")
    if quiet_zone < MIN_QUIET_ZONE:
        raise ValueError(f"Quiet zone must be at least {MIN_QUIET_ZONE} modules, got {quiet_zone}")

    module_size = target_size // (n + 2 * quiet_zone)
    if module_size < MIN_MODULE_SIZE:
        raise SizeTooSmall(n, target_size, module_size, MIN_MODULE_SIZE)

    draw_size = module_size * (n + 2 * quiet_zone)
    outer_pad = max(outer_pad_min, int(draw_size * outer_pad_ratio))
    geometry = GridGeometry(
        n=n,
        module_size=module_size,
        quiet_zone=quiet_zone,
        offset=outer_pad + quiet_zone * module_size,
        outer_pad=outer_pad,
        final_size=draw_size + 2 * outer_pad,
    )
    audit("grid.planned", logger=log, n=n, target=target_size,
          module_px=module_size, outer_pad=outer_pad, final_px=geometry.final_size)
    return geometry
