"""Decorative fill styles: per-module painters and background pattern layers.

Module painters share one signature,
``paint(draw, origin, module_size, color, is_finder, look)``, and only decide
how an accepted module looks. Whether a module is drawn at all is up to the
compositor.

Pattern renderers work on an arbitrary clip rectangle, ignore the module grid,
and return a fresh RGBA layer instead of drawing into a shared canvas.
"""

import numpy as np
from PIL import Image, ImageDraw

from heartqr.config import Look, ModuleStyle, PatternKind
from heartqr.logging import audit, get_logger, trace

log = get_logger("styles")

DEFAULT_LOOK = Look()

DOT_STEP = 14
DOT_RADIUS = 1.6
STRIPE_STEP = 18
STRIPE_WIDTH = 2
GRID_STEP = 18
GRID_WIDTH = 2  # 1.5px rounded up; Pillow strokes are whole pixels


# ---------------------------------------------------------------------------
# Module painters
# ---------------------------------------------------------------------------

def _inset_box(origin: tuple[int, int], module_size: int, scale: float) -> tuple[list[int], int]:
    """Centred square of side ``module_size * scale`` inside a module cell.

    Returns the inclusive Pillow box and the painted side length.
    """
    side = max(1, min(module_size, round(module_size * scale)))
    pad = (module_size - side) // 2
    x0 = origin[0] + pad
    y0 = origin[1] + pad
    return [x0, y0, x0 + side - 1, y0 + side - 1], side


def _rounded(draw: ImageDraw.ImageDraw, box: list[int], side: int, roundness: float, color) -> None:
    radius = min(side // 2, int(side * roundness))
    if radius < 1:
        draw.rectangle(box, fill=color)
    else:
        draw.rounded_rectangle(box, radius=radius, fill=color)


def paint_rounded_square(draw, origin, module_size, color, is_finder=False, look=DEFAULT_LOOK):
    """Rounded rectangle sized by ``dot_scale``; finder cells get sharper corners."""
    box, side = _inset_box(origin, module_size, look.dot_scale)
    roundness = min(look.finder_roundness_cap, look.roundness) if is_finder else look.roundness
    _rounded(draw, box, side, roundness, color)


def paint_dot(draw, origin, module_size, color, is_finder=False, look=DEFAULT_LOOK):
    """Centred circle; finder cells use the larger finder ratio to aid detection."""
    scale = look.finder_dot_scale if is_finder else look.dot_scale
    box, _ = _inset_box(origin, module_size, scale)
    draw.ellipse(box, fill=color)


def paint_square(draw, origin, module_size, color, is_finder=False, look=DEFAULT_LOOK):
    """Full-cell square, the base shape for heart-clip compositing."""
    x0, y0 = origin
    draw.rectangle([x0, y0, x0 + module_size - 1, y0 + module_size - 1], fill=color)


def paint_finder_cell(draw, origin, module_size, color, is_finder=True, look=DEFAULT_LOOK):
    """Finder re-assertion shape: slightly larger than data modules, near-square corners."""
    box, side = _inset_box(origin, module_size, look.finder_dot_scale)
    _rounded(draw, box, side, look.finder_corner_radius, color)


MODULE_PAINTERS = {
    ModuleStyle.FILLED_SQUARE: paint_rounded_square,
    ModuleStyle.ROUNDED_DOT: paint_dot,
    ModuleStyle.HEART_CLIP: paint_square,
}


def get_painter(style: ModuleStyle):
    return MODULE_PAINTERS[style]


# ---------------------------------------------------------------------------
# Background patterns
# ---------------------------------------------------------------------------

def _draw_dots(draw: ImageDraw.ImageDraw, w: int, h: int, fill) -> None:
    half = DOT_STEP / 2
    for yy in range(0, h, DOT_STEP):
        for xx in range(0, w, DOT_STEP):
            cx, cy = xx + half, yy + half
            draw.ellipse([cx - DOT_RADIUS, cy - DOT_RADIUS, cx + DOT_RADIUS, cy + DOT_RADIUS], fill=fill)


def _draw_stripes(draw: ImageDraw.ImageDraw, w: int, h: int, fill) -> None:
    # 45° diagonals, wide enough to cover the whole clip
    for i in range(-h, w + STRIPE_STEP, STRIPE_STEP):
        draw.line([(i, 0), (i + h, h)], fill=fill, width=STRIPE_WIDTH)


def _draw_grid(draw: ImageDraw.ImageDraw, w: int, h: int, fill) -> None:
    for xx in range(0, w + 1, GRID_STEP):
        draw.line([(xx, 0), (xx, h)], fill=fill, width=GRID_WIDTH)
    for yy in range(0, h + 1, GRID_STEP):
        draw.line([(0, yy), (w, yy)], fill=fill, width=GRID_WIDTH)


def _noise_layer(w: int, h: int, color, alpha: int, seed: int) -> Image.Image:
    """Paper-like speckle: the pattern colour at a random per-pixel alpha."""
    rng = np.random.default_rng(seed)
    arr = np.zeros((h, w, 4), dtype=np.uint8)
    arr[..., 0] = color[0]
    arr[..., 1] = color[1]
    arr[..., 2] = color[2]
    arr[..., 3] = rng.integers(0, alpha + 1, size=(h, w), dtype=np.uint8)
    return Image.fromarray(arr)


_PATTERN_DRAWERS = {
    PatternKind.DOTS: _draw_dots,
    PatternKind.STRIPES: _draw_stripes,
    PatternKind.GRID: _draw_grid,
}


@trace
def render_pattern(
    kind: PatternKind,
    size: int,
    clip: tuple[int, int, int, int],
    color: tuple[int, int, int],
    opacity: float = 0.12,
    seed: int = 0,
) -> Image.Image:
    """Render a background pattern as a transparent RGBA layer.

    Args:
        kind: Pattern to draw; ``PatternKind.NONE`` yields an empty layer.
        size: Side of the square layer in pixels.
        clip: (x, y, w, h) region the pattern is confined to.
        color: RGB pattern colour.
        opacity: Alpha of the pattern strokes (0-1).
        seed: Seed for the noise pattern, so renders are reproducible.

    Returns:
        New RGBA image of ``size x size``; transparent outside *clip*.
    """
    layer = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    x, y, w, h = clip
    w = max(0, min(w, size - x))
    h = max(0, min(h, size - y))
    if kind == PatternKind.NONE or w == 0 or h == 0:
        return layer

    alpha = max(0, min(255, round(255 * opacity)))
    if kind == PatternKind.NOISE:
        tile = _noise_layer(w, h, color, alpha, seed)
    else:
        tile = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        _PATTERN_DRAWERS[kind](ImageDraw.Draw(tile), w, h, (*color, alpha))

    layer.paste(tile, (x, y))
    audit("pattern.rendered", logger=log, kind=kind.value, clip=f"{w}x{h}@{x},{y}", alpha=alpha)
    return layer


def pattern_buffer(
    kind: PatternKind,
    size: int,
    background: tuple[int, int, int],
    color: tuple[int, int, int],
    opacity: float = 0.12,
    seed: int = 0,
) -> Image.Image:
    """Off-screen RGB buffer: the pattern composited over a plain background."""
    base = Image.new("RGBA", (size, size), (*background, 255))
    layer = render_pattern(kind, size, (0, 0, size, size), color, opacity=opacity, seed=seed)
    return Image.alpha_composite(base, layer).convert("RGB")
