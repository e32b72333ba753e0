"""Heart QR compositor: the layered mask-and-compose rendering pipeline.

Every style variant is a parameterisation of the same ordered passes over one
canvas, each allowed to overwrite the previous:

    1. background fill
    2. optional global pattern, cleared back out of the QR footprint
    3. dark modules: anchors in the primary colour, the rest through the
       heart test, shaped by the module painter
    3b. optional pattern transfer into light data cells away from the finders
    4. quiet-zone re-assertion
    5. finder re-assertion

Passes 4 and 5 run unconditionally, so finder blocks and the quiet zone come
out the same whatever the earlier passes did.
"""

from dataclasses import dataclass

from PIL import Image, ImageChops, ImageDraw

from heartqr import BACKGROUND, DEFAULT_SIZE, ERROR_LEVEL
from heartqr.budget import DEFAULT_MAX_USE, ErrorBudget, estimate_budget, version_for
from heartqr.config import (
    ColorMode,
    HeartParams,
    Look,
    ModuleStyle,
    Palette,
    PatternKind,
    StyleConfig,
    parse_color,
)
from heartqr.encoder import Encoder, ModuleMatrix, resolve_encoder
from heartqr.errors import EncoderUnavailable, ErrorBudgetExceeded
from heartqr.geometry import GridGeometry, plan
from heartqr.heart import heart_mask
from heartqr.logging import audit, get_logger, trace
from heartqr.masking import ModuleRole, count_dropped, module_roles
from heartqr.regions import (
    FINDER_BAN,
    FINDER_PROTECT,
    is_finder_protected,
    is_timing,
)
from heartqr.styles import get_painter, paint_finder_cell, paint_rounded_square, paint_square, pattern_buffer

log = get_logger("compositor")


@dataclass(frozen=True)
class RenderResult:
    """Read-only summary of a finished render."""

    module_count: int
    module_size: int
    final_size: int
    dropped_modules: int = 0
    budget_used_pct: float = 0.0


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------

def _fill_rect(draw: ImageDraw.ImageDraw, rect: tuple[int, int, int, int], color) -> None:
    x, y, w, h = rect
    if w > 0 and h > 0:
        draw.rectangle([x, y, x + w - 1, y + h - 1], fill=color)


def _paint_dark_modules(
    canvas: Image.Image,
    roles: dict[tuple[int, int], ModuleRole],
    geometry: GridGeometry,
    palette: Palette,
    style: StyleConfig,
    look: Look,
    heart: HeartParams,
) -> None:
    draw = ImageDraw.Draw(canvas)
    m = geometry.module_size
    heart_clip = style.module_style == ModuleStyle.HEART_CLIP
    painter = get_painter(style.module_style)
    dual = style.color_mode == ColorMode.DUAL
    heart_cells = Image.new("L", (geometry.n * m, geometry.n * m), 0) if heart_clip else None
    cells_draw = ImageDraw.Draw(heart_cells) if heart_clip else None

    for (r, c), role in roles.items():
        origin = geometry.module_origin(r, c)
        if role == ModuleRole.ANCHOR:
            finder = is_finder_protected(r, c, geometry.n)
            if heart_clip and finder:
                paint_rounded_square(draw, origin, m, palette.foreground, True, look)
            else:
                painter(draw, origin, m, palette.foreground, finder, look)
        elif role == ModuleRole.OUTSIDE:
            painter(draw, origin, m, palette.foreground, False, look)
        elif role == ModuleRole.HEART:
            if not heart_clip:
                painter(draw, origin, m, palette.accent, False, look)
                continue
            if dual:
                # parts of the cell outside the silhouette stay dark
                paint_square(draw, origin, m, palette.foreground, False, look)
            local = (origin[0] - geometry.offset, origin[1] - geometry.offset)
            paint_square(cells_draw, local, m, 255, False, look)

    if heart_clip:
        silhouette = heart_mask(geometry.n, m, heart, look.heart_size_factor)
        clip = ImageChops.multiply(heart_cells, silhouette)
        x, y, w, h = geometry.data_rect()
        canvas.paste(palette.accent, (x, y, x + w, y + h), clip)


def _transfer_light_cells(
    canvas: Image.Image,
    buffer: Image.Image,
    matrix: ModuleMatrix,
    geometry: GridGeometry,
    style: StyleConfig,
) -> int:
    """Copy the off-screen pattern into light data cells clear of the finder ban."""
    n = matrix.n
    m = geometry.module_size
    copied = 0
    for r in range(n):
        for c in range(n):
            if matrix.is_dark(r, c) or is_finder_protected(r, c, n, FINDER_BAN):
                continue
            if style.timing_protected and is_timing(r, c):
                continue
            x0, y0 = geometry.module_origin(r, c)
            canvas.paste(buffer.crop((x0, y0, x0 + m, y0 + m)), (x0, y0))
            copied += 1
    return copied


def _reassert_finders(
    canvas: Image.Image,
    matrix: ModuleMatrix,
    geometry: GridGeometry,
    palette: Palette,
    look: Look,
) -> None:
    """Reset each finder-protected cell to background, then repaint the dark ones."""
    draw = ImageDraw.Draw(canvas)
    n = matrix.n
    m = geometry.module_size
    for r in range(n):
        for c in range(n):
            if not is_finder_protected(r, c, n, FINDER_PROTECT):
                continue
            origin = geometry.module_origin(r, c)
            paint_square(draw, origin, m, palette.background, True, look)
            if matrix.is_dark(r, c):
                paint_finder_cell(draw, origin, m, palette.foreground, True, look)


def compose(
    matrix: ModuleMatrix,
    geometry: GridGeometry,
    palette: Palette,
    style: StyleConfig,
    look: Look,
    heart: HeartParams,
) -> Image.Image:
    """Run the five passes and return the finished RGB raster."""
    size = geometry.final_size

    # 1 + 2) background, with the pattern kept as an off-screen buffer
    buffer = None
    if style.pattern != PatternKind.NONE:
        buffer = pattern_buffer(style.pattern, size, palette.background, palette.pattern,
                                opacity=look.pattern_opacity, seed=style.noise_seed)
        canvas = buffer.copy()
    else:
        canvas = Image.new("RGB", (size, size), palette.background)
    draw = ImageDraw.Draw(canvas)
    _fill_rect(draw, geometry.footprint_rect(), palette.background)

    # 3) dark modules
    roles = module_roles(matrix, style, look, heart)
    _paint_dark_modules(canvas, roles, geometry, palette, style, look, heart)

    # 3b) faint pattern inside light data cells
    copied = 0
    if buffer is not None and look.pattern_inside_data_light_cells:
        copied = _transfer_light_cells(canvas, buffer, matrix, geometry, style)

    # 4) quiet zone back to pure background
    for band in geometry.quiet_zone_bands():
        _fill_rect(draw, band, palette.background)

    # 5) finders last, independent of everything above
    _reassert_finders(canvas, matrix, geometry, palette, look)

    audit("render.composed", logger=log,
          n=matrix.n, pattern=style.pattern.value, module_style=style.module_style.value,
          color_mode=style.color_mode.value,
          heart=sum(1 for v in roles.values() if v == ModuleRole.HEART),
          dropped=sum(1 for v in roles.values() if v == ModuleRole.DROPPED),
          pattern_cells=copied)
    return canvas


def render_plain(
    matrix: ModuleMatrix,
    geometry: GridGeometry,
    foreground: str | tuple = "#000000",
    look: Look | None = None,
) -> Image.Image:
    """Unmasked reference rendering: full-cell dark modules and standard finders."""
    look = look or Look()
    palette = Palette(foreground=parse_color(foreground), background=parse_color(BACKGROUND))
    canvas = Image.new("RGB", (geometry.final_size, geometry.final_size), palette.background)
    draw = ImageDraw.Draw(canvas)
    for r in range(matrix.n):
        for c in range(matrix.n):
            if matrix.is_dark(r, c):
                paint_square(draw, geometry.module_origin(r, c), geometry.module_size,
                             palette.foreground, False, look)
    _reassert_finders(canvas, matrix, geometry, palette, look)
    return canvas


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def _check_budget(
    matrix: ModuleMatrix,
    style: StyleConfig,
    look: Look,
    heart: HeartParams,
    max_use: float,
    strict: bool,
) -> ErrorBudget | None:
    if not matrix.version:
        try:
            version_for(matrix.n)
        except ValueError:
            log.debug("Skipping error budget for non-standard %dx%d matrix", matrix.n, matrix.n)
            return None

    budget = estimate_budget(matrix, style, look, heart, max_use=max_use)
    if not budget.safe:
        if strict:
            raise ErrorBudgetExceeded(budget)
        log.warning("Heart mask drops %d modules (%.1f%% of error budget); the code may not scan",
                    budget.dropped_modules, budget.budget_used_pct)
    return budget


@trace
def render_matrix(
    matrix: ModuleMatrix,
    target_size: int = DEFAULT_SIZE,
    foreground: str | tuple = "#000000",
    accent: str | tuple = "#E63946",
    style: StyleConfig | None = None,
    *,
    pattern_color: str | tuple = "#000000",
    look: Look | None = None,
    heart: HeartParams | None = None,
    strict_budget: bool = False,
    max_budget_use: float = DEFAULT_MAX_USE,
) -> tuple[Image.Image, RenderResult]:
    """Render an already-encoded module matrix.

    Raises:
        SizeTooSmall: target_size leaves fewer than 2px per module.
        ErrorBudgetExceeded: strict_budget and the mask drops too many modules.
        InputError: an unparseable colour.
    """
    style = style or StyleConfig()
    look = look or Look()
    heart = heart or HeartParams()
    palette = Palette(
        foreground=parse_color(foreground),
        accent=parse_color(accent),
        pattern=parse_color(pattern_color),
        background=parse_color(BACKGROUND),
    )

    geometry = plan(matrix.n, target_size, quiet_zone=look.quiet_zone,
                    outer_pad_min=look.outer_pad_min, outer_pad_ratio=look.outer_pad_ratio)
    budget = _check_budget(matrix, style, look, heart, max_budget_use, strict_budget)
    dropped = budget.dropped_modules if budget else count_dropped(matrix, style, look, heart)

    image = compose(matrix, geometry, palette, style, look, heart)
    result = RenderResult(
        module_count=matrix.n,
        module_size=geometry.module_size,
        final_size=geometry.final_size,
        dropped_modules=dropped,
        budget_used_pct=budget.budget_used_pct if budget else 0.0,
    )
    audit("render.done", logger=log, modules=result.module_count,
          module_px=result.module_size, final_px=result.final_size,
          dropped=dropped)
    return image, result


@trace
def render_heart_qr(
    text: str,
    target_size: int = DEFAULT_SIZE,
    foreground: str | tuple = "#000000",
    accent: str | tuple = "#E63946",
    style: StyleConfig | None = None,
    *,
    encoder: Encoder | None = None,
    **options,
) -> tuple[Image.Image, RenderResult]:
    """Encode *text* at level H and render it as a heart-styled QR code.

    Keyword options are passed through to :func:`render_matrix`.

    Returns:
        (RGB image of side ``final_size``, RenderResult)

    Raises:
        EncoderUnavailable: no usable encoder, or it returned something other
            than a ModuleMatrix.
    """
    encode = resolve_encoder(encoder)
    matrix = encode(text, ERROR_LEVEL)
    if not isinstance(matrix, ModuleMatrix):
        raise EncoderUnavailable(f"Encoder returned {type(matrix).__name__}, not a ModuleMatrix")
    return render_matrix(matrix, target_size, foreground, accent, style, **options)
