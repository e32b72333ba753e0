"""Heart mask decisions: which dark modules are anchored, coloured or dropped."""

from enum import Enum

from heartqr.config import ColorMode, HeartParams, Look, StyleConfig
from heartqr.encoder import ModuleMatrix
from heartqr.heart import in_heart, normalize
from heartqr.regions import ProtectionClass, classify


class ModuleRole(Enum):
    ANCHOR = "anchor"     # finder / protected timing: primary colour, never masked
    HEART = "heart"       # inside the silhouette
    OUTSIDE = "outside"   # outside the silhouette, kept in primary colour
    DROPPED = "dropped"   # outside the silhouette in mask mode: not drawn


def decide_module(
    row: int,
    col: int,
    n: int,
    style: StyleConfig,
    look: Look,
    heart: HeartParams,
) -> ModuleRole:
    """Role of a dark module. Protected cells never reach the heart test."""
    if classify(row, col, n, style.timing_protected) != ProtectionClass.NONE:
        return ModuleRole.ANCHOR
    nx, ny = normalize(row, col, n, look.heart_size_factor)
    if in_heart(nx, ny, heart):
        return ModuleRole.HEART
    if style.color_mode == ColorMode.MASK:
        return ModuleRole.DROPPED
    return ModuleRole.OUTSIDE


def module_roles(
    matrix: ModuleMatrix,
    style: StyleConfig,
    look: Look,
    heart: HeartParams,
) -> dict[tuple[int, int], ModuleRole]:
    """Roles of every dark module, keyed by (row, col)."""
    n = matrix.n
    return {
        (r, c): decide_module(r, c, n, style, look, heart)
        for r in range(n)
        for c in range(n)
        if matrix.is_dark(r, c)
    }


def count_dropped(
    matrix: ModuleMatrix,
    style: StyleConfig | None = None,
    look: Look | None = None,
    heart: HeartParams | None = None,
) -> int:
    """Number of dark modules the heart mask would leave undrawn."""
    roles = module_roles(matrix, style or StyleConfig(), look or Look(), heart or HeartParams())
    return sum(1 for role in roles.values() if role == ModuleRole.DROPPED)
