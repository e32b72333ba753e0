"""Error-correction budget: how many dropped modules the symbol can absorb."""

from dataclasses import dataclass

from qrcode.base import rs_blocks

from heartqr import ERROR_LEVEL, MAX_BUDGET_USE
from heartqr.config import HeartParams, Look, StyleConfig
from heartqr.encoder import ModuleMatrix, qrcode_error_level
from heartqr.logging import audit, get_logger, trace
from heartqr.masking import count_dropped

log = get_logger("budget")

DEFAULT_MAX_USE = MAX_BUDGET_USE


@dataclass(frozen=True)
class ErrorBudget:
    """Dropped-module estimate against Reed-Solomon correction capacity."""

    version: int
    ecc: str
    total_modules: int
    fixed_modules: int
    data_modules: int
    correctable_codewords: int
    correctable_modules: int
    dropped_modules: int = 0
    budget_used_pct: float = 0.0
    safe: bool = True

    def summary(self) -> str:
        grid = int(self.total_modules ** 0.5)
        return (
            f"Error budget (V{self.version}-{self.ecc}):\n"
            f"  Grid: {grid}x{grid} = {self.total_modules} modules\n"
            f"  Fixed (finder/timing/format/etc): ~{self.fixed_modules}\n"
            f"  Data+ECC: ~{self.data_modules} modules\n"
            f"  ECC can correct: {self.correctable_codewords} codewords "
            f"= ~{self.correctable_modules} modules\n"
            f"  Heart mask drops: {self.dropped_modules} dark modules "
            f"({self.budget_used_pct:.1f}% of budget)\n"
            f"  Status: {'SAFE' if self.safe else 'OVER BUDGET'}"
        )


def version_for(n: int) -> int:
    """QR version from the module count (n = 4 * version + 17)."""
    version, rem = divmod(n - 17, 4)
    if rem or not 1 <= version <= 40:
        raise ValueError(f"{n} is not a valid QR module count")
    return version


def _fixed_module_estimate(version: int) -> int:
    size = version * 4 + 17
    # finders + separators + format, timing lines, dark module
    fixed = 3 * 64 + (size - 16) * 2 + 31
    if version >= 2:
        per_side = version // 7 + 2
        fixed += 25 * (per_side * per_side - 3)
    if version >= 7:
        fixed += 36  # two 6x3 version-information blocks
    return fixed


@trace
def compute_error_budget(
    version: int,
    dropped_modules: int = 0,
    ecc: str = ERROR_LEVEL,
    max_use: float = DEFAULT_MAX_USE,
) -> ErrorBudget:
    """Compare dropped data modules with what the RS blocks can correct.

    Reed-Solomon corrects up to ``(total - data) // 2`` codewords per block;
    the module figure assumes eight modules per codeword, which is the
    best case for spatially clustered losses.
    """
    size = version * 4 + 17
    total_modules = size * size
    blocks = rs_blocks(version, qrcode_error_level(ecc))
    correctable_cw = sum((b.total_count - b.data_count) // 2 for b in blocks)
    correctable_modules = correctable_cw * 8
    fixed = _fixed_module_estimate(version)

    used = dropped_modules / correctable_modules if correctable_modules > 0 else 1.0
    budget = ErrorBudget(
        version=version,
        ecc=ecc.upper(),
        total_modules=total_modules,
        fixed_modules=fixed,
        data_modules=total_modules - fixed,
        correctable_codewords=correctable_cw,
        correctable_modules=correctable_modules,
        dropped_modules=dropped_modules,
        budget_used_pct=used * 100,
        safe=used < max_use,
    )
    audit("budget.estimated", logger=log, version=version, ecc=ecc.upper(),
          correctable=correctable_modules, dropped=dropped_modules,
          budget_pct=f"{used:.1%}", safe=budget.safe)
    return budget


def estimate_budget(
    matrix: ModuleMatrix,
    style: StyleConfig | None = None,
    look: Look | None = None,
    heart: HeartParams | None = None,
    max_use: float = DEFAULT_MAX_USE,
) -> ErrorBudget:
    """Budget for rendering *matrix* with the given style and heart shape.

    Raises ValueError when the matrix side is not a QR version size.
    """
    version = matrix.version or version_for(matrix.n)
    dropped = count_dropped(matrix, style, look, heart)
    return compute_error_budget(version, dropped, ERROR_LEVEL, max_use=max_use)
