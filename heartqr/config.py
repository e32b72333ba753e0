"""Render configuration: style enums, heart shape knobs and look tuning."""

from dataclasses import dataclass
from enum import Enum

from PIL import ImageColor

from heartqr.errors import InputError


class PatternKind(Enum):
    NONE = "none"
    DOTS = "dots"
    STRIPES = "stripes"
    GRID = "grid"
    NOISE = "noise"


class ModuleStyle(Enum):
    FILLED_SQUARE = "filled-square"   # rounded rectangle by dot_scale / roundness
    ROUNDED_DOT = "rounded-dot"       # centred circle
    HEART_CLIP = "heart-clip"         # full cell, clipped to the heart silhouette


class ColorMode(Enum):
    DUAL = "dual"    # heart colour inside the silhouette, primary colour outside
    MASK = "mask"    # draw data modules only inside the silhouette


@dataclass(frozen=True)
class HeartParams:
    """Shape and leniency of the heart silhouette.

    ``sy > sx`` stretches the lower point, ``y_shift`` moves the point below
    centre, and a larger ``expand_threshold`` keeps more material.
    """

    sx: float = 0.95
    sy: float = 1.12
    y_shift: float = 0.10
    expand_threshold: float = 0.06


@dataclass(frozen=True)
class Look:
    """Tuning constants for the rendered look."""

    dot_scale: float = 0.82          # 0.72-0.90, smaller = more visible gaps
    roundness: float = 0.40          # 0-0.5 of the painted side
    finder_roundness_cap: float = 0.18
    finder_dot_scale_boost: float = 0.08
    finder_dot_scale_max: float = 0.92
    finder_corner_radius: float = 0.12
    heart_size_factor: float = 0.92  # smaller = bigger heart = more erosion
    pattern_inside_data_light_cells: bool = True
    pattern_opacity: float = 0.12
    quiet_zone: int = 8
    outer_pad_min: int = 24
    outer_pad_ratio: float = 0.08

    def __post_init__(self):
        if not 0 < self.heart_size_factor <= 1:
            raise InputError(f"heart_size_factor must be in (0, 1], got {self.heart_size_factor}")

    @property
    def finder_dot_scale(self) -> float:
        return min(self.finder_dot_scale_max, self.dot_scale + self.finder_dot_scale_boost)


@dataclass(frozen=True)
class StyleConfig:
    """User-selectable style options."""

    pattern: PatternKind = PatternKind.NONE
    module_style: ModuleStyle = ModuleStyle.FILLED_SQUARE
    color_mode: ColorMode = ColorMode.DUAL
    timing_protected: bool = False
    noise_seed: int = 0

    @classmethod
    def from_names(cls, pattern: str = "none", module_style: str = "filled-square",
                   color_mode: str = "dual", **kwargs) -> "StyleConfig":
        try:
            return cls(
                pattern=PatternKind(pattern),
                module_style=ModuleStyle(module_style),
                color_mode=ColorMode(color_mode),
                **kwargs,
            )
        except ValueError as e:
            raise InputError(f"Unknown style option: {e}") from e


@dataclass(frozen=True)
class Palette:
    """Resolved RGB colours for one render."""

    foreground: tuple[int, int, int] = (0, 0, 0)
    accent: tuple[int, int, int] = (230, 57, 70)
    pattern: tuple[int, int, int] = (0, 0, 0)
    background: tuple[int, int, int] = (255, 255, 255)


def parse_color(value: str | tuple) -> tuple[int, int, int]:
    """Parse a hex string ('#e63946', 'e63946') or colour name into RGB."""
    if isinstance(value, tuple):
        return tuple(int(ch) for ch in value[:3])
    s = value.strip()
    if len(s) in (3, 6) and all(ch in "0123456789abcdefABCDEF" for ch in s):
        s = "#" + s
    try:
        return ImageColor.getrgb(s)[:3]
    except ValueError as e:
        raise InputError(f"Invalid colour '{value}'") from e
