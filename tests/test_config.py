import pytest

from heartqr.config import (
    ColorMode,
    HeartParams,
    Look,
    ModuleStyle,
    PatternKind,
    StyleConfig,
    parse_color,
)
from heartqr.errors import InputError


@pytest.mark.parametrize("value, rgb", [
    ("#E63946", (230, 57, 70)),
    ("e63946", (230, 57, 70)),
    ("#fff", (255, 255, 255)),
    ("red", (255, 0, 0)),
    ((1, 2, 3, 4), (1, 2, 3)),
])
def test_parse_color(value, rgb):
    assert parse_color(value) == rgb


def test_parse_color_rejects_garbage():
    with pytest.raises(InputError):
        parse_color("not-a-colour")


def test_style_from_names():
    style = StyleConfig.from_names("dots", "heart-clip", "mask", timing_protected=True)
    assert style.pattern == PatternKind.DOTS
    assert style.module_style == ModuleStyle.HEART_CLIP
    assert style.color_mode == ColorMode.MASK
    assert style.timing_protected
    with pytest.raises(InputError):
        StyleConfig.from_names(pattern="hearts")


def test_defaults():
    assert HeartParams() == HeartParams(sx=0.95, sy=1.12, y_shift=0.10, expand_threshold=0.06)
    look = Look()
    assert look.quiet_zone == 8
    assert look.finder_dot_scale == pytest.approx(0.90)
    assert Look(dot_scale=0.9).finder_dot_scale == pytest.approx(0.92)


@pytest.mark.parametrize("factor", [0, -0.5, 1.01, 5.0])
def test_heart_size_factor_must_not_enlarge_coordinates(factor):
    with pytest.raises(InputError):
        Look(heart_size_factor=factor)


def test_heart_size_factor_upper_bound_is_inclusive():
    assert Look(heart_size_factor=1.0).heart_size_factor == 1.0
