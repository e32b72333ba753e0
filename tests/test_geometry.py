import pytest

from heartqr.errors import SizeTooSmall
from heartqr.geometry import plan


def test_plan_example_symbol():
    g = plan(29, 400)
    assert g.module_size == 8
    assert g.draw_size == 360
    assert g.outer_pad == 28
    assert g.final_size == 416
    assert g.offset == 28 + 8 * 8
    assert g.final_size == g.module_size * (g.n + 2 * g.quiet_zone) + 2 * g.outer_pad


def test_outer_pad_minimum():
    g = plan(21, 256)
    assert g.module_size == 6
    assert g.outer_pad == 24
    assert g.final_size == 222 + 48


def test_plan_is_deterministic():
    assert plan(33, 512) == plan(33, 512)


def test_too_small_fails():
    with pytest.raises(SizeTooSmall) as exc:
        plan(70, 100)
    assert exc.value.module_size == 1
    assert exc.value.n == 70
    assert isinstance(exc.value, ValueError)


def test_quiet_zone_minimum():
    with pytest.raises(ValueError):
        plan(21, 512, quiet_zone=3)


def test_quiet_zone_bands_frame_the_data_area():
    g = plan(25, 400)
    top, bottom, left, right = g.quiet_zone_bands()
    q = g.quiet_px
    assert top == (g.outer_pad, g.outer_pad, g.draw_size, q)
    assert bottom[1] + bottom[3] == g.outer_pad + g.draw_size
    assert left[0] + left[2] == g.offset
    assert right[0] == g.offset + g.n * g.module_size
    assert g.data_rect() == (g.offset, g.offset, 25 * g.module_size, 25 * g.module_size)
