import pytest

from heartqr.regions import (
    FINDER_BAN,
    FINDER_PROTECT,
    ProtectionClass,
    classify,
    is_finder_protected,
)

N = 29


@pytest.mark.parametrize("row, col", [(0, 0), (8, 8), (0, N - 1), (8, N - 9), (N - 1, 0), (N - 9, 8)])
def test_three_finder_corners(row, col):
    assert classify(row, col, N) == ProtectionClass.FINDER


@pytest.mark.parametrize("row, col", [(N - 1, N - 1), (N - 9, N - 9), (9, 9), (14, 14), (9, 0), (0, 9)])
def test_outside_finder_blocks(row, col):
    assert classify(row, col, N) == ProtectionClass.NONE


def test_timing_only_when_enabled():
    assert classify(6, 14, N) == ProtectionClass.NONE
    assert classify(6, 14, N, timing_protected=True) == ProtectionClass.TIMING
    assert classify(14, 6, N, timing_protected=True) == ProtectionClass.TIMING
    assert classify(20, 6, N, timing_protected=True) == ProtectionClass.FINDER


def test_finder_wins_over_timing():
    assert classify(6, 3, N, timing_protected=True) == ProtectionClass.FINDER


def test_enlarged_ban_margin():
    assert FINDER_BAN == FINDER_PROTECT + 2
    assert not is_finder_protected(10, 10, N)
    assert is_finder_protected(10, 10, N, FINDER_BAN)
    assert not is_finder_protected(N - 1, N - 1, N, FINDER_BAN)
