import pytest

from heartqr.budget import compute_error_budget, estimate_budget, version_for
from heartqr.masking import count_dropped
from heartqr.config import ColorMode, HeartParams, StyleConfig
from heartqr.encoder import ModuleMatrix, qrcode_error_level
from heartqr.errors import InputError


def test_version_for():
    assert version_for(21) == 1
    assert version_for(29) == 3
    assert version_for(177) == 40
    with pytest.raises(ValueError):
        version_for(30)
    with pytest.raises(ValueError):
        version_for(13)


def test_capacity_from_reed_solomon_blocks():
    # V1-H: one (26, 9) block, V3-H: two (35, 13) blocks
    assert compute_error_budget(1).correctable_codewords == 8
    budget = compute_error_budget(3)
    assert budget.correctable_codewords == 22
    assert budget.correctable_modules == 176
    assert budget.safe
    assert budget.budget_used_pct == 0.0
    assert budget.total_modules == 29 * 29


def test_over_budget():
    budget = compute_error_budget(3, dropped_modules=200)
    assert not budget.safe
    assert budget.budget_used_pct > 100
    assert "OVER BUDGET" in budget.summary()


def test_threshold_is_configurable():
    assert compute_error_budget(3, dropped_modules=100, max_use=0.9).safe
    assert not compute_error_budget(3, dropped_modules=100, max_use=0.5).safe


def test_dual_mode_drops_nothing(example_matrix):
    assert count_dropped(example_matrix, StyleConfig(color_mode=ColorMode.DUAL)) == 0


def test_mask_mode_drops_dark_modules_outside_the_heart(example_matrix):
    mask = StyleConfig(color_mode=ColorMode.MASK)
    dropped = count_dropped(example_matrix, mask)
    assert dropped > 0
    # nothing survives an empty heart except the protected anchors
    everything = count_dropped(example_matrix, mask, heart=HeartParams(expand_threshold=-10))
    assert everything > dropped
    assert everything < example_matrix.dark_count()


def test_estimate_budget_counts_what_the_mask_drops(example_matrix):
    mask = StyleConfig(color_mode=ColorMode.MASK)
    budget = estimate_budget(example_matrix, mask)
    assert budget.version == 3
    assert budget.ecc == "H"
    assert budget.dropped_modules == count_dropped(example_matrix, mask)
    assert budget.safe

    assert estimate_budget(example_matrix).dropped_modules == 0


def test_estimate_budget_threshold_and_empty_heart(example_matrix):
    mask = StyleConfig(color_mode=ColorMode.MASK)
    assert not estimate_budget(example_matrix, mask, max_use=0.05).safe
    empty = estimate_budget(example_matrix, mask, heart=HeartParams(expand_threshold=-10))
    assert not empty.safe
    assert empty.budget_used_pct > 100


def test_estimate_budget_needs_a_qr_sized_matrix():
    matrix = ModuleMatrix.from_rows([[False] * 10 for _ in range(10)])
    with pytest.raises(ValueError):
        estimate_budget(matrix)


def test_qrcode_error_level():
    import qrcode.constants

    assert qrcode_error_level("h") == qrcode.constants.ERROR_CORRECT_H
    with pytest.raises(InputError):
        qrcode_error_level("X")
