"""Protected-region classifier: finder corners and timing lines."""

from enum import Enum

# 9 = finder (7) + separator (1) + margin (1)
FINDER_PROTECT = 9
# Light-cell pattern transfer keeps a wider berth around the finders
FINDER_BAN = FINDER_PROTECT + 2
TIMING_INDEX = 6


class ProtectionClass(Enum):
    NONE = "none"
    FINDER = "finder"
    TIMING = "timing"


def is_finder_protected(row: int, col: int, n: int, margin: int = FINDER_PROTECT) -> bool:
    """True inside the top-left, top-right or bottom-left corner block of side *margin*.

    The bottom-right corner never holds a finder pattern.
    """
    top = row < margin
    left = col < margin
    return (top and left) or (top and col >= n - margin) or (row >= n - margin and left)


def is_timing(row: int, col: int) -> bool:
    return row == TIMING_INDEX or col == TIMING_INDEX


def classify(row: int, col: int, n: int, timing_protected: bool = False) -> ProtectionClass:
    """Protection class of a module; finder takes precedence over timing."""
    if is_finder_protected(row, col, n):
        return ProtectionClass.FINDER
    if timing_protected and is_timing(row, col):
        return ProtectionClass.TIMING
    return ProtectionClass.NONE
