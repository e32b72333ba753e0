"""Exceptions raised by heartqr."""


class HeartQRError(Exception):
    """Base class for all heartqr failures."""


class EncoderUnavailable(HeartQRError, RuntimeError):
    """No usable QR encoder could be obtained; nothing is drawn."""


class InputError(HeartQRError, ValueError):
    """Invalid user input: URL, colour, or a payload over QR capacity."""


class SizeTooSmall(HeartQRError, ValueError):
    """The target size leaves fewer than the minimum pixels per module."""

    def __init__(self, n: int, target_size: int, module_size: int, minimum: int = 2):
        self.n = n
        self.target_size = target_size
        self.module_size = module_size
        self.minimum = minimum
        super().__init__(
            f"Output size {target_size}px is too small for a {n}x{n} symbol "
            f"({module_size}px per module, need at least {minimum}). "
            f"Choose a larger size or shorter text."
        )


class ErrorBudgetExceeded(HeartQRError):
    """Heart masking would drop more modules than error correction can recover."""

    def __init__(self, budget):
        self.budget = budget
        super().__init__(
            f"Heart mask drops {budget.dropped_modules} modules, "
            f"{budget.budget_used_pct:.1f}% of the V{budget.version}-{budget.ecc} "
            f"correction budget ({budget.correctable_modules} modules)"
        )
