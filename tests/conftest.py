import logging

import pytest

from heartqr.encoder import encode
from heartqr.logging import ROOT


@pytest.fixture(autouse=True)
def _restore_heartqr_logger():
    """setup_logging() rewires the package logger; undo it after each test."""
    root = logging.getLogger(ROOT)
    saved = (list(root.handlers), root.level, root.propagate)
    yield
    handlers, level, propagate = saved
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


@pytest.fixture(scope="session")
def example_matrix():
    return encode("https://example.com")
