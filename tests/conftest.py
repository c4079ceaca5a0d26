import os
import sys

import numpy as np
import pytest

# Ensure the project root is on sys.path so tests can import packages like
# ``manifold_reduction`` and ``tests.helpers`` without installing anything.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tests.helpers import curved_grid  # noqa: E402


@pytest.fixture
def grid_data() -> np.ndarray:
    return curved_grid()


@pytest.fixture(autouse=True)
def _sequential_workers(monkeypatch):
    """Run joblib loops in-process unless a test asks otherwise."""
    monkeypatch.setenv("MANIFOLD_REDUCTION_N_JOBS", "1")
    yield
