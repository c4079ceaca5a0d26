"""Worker-count resolution for joblib-backed loops."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

N_JOBS_ENV = "MANIFOLD_REDUCTION_N_JOBS"

# Below this many rows or neighborhoods, thread start-up outweighs the work.
_MIN_TASKS_FOR_PARALLEL = 64


def get_n_jobs(n_tasks: int) -> int:
    """Worker count for a loop over ``n_tasks`` independent items.

    ``MANIFOLD_REDUCTION_N_JOBS`` overrides the choice (``1`` runs
    sequentially); an unparsable value is ignored with a warning.
    """
    env = os.environ.get(N_JOBS_ENV)
    if env is not None:
        try:
            return max(int(env), 1)
        except ValueError:
            logger.warning("Ignoring %s=%r (expected an integer)", N_JOBS_ENV, env)
    if n_tasks < _MIN_TASKS_FOR_PARALLEL:
        return 1
    return -1  # joblib: all cores
