"""Small logging helpers shared by the engine and the command line.

The engine takes an optional ``logger`` argument instead of reaching for a
global; :func:`null_logger` gives tests a logger that discards everything.
"""

from __future__ import annotations

import logging


def _default_logger() -> logging.Logger:
    return logging.getLogger("manifold_reduction")


def resolve_logger(logger: logging.Logger | None = None) -> logging.Logger:
    return logger or _default_logger()


def null_logger() -> logging.Logger:
    """Return a logger that drops every record."""
    logger = logging.getLogger("manifold_reduction.null")
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def log_dataset_shape(n_vectors: int, dimension: int, logger: logging.Logger | None = None) -> None:
    """Log the shape of the loaded data set."""
    logger = resolve_logger(logger)
    logger.info(
        "Data contains %d feature vectors with dimension of %d", n_vectors, dimension
    )


def log_method_start(method: str, n_vectors: int, logger: logging.Logger | None = None) -> None:
    logger = resolve_logger(logger)
    logger.info("Embedding %d vectors with %s", n_vectors, method)
