"""Exception hierarchy for the embedding engine.

Every failure the engine surfaces derives from :class:`ManifoldReductionError`
so callers (the CLI in particular) can map them to a single exit status while
still telling the kinds apart.
"""

from __future__ import annotations


class ManifoldReductionError(Exception):
    """Base class for all typed engine failures."""


class ConfigurationError(ManifoldReductionError, ValueError):
    """A parameter is missing, of the wrong kind, or out of its domain."""


class UnsupportedMethod(ManifoldReductionError, ValueError):
    """A method selector token is not part of the known vocabulary."""

    def __init__(self, token: str, kind: str = "method") -> None:
        self.token = token
        self.kind = kind
        super().__init__(f"{kind.capitalize()} {token!r} is not supported")


class DataFormatError(ManifoldReductionError, ValueError):
    """Input data is empty, ragged, or contains non-numeric values."""


class ConvergenceFailure(ManifoldReductionError, RuntimeError):
    """The iterative eigensolver exhausted its iteration budget."""

    def __init__(self, message: str, method: str | None = None) -> None:
        self.method = method
        super().__init__(message)


class DimensionalityError(ManifoldReductionError, ValueError):
    """The target dimension is incompatible with the data or the method."""


__all__ = [
    "ManifoldReductionError",
    "ConfigurationError",
    "UnsupportedMethod",
    "DataFormatError",
    "ConvergenceFailure",
    "DimensionalityError",
]
