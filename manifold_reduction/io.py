"""Text-matrix input and embedding output.

Input files hold one observation per line as whitespace-separated numbers;
the loaded matrix is transposed so that rows are features and columns are
observations. Output files hold one embedding dimension per line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from manifold_reduction.errors import DataFormatError

PathLike = Union[str, Path]


def read_data(path: PathLike) -> np.ndarray:
    """Load a whitespace-delimited observation matrix as ``(D, N)``.

    Raises
    ------
    DataFormatError
        If the file holds no observations, rows differ in length, or a value
        is missing or not numeric.
    """
    try:
        frame = pd.read_csv(
            path,
            sep=r"\s+",
            header=None,
            dtype=np.float64,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as exc:
        raise DataFormatError(f"{path} contains no observations") from exc
    except pd.errors.ParserError as exc:
        raise DataFormatError(f"{path} has rows of inconsistent length: {exc}") from exc
    except ValueError as exc:
        raise DataFormatError(f"{path} contains non-numeric values: {exc}") from exc

    if frame.empty:
        raise DataFormatError(f"{path} contains no observations")
    if frame.isna().to_numpy().any():
        rows = np.flatnonzero(frame.isna().any(axis=1).to_numpy())
        preview = ", ".join(str(r + 1) for r in rows[:5])
        raise DataFormatError(
            f"{path} has rows of inconsistent length or missing values (observations {preview})"
        )

    return frame.to_numpy(dtype=np.float64).T.copy()


def write_embedding(path: PathLike, embedding: np.ndarray) -> None:
    """Write a ``(target_dimension, N)`` embedding, one dimension per line."""
    pd.DataFrame(np.atleast_2d(embedding)).to_csv(
        path,
        sep=" ",
        header=False,
        index=False,
        float_format="%.12g",
    )


__all__ = ["read_data", "write_embedding"]
