"""Command line entry point.

Usage
-----
    manifold-reduction [method] [neighbors_method] [eigen_method] \\
        [number_of_neighbors] [target_dimension]

    manifold-reduction isomap covertree arpack 10 2
    manifold-reduction lmds brute dense 5 3 --input data.txt --output out.txt

Reads ``input.dat`` (one observation per line), writes ``output.dat`` (one
embedding dimension per line). Any engine or input failure exits with status 1
and writes nothing; argparse handles arity errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from manifold_reduction.callbacks import (
    EuclideanDistance,
    FeatureVectors,
    LinearKernel,
    PrecomputedDistance,
    PrecomputedKernel,
    matrix_from_callback,
)
from manifold_reduction.config import ConfigurationStore, ParameterKey, default_parameters
from manifold_reduction.embedding import embed
from manifold_reduction.errors import ManifoldReductionError, UnsupportedMethod
from manifold_reduction.io import read_data, write_embedding
from manifold_reduction.logging import log_dataset_shape
from manifold_reduction.methods import (
    EigenMethod,
    NeighborsMethod,
    ReductionMethod,
    parse_eigen_method,
    parse_neighbors_method,
    parse_reduction_method,
)

logger = logging.getLogger("manifold_reduction.cli")

DEFAULT_INPUT = Path("input.dat")
DEFAULT_OUTPUT = Path("output.dat")


def _choices(enum_cls) -> str:
    return ", ".join(member.value for member in enum_cls)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="manifold-reduction",
        description="Embed high-dimensional observations into a low-dimensional space.",
    )
    parser.add_argument("method", help=f"Reduction method ({_choices(ReductionMethod)})")
    parser.add_argument("neighbors_method", help=f"Neighbor search ({_choices(NeighborsMethod)})")
    parser.add_argument("eigen_method", help=f"Eigensolver ({_choices(EigenMethod)})")
    parser.add_argument("number_of_neighbors", type=int, help="Neighbors per point")
    parser.add_argument("target_dimension", type=int, help="Dimension of the embedding")
    parser.add_argument(
        "--input", type=Path, default=DEFAULT_INPUT, help="Input matrix (default: input.dat)"
    )
    parser.add_argument(
        "--output", type=Path, default=DEFAULT_OUTPUT, help="Output file (default: output.dat)"
    )
    parser.add_argument(
        "--precompute",
        action="store_true",
        help="Materialize kernel and distance matrices once and embed from them.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress messages.")
    return parser


def _parameters(args: argparse.Namespace) -> ConfigurationStore:
    parameters = ConfigurationStore(default_parameters())
    parameters.set(ParameterKey.REDUCTION_METHOD, parse_reduction_method(args.method))
    parameters.set(ParameterKey.NEIGHBORS_METHOD, parse_neighbors_method(args.neighbors_method))
    parameters.set(ParameterKey.EIGEN_METHOD, parse_eigen_method(args.eigen_method))
    parameters.set(ParameterKey.NUMBER_OF_NEIGHBORS, args.number_of_neighbors)
    parameters.set(ParameterKey.TARGET_DIMENSION, args.target_dimension)
    return parameters


def run(args: argparse.Namespace) -> None:
    parameters = _parameters(args)

    data = read_data(args.input)
    dimension, n_vectors = data.shape
    parameters.set(ParameterKey.CURRENT_DIMENSION, dimension)
    log_dataset_shape(n_vectors, dimension, logger)

    indices = list(range(n_vectors))
    kernel = LinearKernel(data)
    distance = EuclideanDistance(data)
    if args.precompute:
        distance = PrecomputedDistance(matrix_from_callback(indices, distance))
        kernel = PrecomputedKernel(matrix_from_callback(indices, kernel))

    result = embed(indices, kernel, distance, FeatureVectors(data), parameters, logger=logger)
    write_embedding(args.output, result.embedding)
    logger.info("Wrote %d x %d embedding to %s", *result.embedding.shape, args.output)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(name)s | %(message)s",
    )

    try:
        run(args)
    except UnsupportedMethod as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return 1
    except (ManifoldReductionError, OSError) as exc:
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
