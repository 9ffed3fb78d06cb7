"""Command line entry point: train the network on MNIST, then evaluate it."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

import numpy as np

from mnistff.dataset import load, parse_dtype
from mnistff.network import DEFAULT_SEED, Network
from mnistff.solver import RMSPropSolver
from mnistff.training import EvaluationResult, evaluate, train

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "./mnist/"
DEFAULT_IMAGE_DIR = "images"
DEFAULT_CSV_DIR = "."


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; options accept one or two leading dashes."""
    parser = argparse.ArgumentParser(
        prog="mnistff",
        description="Train a feed-forward network on MNIST and evaluate it on the test set.",
    )
    parser.add_argument(
        "-epochs", "--epochs", type=int, default=5,
        help="Number of epochs to train for",
    )
    parser.add_argument(
        "-dataset", "--dataset", default="train",
        help='Which dataset to train on? Valid options are "train" or "test"',
    )
    parser.add_argument(
        "-dtype", "--dtype", default="float64", help="Which dtype to use",
    )
    parser.add_argument(
        "-batchsize", "--batchsize", type=int, default=100, help="Batch size",
    )
    parser.add_argument(
        "-cpuprofile", "--cpuprofile", default="",
        help="CPU profiling (accepted for compatibility; not used)",
    )
    parser.add_argument(
        "-mnist", "--mnist", default=DEFAULT_LOCATION,
        help="Directory holding the MNIST IDX files",
    )
    parser.add_argument(
        "-images", "--images", default=DEFAULT_IMAGE_DIR,
        help="Directory the test images are written to",
    )
    parser.add_argument(
        "-output", "--output", default=DEFAULT_CSV_DIR,
        help="Directory the per-batch prediction CSV files are written to",
    )
    return parser


def _run(args: argparse.Namespace, dtype) -> EvaluationResult:
    inputs, targets = load(args.dataset, args.mnist, dtype)
    network = Network(dtype, np.random.default_rng(DEFAULT_SEED))
    solver = RMSPropSolver(batch_size=float(args.batchsize))
    train(network, solver, inputs, targets, args.batchsize, args.epochs, progress=True)

    test_inputs, test_targets = load("test", args.mnist, dtype)
    return evaluate(
        network,
        test_inputs,
        test_targets,
        args.batchsize,
        image_dir=args.images,
        csv_dir=args.output,
        progress=True,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run training and evaluation; return the process exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        dtype = parse_dtype(args.dtype)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        result = _run(args, dtype)
    except (ValueError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1

    logger.info("Accuracy %.4f", result.accuracy)
    return 0


if __name__ == "__main__":
    sys.exit(main())