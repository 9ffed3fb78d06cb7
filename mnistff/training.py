"""Training the network in mini-batches and evaluating it on a test set."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from tqdm import tqdm

from mnistff.dataset import batch_bounds
from mnistff.imagery import argmax_first, save_row_image, write_predictions_csv

logger = logging.getLogger(__name__)

_BAR_WIDTH = 80
_BAR_REFRESH = 1.0 / 20


@dataclass
class EvaluationResult:
    """Outcome of running the network over a test set."""

    cost: float | None
    predictions: np.ndarray
    labels: list[int] = field(default_factory=list)
    guesses: list[int] = field(default_factory=list)
    image_paths: list[Path] = field(default_factory=list)
    csv_paths: list[Path] = field(default_factory=list)

    @property
    def accuracy(self) -> float:
        """Fraction of examples whose guess matches the label."""
        if not self.labels:
            return 0.0
        hits = sum(label == guess for label, guess in zip(self.labels, self.guesses))
        return hits / len(self.labels)


def _check_data(inputs, targets) -> tuple[np.ndarray, np.ndarray]:
    inputs = np.asarray(inputs)
    targets = np.asarray(targets)
    if inputs.ndim != 2 or targets.ndim != 2:
        raise ValueError("inputs and targets must be two-dimensional")
    if inputs.shape[0] != targets.shape[0]:
        raise ValueError(
            f"{inputs.shape[0]} inputs but {targets.shape[0]} targets"
        )
    return inputs, targets


def _batches(
    inputs: np.ndarray, targets: np.ndarray, batch_size: int, progress: bool | str
) -> Iterator[tuple[int, np.ndarray, np.ndarray]]:
    bounds = list(batch_bounds(inputs.shape[0], batch_size))
    description = progress if isinstance(progress, str) else None
    with tqdm(
        total=len(bounds),
        desc=description,
        ncols=_BAR_WIDTH,
        mininterval=_BAR_REFRESH,
        disable=not progress,
    ) as bar:
        for index, (start, end) in enumerate(bounds):
            yield index, inputs[start:end], targets[start:end]
            bar.update(1)


def train_epoch(
    network, solver, inputs, targets, batch_size: int, progress: bool | str = False
) -> float | None:
    """Train over every full batch once; return the cost of the last batch.

    Returns ``None`` when there are fewer examples than one batch.
    ``progress`` may be a label, which is shown as the progress bar's prefix.
    """
    inputs, targets = _check_data(inputs, targets)
    cost = None
    for _, x_batch, y_batch in _batches(inputs, targets, batch_size, progress):
        cost, grads = network.gradients(x_batch, y_batch)
        solver.step(network.learnables(), grads)
    return cost


def train(
    network,
    solver,
    inputs,
    targets,
    batch_size: int,
    epochs: int,
    progress: bool = False,
) -> list[float | None]:
    """Train for ``epochs`` epochs and return the last-batch cost of each."""
    if epochs < 0:
        raise ValueError("number of epochs must not be negative")
    inputs, targets = _check_data(inputs, targets)
    logger.info("Starting Training...")
    logger.info("Batches %d", inputs.shape[0] // batch_size if batch_size > 0 else 0)
    costs = []
    for epoch in range(epochs):
        label = f"Epoch {epoch}" if progress else False
        cost = train_epoch(network, solver, inputs, targets, batch_size, label)
        logger.info("Epoch %d | cost %s", epoch, cost)
        costs.append(cost)
    return costs


def evaluate(
    network,
    inputs,
    targets,
    batch_size: int,
    image_dir: str | Path | None = "images",
    csv_dir: str | Path | None = ".",
    progress: bool = False,
) -> EvaluationResult:
    """Run the network over every full batch of a test set.

    Each example is saved as a JPEG named after its batch, position, label
    and guess under ``image_dir``; each batch's predictions are written to
    ``<batch>.csv`` under ``csv_dir``. Either directory may be ``None`` to
    skip that output.
    """
    inputs, targets = _check_data(inputs, targets)
    logger.info("Run Tests")
    if csv_dir is not None:
        csv_dir = Path(csv_dir)
        csv_dir.mkdir(parents=True, exist_ok=True)

    cost = None
    predictions = []
    labels: list[int] = []
    guesses: list[int] = []
    image_paths: list[Path] = []
    csv_paths: list[Path] = []
    label = "Epoch Test" if progress else False
    for batch, x_batch, y_batch in _batches(inputs, targets, batch_size, label):
        output = network.forward(x_batch)
        cost = network.cost(output, y_batch)
        for index, (row, target_row, pred_row) in enumerate(
            zip(x_batch, y_batch, output)
        ):
            row_label = argmax_first(target_row)
            row_guess = argmax_first(pred_row)
            labels.append(row_label)
            guesses.append(row_guess)
            if image_dir is not None:
                image_paths.append(
                    save_row_image(row, image_dir, batch, index, row_label, row_guess)
                )
        if csv_dir is not None:
            csv_paths.append(write_predictions_csv(csv_dir / f"{batch}.csv", output))
        predictions.append(output)

    logger.info("Epoch Test | cost %s", cost)
    stacked = (
        np.concatenate(predictions)
        if predictions
        else np.empty((0, targets.shape[1]), dtype=np.float64)
    )
    return EvaluationResult(
        cost=cost,
        predictions=stacked,
        labels=labels,
        guesses=guesses,
        image_paths=image_paths,
        csv_paths=csv_paths,
    )