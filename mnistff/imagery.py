"""Rendering input rows as images and writing predictions to disk."""

from __future__ import annotations

import csv
import math
from collections.abc import Iterable, Sequence
from pathlib import Path

import numpy as np
from PIL import Image

from mnistff.dataset import PIXEL_RANGE

JPEG_QUALITY = 75


def _reverse_weights(values: np.ndarray) -> np.ndarray:
    clamped = np.minimum(0.99, np.maximum(0.01, values))
    shifted = np.trunc(PIXEL_RANGE * clamped - PIXEL_RANGE).astype(np.int64)
    return (shifted & 0xFF).astype(np.uint8)


def reverse_pixel_weight(px) -> int:
    """Map a pixel weight back to a byte.

    The weight is clamped to [0.01, 0.99], scaled by 255 and shifted down
    by 255; the (negative) result is truncated and wrapped into 0..255.
    """
    return int(_reverse_weights(np.asarray(px, dtype=np.float64)))


def visualize_row(row: Sequence[float]) -> Image.Image:
    """Render a flat row of pixel weights as a square greyscale image.

    The side is the integer square root of the row's length; values past
    ``side * side`` are ignored.
    """
    values = np.asarray(row, dtype=np.float64).ravel()
    if values.size == 0:
        raise ValueError("cannot visualise an empty row")
    side = int(math.sqrt(values.size))
    pixels = _reverse_weights(values[: side * side])
    return Image.frombytes("L", (side, side), pixels.tobytes())


def argmax_first(values: Iterable[float]) -> int:
    """Return the index of the largest value, preferring the earliest on ties."""
    best_index = -1
    best_value = 0.0
    for index, value in enumerate(values):
        if best_index < 0 or value > best_value:
            best_index, best_value = index, value
    if best_index < 0:
        raise ValueError("argmax of an empty sequence")
    return best_index


def image_filename(batch: int, index: int, label: int, guess: int) -> str:
    """Name of the image written for one test example."""
    return f"{batch} - {index} - {label} - {guess}.jpg"


def save_row_image(
    row: Sequence[float],
    directory: str | Path,
    batch: int,
    index: int,
    label: int,
    guess: int,
) -> Path:
    """Write the row as a JPEG into ``directory`` and return its path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / image_filename(batch, index, label, guess)
    visualize_row(row).save(path, format="JPEG", quality=JPEG_QUALITY)
    return path


def format_prediction(value: float) -> str:
    """Format a value with six fixed decimals, spelling non-finite values as NaN/+Inf/-Inf."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.6f}"


def write_predictions_csv(path: str | Path, predictions) -> Path:
    """Write each row of predictions as a CSV line of fixed-point numbers."""
    matrix = np.asarray(predictions, dtype=np.float64)
    if matrix.ndim != 2:
        raise ValueError("predictions must be a two-dimensional array")
    path = Path(path)
    with path.open("w", newline="") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerows([format_prediction(v) for v in row] for row in matrix)
    return path