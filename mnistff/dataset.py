"""Loading the MNIST data set from IDX files and slicing it into batches."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from pathlib import Path

import numpy as np

NUM_LABELS = 10
PIXEL_RANGE = 255

IMAGE_MAGIC = 0x00000803
LABEL_MAGIC = 0x00000801

_FILES = {
    "train": ("train-images.idx3-ubyte", "train-labels.idx1-ubyte"),
    "dev": ("train-images.idx3-ubyte", "train-labels.idx1-ubyte"),
    "test": ("t10k-images.idx3-ubyte", "t10k-labels.idx1-ubyte"),
}

_DTYPES = {
    "float64": np.float64,
    "float32": np.float32,
}


def parse_dtype(name: str) -> type[np.floating]:
    """Return the numpy float type for ``"float64"`` or ``"float32"``."""
    try:
        return _DTYPES[name]
    except KeyError:
        raise ValueError(f"Unknown dtype: {name}") from None


def _read_header(data: bytes, count: int, path: Path) -> tuple[int, ...]:
    size = 4 * count
    if len(data) < size:
        raise ValueError(f"{path}: truncated IDX header")
    return struct.unpack(f">{count}I", data[:size])


def read_idx_images(path: str | Path) -> np.ndarray:
    """Read an IDX3 image file into a ``(count, rows * cols)`` uint8 array."""
    path = Path(path)
    data = path.read_bytes()
    magic, count, rows, cols = _read_header(data, 4, path)
    if magic != IMAGE_MAGIC:
        raise ValueError(f"{path}: bad image file magic {magic:#010x}")
    expected = count * rows * cols
    body = data[16:]
    if len(body) < expected:
        raise ValueError(f"{path}: expected {expected} pixel bytes, found {len(body)}")
    pixels = np.frombuffer(body, dtype=np.uint8, count=expected)
    return pixels.reshape(count, rows * cols).copy()


def read_idx_labels(path: str | Path) -> np.ndarray:
    """Read an IDX1 label file into a one-dimensional uint8 array."""
    path = Path(path)
    data = path.read_bytes()
    magic, count = _read_header(data, 2, path)
    if magic != LABEL_MAGIC:
        raise ValueError(f"{path}: bad label file magic {magic:#010x}")
    body = data[8:]
    if len(body) < count:
        raise ValueError(f"{path}: expected {count} labels, found {len(body)}")
    return np.frombuffer(body, dtype=np.uint8, count=count).copy()


def pixel_weight(px):
    """Scale raw pixel values (0-255) into the range [0.1, 0.999].

    Accepts a scalar or an array; a full-intensity pixel maps to 0.999
    rather than 1.0.
    """
    weights = np.asarray(px, dtype=np.float64) / PIXEL_RANGE * 0.9 + 0.1
    weights = np.where(weights == 1.0, 0.999, weights)
    if weights.ndim == 0:
        return float(weights)
    return weights


def one_hot(labels, dtype) -> np.ndarray:
    """Encode labels as rows of 0.1 with 0.9 at the label's position."""
    labels = np.asarray(labels, dtype=np.int64)
    if labels.size and (labels.min() < 0 or labels.max() >= NUM_LABELS):
        raise ValueError(f"labels must lie in 0..{NUM_LABELS - 1}")
    targets = np.full((labels.shape[0], NUM_LABELS), 0.1, dtype=dtype)
    targets[np.arange(labels.shape[0]), labels] = 0.9
    return targets


def load(name: str, location: str | Path, dtype) -> tuple[np.ndarray, np.ndarray]:
    """Load the ``train``, ``dev`` or ``test`` set as (inputs, targets)."""
    try:
        image_file, label_file = _FILES[name]
    except KeyError:
        raise ValueError(f"Unknown dataset: {name}") from None
    location = Path(location)
    images = read_idx_images(location / image_file)
    labels = read_idx_labels(location / label_file)
    if images.shape[0] != labels.shape[0]:
        raise ValueError(
            f"{images.shape[0]} images but {labels.shape[0]} labels in {location}"
        )
    inputs = pixel_weight(images).astype(dtype)
    return inputs, one_hot(labels, dtype)


def batch_bounds(num_examples: int, batch_size: int) -> Iterator[tuple[int, int]]:
    """Yield (start, end) for each full batch; a trailing partial batch is dropped."""
    if batch_size <= 0:
        raise ValueError("batch size must be positive")
    for batch in range(num_examples // batch_size):
        start = batch * batch_size
        if start >= num_examples:
            break
        yield start, min(start + batch_size, num_examples)