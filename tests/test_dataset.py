import struct

import numpy as np
import pytest

from mnistff.dataset import (
    batch_bounds,
    load,
    one_hot,
    parse_dtype,
    pixel_weight,
    read_idx_images,
    read_idx_labels,
)


def _write_images(path, images, rows, cols):
    header = struct.pack(">IIII", 0x803, len(images), rows, cols)
    path.write_bytes(header + bytes(np.asarray(images, dtype=np.uint8).ravel()))


def _write_labels(path, labels):
    header = struct.pack(">II", 0x801, len(labels))
    path.write_bytes(header + bytes(labels))


def test_parse_dtype_known():
    assert parse_dtype("float64") is np.float64
    assert parse_dtype("float32") is np.float32


def test_parse_dtype_unknown():
    with pytest.raises(ValueError, match="Unknown dtype"):
        parse_dtype("int8")


def test_read_idx_images_round_trip(tmp_path):
    images = np.arange(2 * 4, dtype=np.uint8).reshape(2, 4)
    path = tmp_path / "img"
    _write_images(path, images, 2, 2)
    result = read_idx_images(path)
    assert result.shape == (2, 4)
    assert np.array_equal(result, images)


def test_read_idx_images_bad_magic(tmp_path):
    path = tmp_path / "img"
    path.write_bytes(struct.pack(">IIII", 0x801, 1, 1, 1) + b"\x00")
    with pytest.raises(ValueError):
        read_idx_images(path)


def test_read_idx_images_truncated(tmp_path):
    path = tmp_path / "img"
    path.write_bytes(struct.pack(">IIII", 0x803, 2, 2, 2) + b"\x00\x01")
    with pytest.raises(ValueError):
        read_idx_images(path)


def test_read_idx_labels_round_trip(tmp_path):
    path = tmp_path / "lbl"
    _write_labels(path, [3, 0, 9])
    assert read_idx_labels(path).tolist() == [3, 0, 9]


def test_read_idx_labels_bad_magic(tmp_path):
    path = tmp_path / "lbl"
    path.write_bytes(struct.pack(">II", 0x803, 1) + b"\x01")
    with pytest.raises(ValueError):
        read_idx_labels(path)


def test_pixel_weight_bounds():
    assert pixel_weight(0) == pytest.approx(0.1)
    assert pixel_weight(255) == pytest.approx(0.999)


def test_pixel_weight_monotonic_array():
    weights = pixel_weight(np.arange(256, dtype=np.uint8))
    assert weights.shape == (256,)
    assert np.all(np.diff(weights) > 0)
    assert weights.min() >= 0.1 and weights.max() < 1.0


def test_one_hot_rows():
    targets = one_hot([2, 0], np.float64)
    assert targets.shape == (2, 10)
    assert np.argmax(targets, axis=1).tolist() == [2, 0]
    assert targets[0, 2] == pytest.approx(0.9)
    assert np.allclose(np.delete(targets[0], 2), 0.1)


def test_one_hot_dtype_and_range():
    assert one_hot([1], np.float32).dtype == np.float32
    with pytest.raises(ValueError):
        one_hot([10], np.float64)


def test_load_train(tmp_path):
    images = np.array([[0, 255, 0, 255], [255, 255, 0, 0]], dtype=np.uint8)
    _write_images(tmp_path / "train-images.idx3-ubyte", images, 2, 2)
    _write_labels(tmp_path / "train-labels.idx1-ubyte", [7, 1])
    inputs, targets = load("train", tmp_path, np.float32)
    assert inputs.shape == (2, 4)
    assert targets.shape == (2, 10)
    assert inputs.dtype == np.float32
    assert np.allclose(inputs, pixel_weight(images))
    assert np.argmax(targets, axis=1).tolist() == [7, 1]


def test_load_test_set_files(tmp_path):
    _write_images(tmp_path / "t10k-images.idx3-ubyte", np.zeros((1, 4)), 2, 2)
    _write_labels(tmp_path / "t10k-labels.idx1-ubyte", [5])
    inputs, targets = load("test", tmp_path, np.float64)
    assert inputs.shape == (1, 4)
    assert int(np.argmax(targets[0])) == 5


def test_load_count_mismatch(tmp_path):
    _write_images(tmp_path / "t10k-images.idx3-ubyte", np.zeros((2, 4)), 2, 2)
    _write_labels(tmp_path / "t10k-labels.idx1-ubyte", [5])
    with pytest.raises(ValueError):
        load("test", tmp_path, np.float64)


def test_load_unknown_name(tmp_path):
    with pytest.raises(ValueError):
        load("validation", tmp_path, np.float64)


def test_batch_bounds_drops_partial():
    assert list(batch_bounds(250, 100)) == [(0, 100), (100, 200)]


def test_batch_bounds_cover_contiguously():
    bounds = list(batch_bounds(1000, 100))
    assert len(bounds) == 10
    assert all(end - start == 100 for start, end in bounds)
    assert all(a[1] == b[0] for a, b in zip(bounds, bounds[1:]))


def test_batch_bounds_small_and_invalid():
    assert list(batch_bounds(50, 100)) == []
    with pytest.raises(ValueError):
        list(batch_bounds(10, 0))