"""A three-layer feed-forward network for classifying MNIST digits."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

INPUT_SIZE = 784
HIDDEN_SIZES = (300, 100)
OUTPUT_SIZE = 10
DEFAULT_SEED = 7945


def glorot_normal(
    shape: Sequence[int],
    gain: float = 1.0,
    rng: np.random.Generator | None = None,
    dtype=np.float64,
) -> np.ndarray:
    """Draw weights from N(0, gain * sqrt(2 / (fan_in + fan_out)))."""
    shape = tuple(int(d) for d in shape)
    if not shape or any(d <= 0 for d in shape):
        raise ValueError(f"invalid weight shape {shape}")
    if len(shape) == 1:
        fan_in = fan_out = shape[0]
    else:
        fan_in, fan_out = shape[0], shape[1]
        for extra in shape[2:]:
            fan_in *= extra
            fan_out *= extra
    std = gain * np.sqrt(2.0 / (fan_in + fan_out))
    rng = rng if rng is not None else np.random.default_rng()
    return (rng.standard_normal(shape) * std).astype(dtype)


def relu(x) -> np.ndarray:
    """Rectified linear unit: ``max(x, 0)`` element-wise."""
    x = np.asarray(x)
    return np.maximum(x, np.zeros((), dtype=x.dtype))


def softmax(x) -> np.ndarray:
    """Softmax along the last axis, stabilised against overflow."""
    x = np.asarray(x)
    shifted = x - np.max(x, axis=-1, keepdims=True)
    exps = np.exp(shifted)
    return exps / np.sum(exps, axis=-1, keepdims=True)


class Network:
    """784-300-100-10 perceptron with ReLU hidden layers and a softmax output.

    The layers carry no biases. The cost is the negated mean of the
    element-wise product of predictions and targets.
    """

    def __init__(self, dtype=np.float64, rng: np.random.Generator | None = None):
        self.dtype = np.dtype(dtype)
        rng = rng if rng is not None else np.random.default_rng(DEFAULT_SEED)
        sizes = (INPUT_SIZE, *HIDDEN_SIZES, OUTPUT_SIZE)
        self.w0, self.w1, self.w2 = (
            glorot_normal((fan_in, fan_out), 1.0, rng, self.dtype)
            for fan_in, fan_out in zip(sizes, sizes[1:])
        )

    def learnables(self) -> list[np.ndarray]:
        """The weight matrices, in layer order; updating them in place trains the network."""
        return [self.w0, self.w1, self.w2]

    def _check_input(self, x) -> np.ndarray:
        x = np.asarray(x, dtype=self.dtype)
        if x.ndim != 2 or x.shape[1] != self.w0.shape[0]:
            raise ValueError(
                f"Unable to multiply l0 and w0: input shape {x.shape} "
                f"does not match weights {self.w0.shape}"
            )
        return x

    def _layers(self, x: np.ndarray):
        a1 = x @ self.w0
        h1 = relu(a1)
        a2 = h1 @ self.w1
        h2 = relu(a2)
        out = softmax(h2 @ self.w2)
        return a1, h1, a2, h2, out

    def forward(self, x) -> np.ndarray:
        """Return the softmax predictions for a batch of flattened images."""
        return self._layers(self._check_input(x))[-1]

    def cost(self, predictions, targets) -> float:
        """Negated mean of the element-wise product of predictions and targets."""
        predictions = np.asarray(predictions)
        targets = np.asarray(targets)
        if predictions.shape != targets.shape:
            raise ValueError(
                f"predictions {predictions.shape} and targets {targets.shape} differ in shape"
            )
        return float(-np.mean(predictions * targets))

    def gradients(self, x, targets) -> tuple[float, list[np.ndarray]]:
        """Run a forward and backward pass.

        Returns the cost and the gradients of the cost with respect to each
        learnable, in the order of :meth:`learnables`.
        """
        x = self._check_input(x)
        targets = np.asarray(targets, dtype=self.dtype)
        a1, h1, a2, h2, out = self._layers(x)
        cost = self.cost(out, targets)

        d_out = -targets / targets.size
        d_logits = out * (d_out - np.sum(d_out * out, axis=-1, keepdims=True))
        g2 = h2.T @ d_logits
        d_a2 = (d_logits @ self.w2.T) * (a2 > 0)
        g1 = h1.T @ d_a2
        d_a1 = (d_a2 @ self.w1.T) * (a1 > 0)
        g0 = x.T @ d_a1
        grads = [g.astype(self.dtype) for g in (g0, g1, g2)]
        return cost, grads