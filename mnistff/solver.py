"""RMSProp optimiser updating weight arrays in place."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

DEFAULT_LEARN_RATE = 0.001
DEFAULT_EPS = 1e-8
DEFAULT_RHO = 0.999


class RMSPropSolver:
    """RMSProp with a per-parameter running average of squared gradients.

    Gradients are divided by the batch size before use. For each parameter::

        cache = rho * cache + (1 - rho) * grad ** 2
        param -= learn_rate * grad / sqrt(cache + eps)
    """

    def __init__(
        self,
        learn_rate: float = DEFAULT_LEARN_RATE,
        eps: float = DEFAULT_EPS,
        rho: float = DEFAULT_RHO,
        batch_size: float = 1.0,
    ):
        if learn_rate <= 0:
            raise ValueError("learning rate must be positive")
        if eps < 0:
            raise ValueError("eps must not be negative")
        if not 0.0 <= rho <= 1.0:
            raise ValueError("rho must lie in [0, 1]")
        if batch_size <= 0:
            raise ValueError("batch size must be positive")
        self.learn_rate = float(learn_rate)
        self.eps = float(eps)
        self.rho = float(rho)
        self.batch_size = float(batch_size)
        self._cache: list[np.ndarray] = []

    def step(self, params: Sequence[np.ndarray], grads: Sequence[np.ndarray]) -> None:
        """Update each parameter array in place from its gradient."""
        if len(params) != len(grads):
            raise ValueError(
                f"{len(params)} parameters but {len(grads)} gradients"
            )
        prepared = []
        for param, grad in zip(params, grads):
            if not isinstance(param, np.ndarray):
                raise TypeError("parameters must be numpy arrays to update in place")
            grad = np.asarray(grad, dtype=np.float64)
            if grad.shape != param.shape:
                raise ValueError(
                    f"gradient shape {grad.shape} does not match parameter {param.shape}"
                )
            prepared.append((param, grad / self.batch_size))

        if len(self._cache) != len(prepared) or any(
            cache.shape != param.shape
            for cache, (param, _) in zip(self._cache, prepared)
        ):
            self._cache = [np.zeros(param.shape, dtype=np.float64) for param, _ in prepared]

        for cache, (param, grad) in zip(self._cache, prepared):
            cache *= self.rho
            cache += (1.0 - self.rho) * grad * grad
            with np.errstate(divide="ignore", invalid="ignore"):
                update = self.learn_rate * grad / np.sqrt(cache + self.eps)
            update = np.where(grad == 0, 0.0, update)
            param -= update.astype(param.dtype)