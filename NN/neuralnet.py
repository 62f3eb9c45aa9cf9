from __future__ import annotations
import math
from typing import Optional, Sequence

import numpy as np

from NN.activation import ActivationFunction, Sigmoid
from NN.errors import LayerIndexError, NetworkConfigError, NotComputedError


class NeuralNetwork:
    """
    Fully connected feedforward network with a bias unit on every layer input.

    layer_sizes like [in, h1, h2, out]. theta[i] connects layer i to layer i+1
    and has shape (sizes[i+1], sizes[i] + 1); column 0 holds the bias weights.
    Activations, pre-activations and deltas from the last pass are cached on
    the instance and replaced whenever new inputs are set.
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        thetas: Optional[Sequence[np.ndarray]] = None,
        activation: Optional[ActivationFunction] = None,
        lam: float = 0.0,
        inputs: Optional[np.ndarray] = None,
        expected: Optional[np.ndarray] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if len(layer_sizes) < 2:
            raise NetworkConfigError("must have at least 2 layers")
        if any(int(s) <= 0 for s in layer_sizes):
            raise NetworkConfigError(f"layer sizes must be positive, got {list(layer_sizes)}")
        if lam < 0:
            raise NetworkConfigError(f"lambda must be >= 0, got {lam}")

        self._layer_sizes = tuple(int(s) for s in layer_sizes)
        self._activation = activation if activation is not None else Sigmoid()
        self._lam = float(lam)
        self._rng = rng if rng is not None else np.random.default_rng()

        n = len(self._layer_sizes)
        self._activations: list[Optional[np.ndarray]] = [None] * n
        self._zs: list[Optional[np.ndarray]] = [None] * n
        self._deltas: list[Optional[np.ndarray]] = [None] * n
        self._expected: Optional[np.ndarray] = None

        if thetas is None:
            self._thetas = self._init_thetas()
        else:
            self._thetas = self._check_thetas(thetas)

        if inputs is not None:
            self.set_inputs(inputs)
        if expected is not None:
            self.set_expected(expected)

    # --- construction helpers ---
    def _init_thetas(self) -> list[np.ndarray]:
        """Uniform in [-r, r) with r = sqrt(6)/sqrt(in + out) to break symmetry."""
        thetas = []
        for inp, out in zip(self._layer_sizes, self._layer_sizes[1:]):
            r = math.sqrt(6) / math.sqrt(inp + out)
            thetas.append(self._rng.uniform(-r, r, size=(out, inp + 1)))
        return thetas

    def _check_thetas(self, thetas: Sequence[np.ndarray]) -> list[np.ndarray]:
        if len(thetas) != self.num_thetas:
            raise NetworkConfigError(
                f"expected {self.num_thetas} theta matrices for layers {list(self._layer_sizes)}, got {len(thetas)}"
            )
        checked = []
        for i, theta in enumerate(thetas):
            t = np.array(theta, dtype=float, ndmin=2)
            want = (self._layer_sizes[i + 1], self._layer_sizes[i] + 1)
            if t.shape != want:
                raise NetworkConfigError(f"theta {i} must have shape {want}, got {t.shape}")
            checked.append(t)
        return checked

    # --- properties ---
    @property
    def layer_sizes(self) -> tuple[int, ...]:
        return self._layer_sizes

    @property
    def activation(self) -> ActivationFunction:
        return self._activation

    @property
    def lam(self) -> float:
        return self._lam

    @property
    def num_thetas(self) -> int:
        return len(self._layer_sizes) - 1

    @property
    def thetas(self) -> list[np.ndarray]:
        return [t.copy() for t in self._thetas]

    def set_thetas(self, thetas: Sequence[np.ndarray]) -> None:
        self._thetas = self._check_thetas(thetas)

    # --- matrix helpers ---
    @staticmethod
    def add_bias(matrix: np.ndarray) -> np.ndarray:
        """Prepend a column of ones."""
        m = np.asarray(matrix, dtype=float)
        return np.hstack([np.ones((m.shape[0], 1)), m])

    @staticmethod
    def matrix_no_bias(matrix: np.ndarray) -> np.ndarray:
        """The matrix without its first (bias) column."""
        return np.asarray(matrix)[:, 1:]

    # --- passes ---
    def set_inputs(self, batch: np.ndarray) -> None:
        x = np.array(batch, dtype=float, ndmin=2)
        if x.shape[1] != self._layer_sizes[0]:
            raise ValueError(f"Expected inputs of shape (B, {self._layer_sizes[0]}), got {x.shape}")
        n = len(self._layer_sizes)
        self._activations = [None] * n
        self._zs = [None] * n
        self._deltas = [None] * n
        self._activations[0] = self.add_bias(x)

    def set_expected(self, expected: np.ndarray) -> None:
        self._expected = np.array(expected, dtype=float, ndmin=2)

    def forward_propagation(self) -> None:
        if self._activations[0] is None:
            raise NotComputedError("inputs must be set before forward propagation")
        last = len(self._layer_sizes) - 1
        for i, theta in enumerate(self._thetas):
            z = self._activations[i] @ theta.T
            a = self._activation.apply(z)
            self._zs[i + 1] = z
            self._activations[i + 1] = a if i + 1 == last else self.add_bias(a)

    def predict(self, batch: np.ndarray) -> np.ndarray:
        """Forward pass on `batch`; returns the output layer activation (B, out)."""
        self.set_inputs(batch)
        self.forward_propagation()
        return self._activations[-1]

    def back_propagation(self) -> None:
        """
        Output delta is (a_out - expected); hidden deltas are
        (delta[i+1] @ theta[i]) without the bias column, times g'(z[i]).
        """
        out = len(self._layer_sizes) - 1
        if self._activations[out] is None:
            raise NotComputedError("forward propagation must run before back propagation")
        if self._expected is None:
            raise ValueError("expected values must be set before back propagation")
        if self._expected.shape != self._activations[out].shape:
            raise ValueError(
                f"expected values have shape {self._expected.shape}, "
                f"output layer has shape {self._activations[out].shape}"
            )

        self._deltas[out] = self._activations[out] - self._expected
        for i in range(out - 1, 0, -1):
            back = self.matrix_no_bias(self._deltas[i + 1] @ self._thetas[i])
            self._deltas[i] = back * self._activation.gradient(self._zs[i])

    # --- accessors ---
    def get_theta(self, index: int) -> np.ndarray:
        if not 0 <= index < len(self._thetas):
            raise LayerIndexError("theta", index, len(self._thetas))
        return self._thetas[index]

    def get_delta(self, index: int) -> np.ndarray:
        if not 0 <= index < len(self._deltas):
            raise LayerIndexError("delta", index, len(self._deltas))
        delta = self._deltas[index]
        if delta is None:
            raise NotComputedError(f"delta {index} has not been computed; run back propagation first")
        return delta

    def get_activation(self, index: int) -> np.ndarray:
        if not 0 <= index < len(self._activations):
            raise LayerIndexError("activation", index, len(self._activations))
        a = self._activations[index]
        if a is None:
            raise NotComputedError(f"activation {index} has not been computed")
        return a

    # --- cost & gradients ---
    def _num_inputs(self) -> int:
        return self.get_activation(0).shape[0]

    def get_theta_regularization(self, n: int) -> float:
        total = sum(float(np.sum(self.matrix_no_bias(t) ** 2)) for t in self._thetas)
        return (self._lam / (2 * n)) * total

    def get_cost_no_regularization(self, n: int) -> float:
        """Binary cross-entropy of the output layer against the expected values."""
        h = self.get_activation(len(self._layer_sizes) - 1)
        if self._expected is None:
            raise ValueError("expected values must be set to compute cost")
        y = self._expected
        return float(np.sum(-y * np.log(h) - (1.0 - y) * np.log(1.0 - h)) / n)

    def get_cost(self) -> float:
        n = self._num_inputs()
        return self.get_cost_no_regularization(n) + self.get_theta_regularization(n)

    def get_theta_gradient(self, index: int) -> np.ndarray:
        theta = self.get_theta(index)
        n = self._num_inputs()
        grad = (self.get_activation(index).T @ self.get_delta(index + 1)).T / n
        reg = (self._lam / n) * theta
        reg[:, 0] = 0.0  # bias column is not regularized
        return grad + reg

    def __str__(self):
        desc = [f"NeuralNetwork({' → '.join(str(s) for s in self._layer_sizes)}, "
                f"activation={self._activation!r}, lambda={self._lam})"]
        for i, t in enumerate(self._thetas):
            desc.append(f"  theta[{i}]: {t.shape[0]}x{t.shape[1]}")
        return "\n".join(desc)
