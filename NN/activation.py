# NN/activation.py
from __future__ import annotations
import math
from typing import Protocol

import numpy as np


class ActivationFunction(Protocol):
    def apply(self, z: np.ndarray) -> np.ndarray: ...
    def apply_scalar(self, x: float) -> float: ...
    def gradient(self, z: np.ndarray) -> np.ndarray: ...


class Sigmoid:
    """
    Logistic function, element-wise:

        S(t) = 1 / (1 + e^-t)

    gradient: S(t) * (1 - S(t))
    """
    name = "sigmoid"

    def apply(self, z: np.ndarray) -> np.ndarray:
        # clip keeps exp() finite for saturated inputs
        return 1.0 / (1.0 + np.exp(-np.clip(z, -500, 500)))

    def apply_scalar(self, x: float) -> float:
        return 1.0 / (1.0 + math.exp(-max(-500.0, min(500.0, x))))

    def gradient(self, z: np.ndarray) -> np.ndarray:
        s = self.apply(z)
        return s * (1.0 - s)

    def __repr__(self) -> str:
        return "Sigmoid()"


class HyperbolicTangent:
    """
    tanh(t) = (1 - e^-2t) / (1 + e^-2t)

    gradient: 1 / cosh^2(t)
    """
    name = "tanh"

    def apply(self, z: np.ndarray) -> np.ndarray:
        return np.tanh(z)

    def apply_scalar(self, x: float) -> float:
        return math.tanh(x)

    def gradient(self, z: np.ndarray) -> np.ndarray:
        c = np.cosh(np.clip(z, -350, 350))
        return 1.0 / (c * c)

    def __repr__(self) -> str:
        return "HyperbolicTangent()"


_ACTIVATIONS = {
    "sigmoid": Sigmoid,
    "tanh": HyperbolicTangent,
}


def get_activation(name: str | None) -> ActivationFunction:
    """Resolve an activation by name; None means the default (sigmoid)."""
    if name is None:
        return Sigmoid()
    try:
        return _ACTIVATIONS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown activation: {name!r} (expected one of {sorted(_ACTIVATIONS)})")
