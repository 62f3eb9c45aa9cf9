# core/interfaces.py
from __future__ import annotations
from typing import Protocol, Iterable, Sequence
import numpy as np


class Predictor(Protocol):
    """Anything that maps a (B, features) batch to (B, outputs) class scores."""
    def predict(self, batch: np.ndarray) -> np.ndarray: ...


class FeatureSource(Protocol):
    """Produces feature rows, optionally with a trailing truth label."""
    def rows(self) -> Iterable[Sequence[float]]: ...
