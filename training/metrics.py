from __future__ import annotations
from typing import Dict, List, Mapping

import numpy as np

FOLD_KEYS = ("tp", "fp", "tn", "fn", "precision", "recall", "f1")


class FoldStats:
    """Collects per-fold scores and reports mean and sample variance per metric."""
    def __init__(self, keys=FOLD_KEYS):
        self.keys = tuple(keys)
        self.buf: Dict[str, List[float]] = {k: [] for k in self.keys}

    def __len__(self) -> int:
        return len(self.buf[self.keys[0]]) if self.keys else 0

    def add(self, scores: Mapping[str, float]) -> None:
        for k in self.keys:
            self.buf[k].append(float(scores[k]))

    def mean(self, key: str) -> float:
        return float(np.mean(self.buf[key])) if self.buf[key] else float("nan")

    def variance(self, key: str) -> float:
        """Bias-corrected (n - 1) variance; a single fold has variance 0."""
        values = self.buf[key]
        if not values:
            return float("nan")
        if len(values) == 1:
            return 0.0
        return float(np.var(values, ddof=1))

    def summary(self) -> Dict[str, Dict[str, float]]:
        return {k: {"mean": self.mean(k), "variance": self.variance(k)} for k in self.keys}
