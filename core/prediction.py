# core/prediction.py
from __future__ import annotations
from enum import Enum
from typing import Any, Dict

import numpy as np

from core.dataset import DataSet
from core.interfaces import Predictor


class Outcome(Enum):
    TRUE_POS = "tp"
    TRUE_NEG = "tn"
    FALSE_POS = "fp"
    FALSE_NEG = "fn"


class Prediction:
    """
    Scores a trained model on a labelled DataSet (normally the testing split).

    Scores above `threshold` are class 1. Every row lands in exactly one of
    TP/TN/FP/FN; the row itself is kept in the matching bucket so that
    misclassified samples can be inspected afterwards.

    Precision, recall and F1 are plain ratios: an empty denominator gives NaN.
    """

    def __init__(self, model: Predictor, threshold: float):
        self.model = model
        self.threshold = float(threshold)
        self._reset()

    def _reset(self, num_cols: int = 0) -> None:
        self._counts = {o: 0 for o in Outcome}
        self._buckets = {o: np.empty((0, num_cols)) for o in Outcome}
        self._precision = float("nan")
        self._recall = float("nan")
        self._f1 = float("nan")

    def save_sample_to_class(self, sample: np.ndarray, outcome: Outcome) -> None:
        row = np.array(sample, dtype=float, ndmin=2)
        bucket = self._buckets[outcome]
        if bucket.shape[0] == 0:
            self._buckets[outcome] = row.copy()
        else:
            self._buckets[outcome] = np.vstack([bucket, row])

    def predict(self, dataset: DataSet) -> None:
        if not dataset.has_truth or dataset.truth is None:
            raise ValueError("Prediction needs a DataSet with truth")
        samples = dataset.samples.copy()
        truth = dataset.truth.copy()
        self._reset(samples.shape[1])

        scores = np.asarray(self.model.predict(samples))
        for i in range(scores.shape[0]):
            predicted = scores[i, 0] > self.threshold
            actual = truth[i, 0] > self.threshold
            if actual:
                outcome = Outcome.TRUE_POS if predicted else Outcome.FALSE_NEG
            else:
                outcome = Outcome.FALSE_POS if predicted else Outcome.TRUE_NEG
            self._counts[outcome] += 1
            self.save_sample_to_class(samples[i], outcome)

        tp = self._counts[Outcome.TRUE_POS]
        fp = self._counts[Outcome.FALSE_POS]
        fn = self._counts[Outcome.FALSE_NEG]
        with np.errstate(divide="ignore", invalid="ignore"):
            self._precision = float(np.divide(tp, tp + fp))
            self._recall = float(np.divide(tp, tp + fn))
            p, r = np.float64(self._precision), np.float64(self._recall)
            self._f1 = float(2 * (p * r) / (p + r))

    # --- metrics ---
    @property
    def precision(self) -> float:
        return self._precision

    @property
    def recall(self) -> float:
        return self._recall

    @property
    def f1(self) -> float:
        return self._f1

    # --- counts ---
    @property
    def true_positives(self) -> int:
        return self._counts[Outcome.TRUE_POS]

    @property
    def true_negatives(self) -> int:
        return self._counts[Outcome.TRUE_NEG]

    @property
    def false_positives(self) -> int:
        return self._counts[Outcome.FALSE_POS]

    @property
    def false_negatives(self) -> int:
        return self._counts[Outcome.FALSE_NEG]

    # --- bucketed samples ---
    def samples_for(self, outcome: Outcome) -> np.ndarray:
        return self._buckets[outcome]

    @property
    def true_positive_samples(self) -> np.ndarray:
        return self._buckets[Outcome.TRUE_POS]

    @property
    def true_negative_samples(self) -> np.ndarray:
        return self._buckets[Outcome.TRUE_NEG]

    @property
    def false_positive_samples(self) -> np.ndarray:
        return self._buckets[Outcome.FALSE_POS]

    @property
    def false_negative_samples(self) -> np.ndarray:
        return self._buckets[Outcome.FALSE_NEG]

    def summary(self) -> Dict[str, Any]:
        return {
            "tp": self.true_positives,
            "fp": self.false_positives,
            "tn": self.true_negatives,
            "fn": self.false_negatives,
            "precision": self._precision,
            "recall": self._recall,
            "f1": self._f1,
        }
