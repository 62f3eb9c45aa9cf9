# core/dataset.py
from __future__ import annotations
import logging
import math
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from core.interfaces import FeatureSource
from core.reader import read_csv_file


class DataSet:
    """
    Samples (rows = examples, columns = features) with optional ground truth.

    When `has_truth` is set, truth is a (rows, 1) matrix whose row i labels
    sample row i, and the last value of every row handed to `add_samples`
    is taken as the label.
    """

    def __init__(
        self,
        has_truth: bool = True,
        samples: Optional[np.ndarray] = None,
        truth: Optional[np.ndarray] = None,
        rng: Optional[np.random.Generator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._has_truth = bool(has_truth)
        self._samples = None if samples is None else np.array(samples, dtype=float, ndmin=2)
        self._truth = None if truth is None else np.array(truth, dtype=float, ndmin=2)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._log = logger or logging.getLogger(__name__)

        if self._has_truth and self._samples is not None and self._truth is not None:
            if self._samples.shape[0] != self._truth.shape[0]:
                raise ValueError(
                    f"samples have {self._samples.shape[0]} rows but truth has {self._truth.shape[0]}"
                )

    # --- accessors ---
    @property
    def samples(self) -> Optional[np.ndarray]:
        return self._samples

    @property
    def truth(self) -> Optional[np.ndarray]:
        return self._truth

    @property
    def has_truth(self) -> bool:
        return self._has_truth

    @property
    def num_samples(self) -> int:
        return 0 if self._samples is None else self._samples.shape[0]

    @property
    def num_cols_samples(self) -> int:
        return 0 if self._samples is None else self._samples.shape[1]

    @property
    def num_cols_truth(self) -> int:
        return 0 if self._truth is None else self._truth.shape[1]

    def __len__(self) -> int:
        return self.num_samples

    def __repr__(self) -> str:
        return (f"DataSet(rows={self.num_samples}, features={self.num_cols_samples}, "
                f"has_truth={self._has_truth})")

    # --- building ---
    def add_samples(self, rows: Iterable[Sequence[float]]) -> None:
        for row in rows:
            values = np.asarray(row, dtype=float).reshape(1, -1)
            if self._has_truth:
                self._samples = self._stack(self._samples, values[:, :-1])
                self._truth = self._stack(self._truth, values[:, -1:])
            else:
                self._samples = self._stack(self._samples, values)

    def add_sample(self, row: Sequence[float]) -> None:
        self.add_samples([np.asarray(row, dtype=float).reshape(-1)])

    def add_from_csv_file(self, path: str) -> None:
        self.add_samples(read_csv_file(path))

    def add_from_source(self, source: FeatureSource) -> None:
        self.add_samples(source.rows())

    @staticmethod
    def _stack(current: Optional[np.ndarray], rows: np.ndarray) -> np.ndarray:
        return rows.copy() if current is None else np.vstack([current, rows])

    # --- shuffling ---
    def randomize(self) -> None:
        """
        Approximate shuffle: rows * 5 random pair swaps. Truth rows move
        together with their sample rows.
        """
        n = self.num_samples
        if n == 0:
            return
        swap_truth = self._has_truth and self._truth is not None
        for _ in range(n * 5):
            a, b = self._rng.integers(n, size=2)
            self._samples[[a, b]] = self._samples[[b, a]]
            if swap_truth:
                self._truth[[a, b]] = self._truth[[b, a]]

    # --- splitting ---
    def _child_rng(self) -> np.random.Generator:
        return np.random.default_rng(self._rng.integers(2**32))

    def _subset(self, idx: np.ndarray) -> "DataSet":
        if self._samples is None:
            return DataSet(self._has_truth, rng=self._child_rng(), logger=self._log)
        samples = self._samples[idx].copy()
        truth = self._truth[idx].copy() if self._truth is not None else None
        return DataSet(self._has_truth, samples, truth, rng=self._child_rng(), logger=self._log)

    def split_sequentially(self, percent: float) -> Tuple["DataSet", "DataSet"]:
        """
        (training, testing): the first ceil(percent% of rows) rows in current
        order train, the remainder test. Call randomize() first.
        """
        n = self.num_samples
        train_end = min(n, math.ceil(percent * n / 100))
        idx = np.arange(n)
        return self._subset(idx[:train_end]), self._subset(idx[train_end:])

    def split_equally(self, percent: float) -> Tuple["DataSet", "DataSet"]:
        """
        (training, testing) where training holds `half` positive and `half`
        negative rows chosen at random, half = ceil((percent% of rows) / 2).
        Falls back to split_sequentially when either class is too small.
        """
        if not self._has_truth or self._truth is None:
            raise ValueError("split_equally requires a DataSet with truth")

        n = self.num_samples
        half = math.ceil(percent * n / 200)
        labels = self._truth[:, 0]
        pos = np.flatnonzero(labels == 1.0)
        neg = np.flatnonzero(labels != 1.0)

        if len(pos) < half or len(neg) < half:
            self._log.warning(
                "cannot split DataSet equally (%d pos, %d neg, want %d each); splitting sequentially",
                len(pos), len(neg), half,
            )
            return self.split_sequentially(percent)

        chosen = np.concatenate([
            self._rng.choice(pos, size=half, replace=False),
            self._rng.choice(neg, size=half, replace=False),
        ])
        chosen = self._rng.permutation(chosen)
        selected = np.zeros(n, dtype=bool)
        selected[chosen] = True
        return self._subset(chosen), self._subset(np.flatnonzero(~selected))

    def dup(self) -> "DataSet":
        samples = None if self._samples is None else self._samples.copy()
        truth = None if self._truth is None else self._truth.copy()
        return DataSet(self._has_truth, samples, truth, rng=self._child_rng(), logger=self._log)
