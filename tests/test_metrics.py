# tests/test_metrics.py
import csv
import math

import pytest

from training.cost_log import COST_KEYS, CSVLogger, make_cost_logger
from training.metrics import FoldStats


def scores(**overrides):
    base = {"tp": 4, "fp": 2, "tn": 3, "fn": 1, "precision": 0.5, "recall": 0.8, "f1": 0.6}
    base.update(overrides)
    return base


def test_single_fold_has_zero_variance():
    stats = FoldStats()
    stats.add(scores())
    assert len(stats) == 1
    assert stats.mean("tp") == 4
    assert stats.variance("tp") == 0.0


def test_mean_and_sample_variance():
    stats = FoldStats()
    for f1 in (0.2, 0.4, 0.6):
        stats.add(scores(f1=f1))
    assert stats.mean("f1") == pytest.approx(0.4)
    assert stats.variance("f1") == pytest.approx(0.04)
    summary = stats.summary()
    assert set(summary) == {"tp", "fp", "tn", "fn", "precision", "recall", "f1"}
    assert summary["tn"] == {"mean": 3.0, "variance": 0.0}


def test_empty_stats_are_nan():
    stats = FoldStats()
    assert len(stats) == 0
    assert math.isnan(stats.mean("f1"))
    assert math.isnan(stats.variance("f1"))


def test_nan_fold_propagates():
    stats = FoldStats()
    stats.add(scores(precision=float("nan")))
    stats.add(scores())
    assert math.isnan(stats.mean("precision"))


def test_csv_logger_writes_header_once(tmp_path):
    path = tmp_path / "logs" / "cost.csv"
    with CSVLogger(str(path), fieldnames=COST_KEYS) as log:
        log.log(1, {"fold": 1, "train/cost": 0.9})
        log.log(2, {"fold": 1, "train/cost": 0.8, "ignored": 1})
    with CSVLogger(str(path), fieldnames=COST_KEYS) as log:
        log.log(1, {"fold": 2, "train/cost": 0.7})

    with path.open(newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["step"] for r in rows] == ["1", "2", "1"]
    assert rows[2]["fold"] == "2"
    assert path.read_text().count("train/cost") == 1


def test_csv_logger_discovers_header(tmp_path):
    path = tmp_path / "free.csv"
    log = CSVLogger(str(path))
    log.log(3, {"a": 1})
    log.close()
    log.close()
    assert path.read_text().splitlines()[0] == "step,a"


def test_make_cost_logger(tmp_path):
    path = tmp_path / "cost.csv"
    with CSVLogger(str(path), fieldnames=COST_KEYS) as log:
        hook = make_cost_logger(log, fold=3, log_every=2)
        for i in range(1, 6):
            hook(i, 1.0 / i)
    with path.open(newline="") as f:
        rows = list(csv.DictReader(f))
    assert [int(r["step"]) for r in rows] == [2, 4]
    assert all(r["fold"] == "3" for r in rows)
    assert float(rows[0]["train/cost"]) == pytest.approx(0.5)
