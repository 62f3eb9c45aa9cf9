# tests/test_prediction.py
import math

import numpy as np
import pytest

from core.dataset import DataSet
from core.prediction import Outcome, Prediction


class FixedScores:
    """Predictor that returns canned scores regardless of the batch."""
    def __init__(self, scores):
        self.scores = np.asarray(scores, dtype=float).reshape(-1, 1)
        self.seen = None

    def predict(self, batch):
        self.seen = np.asarray(batch)
        return self.scores[: len(batch)]


@pytest.fixture
def scored():
    samples = np.arange(1, 11, dtype=float).reshape(10, 1)
    truth = np.array([1, 1, 1, 1, 1, 0, 0, 0, 0, 0], dtype=float).reshape(10, 1)
    model = FixedScores([1, 1, 1, 0, 1, 0, 1, 0, 1, 0])
    p = Prediction(model, 0.5)
    p.predict(DataSet(True, samples, truth))
    return p


def test_counts(scored):
    assert scored.true_positives == 4
    assert scored.true_negatives == 3
    assert scored.false_positives == 2
    assert scored.false_negatives == 1


def test_metrics(scored):
    assert scored.precision == pytest.approx(2 / 3)
    assert scored.recall == pytest.approx(0.8)
    assert scored.f1 == pytest.approx(0.727272, abs=1e-5)


def test_rows_are_bucketed(scored):
    np.testing.assert_array_equal(scored.true_positive_samples.reshape(-1), [1, 2, 3, 5])
    np.testing.assert_array_equal(scored.true_negative_samples.reshape(-1), [6, 8, 10])
    np.testing.assert_array_equal(scored.false_positive_samples.reshape(-1), [7, 9])
    np.testing.assert_array_equal(scored.false_negative_samples.reshape(-1), [4])
    np.testing.assert_array_equal(scored.samples_for(Outcome.FALSE_NEG), [[4.0]])


def test_summary(scored):
    s = scored.summary()
    assert (s["tp"], s["fp"], s["tn"], s["fn"]) == (4, 2, 3, 1)
    assert s["f1"] == pytest.approx(scored.f1)


def test_model_sees_copy_of_samples():
    samples = np.array([[0.2], [0.8]])
    ds = DataSet(True, samples, np.array([[0.0], [1.0]]))
    model = FixedScores([0.1, 0.9])
    Prediction(model, 0.5).predict(ds)
    model.seen[0, 0] = 42.0
    assert ds.samples[0, 0] == pytest.approx(0.2)


def test_score_equal_to_threshold_is_negative():
    ds = DataSet(True, np.array([[1.0], [2.0]]), np.array([[1.0], [0.0]]))
    p = Prediction(FixedScores([0.5, 0.5]), 0.5)
    p.predict(ds)
    assert p.false_negatives == 1
    assert p.true_negatives == 1


def test_no_positive_predictions_gives_nan():
    ds = DataSet(True, np.array([[1.0], [2.0]]), np.array([[1.0], [0.0]]))
    p = Prediction(FixedScores([0.0, 0.0]), 0.5)
    p.predict(ds)
    assert math.isnan(p.precision)
    assert p.recall == 0.0
    assert math.isnan(p.f1)


def test_predict_resets_previous_results(scored):
    ds = DataSet(True, np.array([[1.0]]), np.array([[1.0]]))
    scored.model = FixedScores([1.0])
    scored.predict(ds)
    assert (scored.true_positives, scored.false_positives) == (1, 0)
    assert scored.false_positive_samples.shape == (0, 1)


def test_requires_truth():
    ds = DataSet(False, np.array([[1.0]]))
    with pytest.raises(ValueError):
        Prediction(FixedScores([1.0]), 0.5).predict(ds)


def test_with_network():
    from NN.neuralnet import NeuralNetwork
    net = NeuralNetwork([2, 1], thetas=[np.array([[-300.0, 200.0, 200.0]])])
    ds = DataSet(True, np.array([[0, 0], [0, 1], [1, 0], [1, 1]]), np.array([[0], [0], [0], [1]]))
    p = Prediction(net, 0.5)
    p.predict(ds)
    assert (p.true_positives, p.true_negatives) == (1, 3)
    assert p.f1 == pytest.approx(1.0)
