# tests/conftest.py
import os
import sys

# Headless SDL so image tests don't need a display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

# Ensure project root is importable (so NN.* / core.* imports work when running from repo root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import numpy as np
import pygame as pg
import pytest


@pytest.fixture(scope="session", autouse=True)
def _pygame_session():
    pg.init()
    yield
    pg.quit()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


# 8-sample batch shared by the cost/delta/gradient tests
@pytest.fixture
def batch():
    inputs = np.array([
        [0.126222, 0.077800],
        [0.956743, 0.682936],
        [0.723205, 0.311276],
        [0.307307, 0.429310],
        [0.772100, 0.066606],
        [0.660782, 0.067908],
        [0.161723, 0.994278],
        [0.472773, 0.777440],
    ])
    expected = np.array([[0.0], [0.0], [0.0], [1.0], [1.0], [0.0], [1.0], [1.0]])
    return inputs, expected


@pytest.fixture
def dataset_factory(rng):
    from core.dataset import DataSet
    def make(samples, truth=None, has_truth=None, **kwargs):
        if has_truth is None:
            has_truth = truth is not None
        kwargs.setdefault("rng", rng)
        return DataSet(has_truth, np.asarray(samples, dtype=float),
                       None if truth is None else np.asarray(truth, dtype=float), **kwargs)
    return make


def logic_table(fn, n_inputs, n, rng):
    """n random rows of 0/1 inputs with fn(row) as the label."""
    x = (rng.integers(1, 101, size=(n, n_inputs)) > 50).astype(float)
    y = np.array([[float(fn(row))] for row in x])
    return x, y


@pytest.fixture
def logic_data(rng):
    def make(fn, n_inputs, n=500):
        return logic_table(fn, n_inputs, n, rng)
    return make
