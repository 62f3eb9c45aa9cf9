from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from NN.errors import NetworkConfigError
from NN.neuralnet import NeuralNetwork
from core.dataset import DataSet
from training.trainer_config import TrainerConfig

CostFn = Callable[[int, float], None]


@dataclass
class TrainHooks:
    on_iteration: Optional[CostFn] = None   # (iteration, cost) every iteration
    on_heartbeat: Optional[CostFn] = None   # (iteration, cost) every `heartbeat` iterations


class Trainer:
    """
    Fixed-iteration loop around a NeuralNetwork it owns exclusively.

    Each iteration: forward pass, backward pass, optional cost bookkeeping,
    then every theta is moved by the configured update rule. There is no
    early stop; training always runs `max_iterations` iterations.
    """
    def __init__(
        self,
        layer_sizes: Sequence[int],
        inputs: Optional[np.ndarray],
        expected: Optional[np.ndarray],
        config: Optional[TrainerConfig] = None,
        hooks: Optional[TrainHooks] = None,
        rng: Optional[np.random.Generator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if inputs is None or np.size(inputs) == 0:
            raise NetworkConfigError("Cannot train network without training examples")
        if expected is None or np.size(expected) == 0:
            raise NetworkConfigError("Cannot train network without expected values")

        self.config = config or TrainerConfig()
        self.hooks = hooks or TrainHooks()
        self._log = logger or logging.getLogger(__name__)
        self._costs: List[float] = []

        self._network = NeuralNetwork(
            layer_sizes,
            activation=self.config.activation,
            lam=self.config.lam,
            rng=rng,
        )
        x = np.array(inputs, dtype=float, ndmin=2)
        y = np.array(expected, dtype=float, ndmin=2)
        sizes = self._network.layer_sizes
        if x.shape[1] != sizes[0]:
            raise NetworkConfigError(
                f"examples have {x.shape[1]} features but the input layer has {sizes[0]} neurons"
            )
        if y.shape != (x.shape[0], sizes[-1]):
            raise NetworkConfigError(
                f"expected values must have shape {(x.shape[0], sizes[-1])}, got {y.shape}"
            )
        self._network.set_inputs(x)
        self._network.set_expected(y)

    @classmethod
    def from_dataset(
        cls,
        layer_sizes: Sequence[int],
        dataset: DataSet,
        config: Optional[TrainerConfig] = None,
        hooks: Optional[TrainHooks] = None,
        rng: Optional[np.random.Generator] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "Trainer":
        """Shuffle `dataset` in place and train on its samples/truth."""
        if dataset.num_samples == 0:
            raise NetworkConfigError("Cannot train network without training examples")
        dataset.randomize()
        return cls(layer_sizes, dataset.samples, dataset.truth, config, hooks, rng, logger)

    @property
    def network(self) -> NeuralNetwork:
        return self._network

    @property
    def costs(self) -> List[float]:
        return self._costs

    def train(self) -> NeuralNetwork:
        cfg = self.config
        net = self._network
        want_cost = cfg.record_costs or self.hooks.on_iteration is not None
        beat = 0

        for iteration in range(cfg.max_iterations):
            net.forward_propagation()
            net.back_propagation()

            cost = net.get_cost() if want_cost else None
            if cfg.record_costs:
                self._costs.append(cost)
            if self.hooks.on_iteration:
                self.hooks.on_iteration(iteration + 1, cost)

            beat += 1
            if cfg.heartbeat != 0 and beat == cfg.heartbeat:
                if cost is None:
                    cost = net.get_cost()
                self._log.info("Iteration: %d, Cost: %s", iteration + 1, cost)
                if self.hooks.on_heartbeat:
                    self.hooks.on_heartbeat(iteration + 1, cost)
                beat = 0

            self._adjust_thetas()

        return net

    def _adjust_thetas(self) -> None:
        net = self._network
        lr = self.config.learning_rate
        gradients = [net.get_theta_gradient(i) for i in range(net.num_thetas)]
        new_thetas = []
        for theta, grad in zip(net.thetas, gradients):
            if self.config.update_rule == "sign":
                # fixed-size step against the sign of the gradient
                new_thetas.append(theta + np.where(grad > 0, -lr, lr))
            else:
                new_thetas.append(theta - lr * grad)
        net.set_thetas(new_thetas)
