from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional

from NN.activation import ActivationFunction


@dataclass(frozen=True)
class TrainerConfig:
    """Hyperparameters and knobs for the fixed-iteration trainer."""
    learning_rate: float = 0.01
    max_iterations: int = 500
    heartbeat: int = 100                 # iterations between progress lines (0 = off)
    lam: float = 0.0                     # L2 regularization
    activation: Optional[ActivationFunction] = None   # None -> sigmoid
    record_costs: bool = False
    update_rule: Literal["sign", "gradient"] = "sign"

    def __post_init__(self):
        if self.update_rule not in ("sign", "gradient"):
            raise ValueError(f"update_rule must be 'sign' or 'gradient', got {self.update_rule!r}")
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be >= 0")
        if self.heartbeat < 0:
            raise ValueError("heartbeat must be >= 0")
