# config.py
from dataclasses import dataclass, replace
from typing import Optional, Literal


@dataclass(frozen=True, slots=True)
class AppConfig:
    # data source: a CSV file, or a pair of positive/negative image directories
    csv_file: str = ""
    positive_dir: str = ""
    negative_dir: str = ""
    required_width: int = 10
    required_height: int = 10
    color: bool = False
    seed: Optional[int] = None

    # network
    layer1: int = 10                     # 0 = no first hidden layer
    layer2: int = 0                      # 0 = no second hidden layer
    output_layer: int = 1
    activation: Literal["sigmoid", "tanh"] = "sigmoid"

    # training
    learning_rate: float = 0.01
    iterations: int = 500
    heartbeat: int = 100
    lam: float = 1.0
    update_rule: Literal["sign", "gradient"] = "sign"

    # evaluation
    split: int = 80                      # percent of rows used for training
    folds: int = 1
    prediction_threshold: float = 0.5

    # output
    save_dir: str = ""                   # FP/FN images of the best fold
    cost_log: str = ""                   # per-iteration cost CSV

    def with_(self, **kwargs) -> "AppConfig":
        """Convenience: clone with updated values"""
        return replace(self, **kwargs)

    def layer_sizes(self, num_features: int) -> list[int]:
        sizes = [int(num_features)]
        if self.layer1 != 0:
            sizes.append(self.layer1)
        if self.layer2 != 0:
            sizes.append(self.layer2)
        sizes.append(self.output_layer)
        return sizes
