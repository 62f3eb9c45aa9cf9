from __future__ import annotations
import argparse
import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from config import AppConfig
from NN.activation import get_activation
from NN.errors import NetworkConfigError
from NN.neuralnet import NeuralNetwork
from core.dataset import DataSet
from core.prediction import Prediction
from training.cost_log import COST_KEYS, CSVLogger, make_cost_logger
from training.metrics import FoldStats
from training.trainer import Trainer, TrainHooks
from training.trainer_config import TrainerConfig
from viz.image import Image, ImageDirectorySource

logger = logging.getLogger("classifier.train")


@dataclass
class TrainResult:
    layer_sizes: list[int]
    stats: FoldStats
    best_model: Optional[NeuralNetwork]
    best_fold: Optional[DataSet]      # testing split the best model was scored on
    best_f1: float


def parse_args(argv: Optional[Sequence[str]] = None) -> AppConfig:
    d = AppConfig()
    p = argparse.ArgumentParser(prog="classifier train", description="Trains a neural network")
    p.add_argument("-c", "--csv", dest="csv_file", default=d.csv_file, help="loads data from a CSV file")
    p.add_argument("-p", "--positivedir", dest="positive_dir", default=d.positive_dir,
                   help="specifies positive image directory")
    p.add_argument("-n", "--negativedir", dest="negative_dir", default=d.negative_dir,
                   help="specifies negative image directory")
    p.add_argument("-W", "--width", dest="required_width", type=int, default=d.required_width,
                   help="ensure images have specified width in pixels")
    p.add_argument("-H", "--height", dest="required_height", type=int, default=d.required_height,
                   help="ensure images have specified height in pixels")
    p.add_argument("--color", action="store_true", help="processes images in color")
    p.add_argument("--savedir", dest="save_dir", default=d.save_dir,
                   help="save prediction results into specified directory")
    p.add_argument("-s", "--split", type=int, default=d.split,
                   help="percent of the data used for training")
    p.add_argument("-t", "--threshold", dest="prediction_threshold", type=float,
                   default=d.prediction_threshold, help="prediction threshold")
    p.add_argument("-f", "--folds", type=int, default=d.folds,
                   help="generate this many folds for cross-validation")
    p.add_argument("--l1", "--layer1neurons", dest="layer1", type=int, default=d.layer1,
                   help="neurons in first hidden layer (0 = none)")
    p.add_argument("--l2", "--layer2neurons", dest="layer2", type=int, default=d.layer2,
                   help="neurons in second hidden layer (0 = none)")
    p.add_argument("-o", "--outputneurons", dest="output_layer", type=int, default=d.output_layer,
                   help="neurons in output layer")
    p.add_argument("-l", "--learnrate", dest="learning_rate", type=float, default=d.learning_rate)
    p.add_argument("-i", "--iterations", type=int, default=d.iterations)
    p.add_argument("-b", "--heartbeat", type=int, default=d.heartbeat,
                   help="log the cost every N iterations (0 = never)")
    p.add_argument("--lambda", dest="lam", type=float, default=d.lam, help="regularization lambda")
    p.add_argument("--activation", choices=["sigmoid", "tanh"], default=d.activation)
    p.add_argument("--update-rule", dest="update_rule", choices=["sign", "gradient"],
                   default=d.update_rule, help="sign: fixed +/- learnrate steps; gradient: scaled descent")
    p.add_argument("--cost-log", dest="cost_log", default=d.cost_log,
                   help="write the cost of every iteration to this CSV file")
    p.add_argument("--seed", type=int, default=d.seed)
    args = p.parse_args(argv)
    return AppConfig(**vars(args))


# --- data loading ---
def load_from_csv(cfg: AppConfig, rng: np.random.Generator) -> Optional[DataSet]:
    dataset = DataSet(True, rng=rng, logger=logger)
    try:
        dataset.add_from_csv_file(cfg.csv_file)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return None
    logger.info("loaded %d sample(s)", dataset.num_samples)
    return dataset


def load_from_directories(cfg: AppConfig, rng: np.random.Generator) -> Optional[DataSet]:
    for label, directory in (("positives", cfg.positive_dir), ("negatives", cfg.negative_dir)):
        if not os.path.isdir(directory):
            logger.error("%s directory [%s] is not a directory", label, directory)
            return None

    dataset = DataSet(True, rng=rng, logger=logger)
    for directory, truth in ((cfg.positive_dir, 1.0), (cfg.negative_dir, 0.0)):
        source = ImageDirectorySource(directory, truth, cfg.required_width, cfg.required_height,
                                      color=cfg.color, logger=logger)
        dataset.add_from_source(source)
    logger.info("loaded %d sample(s)", dataset.num_samples)
    return dataset


def load_dataset(cfg: AppConfig, rng: np.random.Generator) -> Optional[DataSet]:
    dataset = load_from_csv(cfg, rng) if cfg.csv_file else load_from_directories(cfg, rng)
    if dataset is None or dataset.num_samples == 0:
        return None
    return dataset


# --- results ---
def save_results(cfg: AppConfig, model: NeuralNetwork, fold: DataSet) -> int:
    """Dump the best fold's false positives/negatives as PNGs. Returns images written."""
    if not os.path.isdir(cfg.save_dir):
        logger.error("save directory [%s] is not a directory", cfg.save_dir)
        return 0

    prediction = Prediction(model, cfg.prediction_threshold)
    prediction.predict(fold)
    written = 0
    for prefix, rows in (("fp", prediction.false_positive_samples),
                         ("fn", prediction.false_negative_samples)):
        for i, row in enumerate(rows):
            path = os.path.join(cfg.save_dir, f"{prefix}{i + 1}.png")
            try:
                Image.from_row(row, cfg.required_width, cfg.required_height, cfg.color).save(path)
            except (ValueError, OSError) as e:
                logger.error("could not save file [%s]: %s", path, e)
                continue
            written += 1
    return written


def print_fold(p: Prediction) -> None:
    print(f"True Positives {p.true_positives}")
    print(f"False Positives {p.false_positives}")
    print(f"True Negatives {p.true_negatives}")
    print(f"False Negatives {p.false_negatives}")
    print(f"Precision {p.precision}")
    print(f"Recall {p.recall}")
    print(f"F1 {p.f1}")


def print_overall(stats: FoldStats) -> None:
    names = {
        "tp": "True Positives", "fp": "False Positives", "tn": "True Negatives",
        "fn": "False Negatives", "precision": "Precision", "recall": "Recall", "f1": "F1",
    }
    print("Overall Statistics")
    for key, s in stats.summary().items():
        print(f"{names[key]} {s['mean']} ({s['variance']})")


# --- command ---
def run(cfg: AppConfig) -> Optional[TrainResult]:
    rng = np.random.default_rng(cfg.seed)

    dataset = load_dataset(cfg, rng)
    if dataset is None:
        logger.error("no data set could be built, exiting")
        return None

    layer_sizes = cfg.layer_sizes(dataset.num_cols_samples)
    trainer_cfg = TrainerConfig(
        learning_rate=cfg.learning_rate,
        max_iterations=cfg.iterations,
        heartbeat=cfg.heartbeat,
        lam=cfg.lam,
        activation=get_activation(cfg.activation),
        update_rule=cfg.update_rule,
    )
    stats = FoldStats()
    best_model, best_fold, best_f1 = None, None, 0.0
    cost_log = CSVLogger(cfg.cost_log, fieldnames=COST_KEYS) if cfg.cost_log else None

    try:
        for fold in range(cfg.folds):
            logger.info("processing fold %d", fold + 1)
            logger.info("randomizing dataset")
            dataset.randomize()
            logger.info("generating training and testing sets")
            training, testing = dataset.split_equally(cfg.split)

            logger.info("training neural network...")
            hooks = None
            if cost_log is not None:
                hooks = TrainHooks(on_iteration=make_cost_logger(cost_log, fold=fold + 1))
            trainer = Trainer.from_dataset(layer_sizes, training, trainer_cfg, hooks=hooks,
                                           rng=rng, logger=logger)
            model = trainer.train()
            if cost_log is not None:
                cost_log.flush()

            prediction = Prediction(model, cfg.prediction_threshold)
            prediction.predict(testing)
            print_fold(prediction)
            stats.add(prediction.summary())

            if prediction.f1 > best_f1:
                best_model, best_fold, best_f1 = model, testing.dup(), prediction.f1
    except NetworkConfigError as e:
        logger.error("%s", e)
        return None
    finally:
        if cost_log is not None:
            cost_log.close()

    if cfg.save_dir:
        if best_model is None:
            logger.warning("no fold produced a usable F1 score, nothing saved")
        else:
            save_results(cfg, best_model, best_fold)

    print_overall(stats)
    return TrainResult(layer_sizes, stats, best_model, best_fold, best_f1)


def main(argv: Optional[Sequence[str]] = None) -> Optional[TrainResult]:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    return run(parse_args(argv))
