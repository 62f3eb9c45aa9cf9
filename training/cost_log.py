from __future__ import annotations
import csv, os
from typing import Any, Callable, Dict, Protocol

COST_KEYS = ["step", "fold", "train/cost"]


class Logger(Protocol):
    def log(self, step: int, scalars: Dict[str, Any]) -> None: ...
    def flush(self) -> None: ...
    def close(self) -> None: ...


class CSVLogger:
    """Append-only CSV logger with header auto-discovery or predefined schema."""
    def __init__(self, path: str, fieldnames: list[str] | None = None):
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self.path = path
        self._fieldnames = fieldnames
        self._file = open(path, "a", newline="")
        self._writer = None

    def log(self, step: int, scalars: Dict[str, Any]) -> None:
        scalars = {"step": step, **scalars}
        if self._writer is None:
            if self._fieldnames is None:
                self._fieldnames = list(scalars.keys())
            self._writer = csv.DictWriter(
                self._file,
                fieldnames=self._fieldnames,
                extrasaction="ignore",
            )
            if self._file.tell() == 0:
                self._writer.writeheader()
        self._writer.writerow(scalars)

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> "CSVLogger":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def make_cost_logger(
    logger: Logger,
    fold: int = 1,
    log_every: int = 1,
) -> Callable[[int, float], None]:
    """
    Returns a function(iteration, cost) -> None suitable for
    TrainHooks.on_iteration; writes one row every `log_every` iterations.
    """
    every = max(1, int(log_every))

    def _on_iteration(iteration: int, cost: float) -> None:
        if iteration % every != 0:
            return
        logger.log(int(iteration), {"fold": fold, "train/cost": cost})
    return _on_iteration
