# NN/errors.py
from __future__ import annotations


class NetworkConfigError(ValueError):
    """Raised when a network or trainer is built from an invalid configuration."""


class LayerIndexError(IndexError):
    """Out-of-range theta/delta index. Carries the offending index and the bound."""
    def __init__(self, kind: str, index: int, bound: int):
        super().__init__(f"illegal {kind} index {index} (valid range is 0..{bound - 1})")
        self.kind = kind
        self.index = index
        self.bound = bound


class NotComputedError(RuntimeError):
    """A value was read before the pass that produces it has run."""
