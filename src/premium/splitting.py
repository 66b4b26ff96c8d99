from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


@dataclass
class SeededLCG:
    """
    Linear congruential generator used for the train/test shuffle. Keeping
    these constants fixed keeps the split identical across implementations.
    """

    state: int

    def __call__(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS


def shuffled_indices(n: int, seed: int) -> np.ndarray:
    indices = list(range(n))
    rng = SeededLCG(seed)
    for i in range(n - 1, 0, -1):
        j = math.floor(rng() * (i + 1))
        indices[i], indices[j] = indices[j], indices[i]
    return np.asarray(indices, dtype=int)


def split_indices(n: int, test_size: float = 0.33, random_state: int = 42) -> Tuple[np.ndarray, np.ndarray]:
    if not 0.0 < test_size < 1.0:
        raise ValueError(f"test_size must be in (0, 1), got {test_size}")
    if n < 2:
        raise ValueError(f"Need at least 2 rows to split, got {n}")
    order = shuffled_indices(n, random_state)
    cut = math.floor(n * (1 - test_size))
    return order[:cut], order[cut:]


def train_test_split(
    X: np.ndarray,
    y: np.ndarray,
    test_size: float = 0.33,
    random_state: int = 42,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    if len(X) != len(y):
        raise ValueError(f"X and y lengths differ: {len(X)} != {len(y)}")
    train_idx, test_idx = split_indices(len(X), test_size=test_size, random_state=random_state)
    return X[train_idx], X[test_idx], y[train_idx], y[test_idx]
