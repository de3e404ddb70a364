"""Dataset splitting helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.model_selection import train_test_split

__all__ = ["SplitResult", "train_test_split_indices"]


@dataclass
class SplitResult:
    """Indices for train/test subsets."""

    train: np.ndarray
    test: np.ndarray

    def as_dict(self) -> dict[str, np.ndarray]:
        return {"train": self.train, "test": self.test}


def train_test_split_indices(
    n: int,
    test_ratio: float = 0.2,
    seed: Optional[int] = None,
) -> SplitResult:
    """Return shuffled train/test indices using sklearn helpers."""

    if n <= 0:
        raise ValueError("n must be positive.")
    if not (0.0 <= test_ratio < 1.0):
        raise ValueError("test_ratio must lie in [0, 1).")

    indices = np.arange(n, dtype=int)
    test_size = min(max(int(round(test_ratio * n)), 0), n - 1)
    if test_size == 0:
        return SplitResult(train=indices, test=np.empty(0, dtype=int))

    train_idx, test_idx = train_test_split(
        indices,
        test_size=test_size,
        shuffle=True,
        random_state=seed,
    )
    return SplitResult(
        train=np.sort(np.asarray(train_idx, dtype=int)),
        test=np.sort(np.asarray(test_idx, dtype=int)),
    )
