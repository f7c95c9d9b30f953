import threading
from typing import Optional, Sequence

import numpy as np


class RandomLabelModel:
    """
    Stand-in classifier: ignores the features and draws a label uniformly
    from ``range(num_labels)``.

    Unseeded, every call gets a fresh OS-entropy generator. Seeded, the model
    keeps a single generator so the label sequence is reproducible.
    """

    def __init__(self, num_labels: int = 3, seed: Optional[int] = None) -> None:
        if num_labels < 1:
            raise ValueError(f"num_labels must be >= 1, got {num_labels}")
        self.num_labels = num_labels
        self.seed = seed
        self._rng = np.random.default_rng(seed) if seed is not None else None
        self._lock = threading.Lock()

    @property
    def labels(self) -> range:
        return range(self.num_labels)

    def predict(self, features: Sequence[float]) -> int:
        if self._rng is None:
            return int(np.random.default_rng().integers(self.num_labels))
        # numpy generators are not thread-safe
        with self._lock:
            return int(self._rng.integers(self.num_labels))
