from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class FeatureRecord:
    bedrooms: float
    square_footage: float
    coverage_a: float
    age_of_home: float

    def as_array(self) -> np.ndarray:
        # Order must match TrainingConfig.feature_cols
        return np.array(
            [self.bedrooms, self.square_footage, self.coverage_a, self.age_of_home],
            dtype=float,
        )
