from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from sklearn.preprocessing import StandardScaler

from premium.errors import DegenerateFitError


@dataclass(frozen=True)
class ScalerParameters:
    mean: tuple[float, ...]
    scale: tuple[float, ...]

    def to_dict(self) -> dict[str, list[float]]:
        return {"mean": list(self.mean), "scale": list(self.scale)}


class FeatureScaler:
    """
    Standardizes features with statistics from the training split only:
    population standard deviation (ddof=0), no re-fitting on test or
    inference rows.
    """

    def __init__(self, feature_names: Sequence[str] | None = None) -> None:
        self.feature_names = list(feature_names) if feature_names is not None else None
        self._params: ScalerParameters | None = None

    @classmethod
    def from_params(cls, params: ScalerParameters, feature_names: Sequence[str] | None = None) -> "FeatureScaler":
        scaler = cls(feature_names)
        scaler._params = params
        return scaler

    @property
    def params(self) -> ScalerParameters:
        if self._params is None:
            raise RuntimeError("FeatureScaler is not fitted")
        return self._params

    def fit(self, X: np.ndarray) -> "FeatureScaler":
        X = np.asarray(X, dtype=float)
        stats = StandardScaler().fit(X)
        std = np.sqrt(stats.var_)
        # rounding in the mean can leave a constant column with a tiny std
        zero_var = np.flatnonzero(std <= 1e-12 * np.maximum(1.0, np.abs(stats.mean_)))
        if zero_var.size:
            names = [self._name(i) for i in zero_var]
            raise DegenerateFitError(f"Zero-variance feature column(s): {', '.join(names)}")
        self._params = ScalerParameters(
            mean=tuple(float(v) for v in stats.mean_),
            scale=tuple(float(v) for v in std),
        )
        return self

    def transform(self, X: np.ndarray) -> np.ndarray:
        params = self.params
        X = np.asarray(X, dtype=float)
        return (X - np.asarray(params.mean)) / np.asarray(params.scale)

    def _name(self, idx: int) -> str:
        if self.feature_names and idx < len(self.feature_names):
            return self.feature_names[idx]
        return f"feature[{idx}]"
