from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from premium.errors import DegenerateFitError


@dataclass(frozen=True)
class CalibrationParameters:
    a: float
    b: float

    def to_dict(self) -> dict[str, float]:
        return {"a": self.a, "b": self.b}


IDENTITY = CalibrationParameters(a=1.0, b=0.0)


def fit_affine(raw_preds: Sequence[float], y_true: Sequence[float]) -> tuple[float, float]:
    """Closed-form least squares for ``y_true ~ a * raw_preds + b``."""
    x = np.asarray(raw_preds, dtype=float)
    y = np.asarray(y_true, dtype=float)
    if x.shape != y.shape or x.ndim != 1:
        raise ValueError(f"Expected two 1-D arrays of equal length, got {x.shape} and {y.shape}")
    n = len(x)
    if n < 2:
        raise DegenerateFitError(f"Calibration needs at least 2 points, got {n}")
    if not (np.isfinite(x).all() and np.isfinite(y).all()):
        raise DegenerateFitError("Calibration inputs contain non-finite values")

    mean_x = x.sum() / n
    mean_y = y.sum() / n
    denom = float((x * x).sum() - n * mean_x * mean_x)
    if denom <= 1e-12 * max(1.0, float((x * x).sum())):
        raise DegenerateFitError("Raw predictions have zero variance; calibration slope is undefined")

    a = float(((x * y).sum() - n * mean_x * mean_y) / denom)
    b = float(mean_y - a * mean_x)
    if not (math.isfinite(a) and math.isfinite(b)):
        raise DegenerateFitError(f"Calibration fit produced non-finite coefficients a={a}, b={b}")
    return a, b


def shrink_toward_identity(a: float, b: float, alpha: float = 0.3) -> CalibrationParameters:
    if not 0.0 <= alpha <= 1.0:
        raise ValueError(f"alpha must be in [0, 1], got {alpha}")
    return CalibrationParameters(
        a=(1 - alpha) * a + alpha * IDENTITY.a,
        b=(1 - alpha) * b + alpha * IDENTITY.b,
    )


class AffineCalibrator:
    """
    Post-hoc affine correction of raw model output. The raw least-squares
    fit comes from a handful of holdout quotes, so it is blended toward the
    identity with weight ``shrinkage``.
    """

    def __init__(self, shrinkage: float = 0.3) -> None:
        self.shrinkage = shrinkage
        self.raw_fit: tuple[float, float] | None = None
        self._params: CalibrationParameters | None = None

    @classmethod
    def from_params(cls, params: CalibrationParameters) -> "AffineCalibrator":
        calibrator = cls()
        calibrator._params = params
        return calibrator

    @property
    def params(self) -> CalibrationParameters:
        if self._params is None:
            raise RuntimeError("AffineCalibrator is not fitted")
        return self._params

    def fit(self, raw_preds: Sequence[float], y_true: Sequence[float]) -> "AffineCalibrator":
        a, b = fit_affine(raw_preds, y_true)
        self.raw_fit = (a, b)
        self._params = shrink_toward_identity(a, b, alpha=self.shrinkage)
        return self

    def apply(self, raw_pred: float) -> float:
        params = self.params
        return params.a * raw_pred + params.b
