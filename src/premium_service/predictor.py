from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from premium.artifacts import load_calibration, load_model, load_scaler
from premium.calibration import AffineCalibrator
from premium.config import TrainingConfig
from premium.data_models import FeatureRecord
from premium.errors import PredictionError, ValidationError
from premium.linear_model import LinearPremiumModel
from premium.scaler import FeatureScaler

logger = logging.getLogger(__name__)

BEDROOMS = "Bedrooms"
SQUARE_FOOTAGE = "Square Footage"
COVERAGE_A = "Coverage A"
PROPERTY_VALUE = "Property Value"
AGE_OF_HOME = "Age of Home"


def _present(data: Mapping[str, Any], key: str) -> bool:
    if key not in data or data[key] is None:
        return False
    value = data[key]
    return not (isinstance(value, str) and not value.strip())


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(value, str):
        value = value.strip()
    num = float(value)
    if not math.isfinite(num):
        raise ValueError(f"{value!r} is not finite")
    return num


def parse_feature_record(data: Mapping[str, Any]) -> FeatureRecord:
    """
    Validate an inbound payload and build a FeatureRecord.

    Coverage comes from "Coverage A" when given, otherwise from
    "Property Value". Every missing field is reported in one error, as is
    every non-numeric one.
    """
    missing = [k for k in (BEDROOMS, SQUARE_FOOTAGE, AGE_OF_HOME) if not _present(data, k)]
    if _present(data, COVERAGE_A):
        coverage_key = COVERAGE_A
    elif _present(data, PROPERTY_VALUE):
        coverage_key = PROPERTY_VALUE
    else:
        coverage_key = None
        missing.append(f"{COVERAGE_A} (or {PROPERTY_VALUE})")
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")

    values: dict[str, float] = {}
    invalid: list[str] = []
    for key in (BEDROOMS, SQUARE_FOOTAGE, coverage_key, AGE_OF_HOME):
        try:
            values[key] = _to_float(data[key])
        except (TypeError, ValueError):
            invalid.append(key)
    if invalid:
        raise ValidationError(f"Invalid input types: non-numeric value for {', '.join(invalid)}")

    return FeatureRecord(
        bedrooms=values[BEDROOMS],
        square_footage=values[SQUARE_FOOTAGE],
        coverage_a=values[coverage_key],
        age_of_home=values[AGE_OF_HOME],
    )


@dataclass(frozen=True)
class LoadedArtifacts:
    scaler: FeatureScaler
    model: LinearPremiumModel
    calibrator: AffineCalibrator | None


@dataclass(frozen=True)
class PredictionOutput:
    predicted_premium: float
    raw_prediction: float
    calibrated: bool


class PremiumPredictor:
    def __init__(
        self,
        model_path: str,
        scaler_path: str,
        calibration_path: str,
        config: TrainingConfig | None = None,
    ) -> None:
        self.model_path = Path(model_path)
        self.scaler_path = Path(scaler_path)
        self.calibration_path = Path(calibration_path)
        self.config = config or TrainingConfig()
        self._artifacts: LoadedArtifacts | None = None
        self._lock = threading.Lock()

    def _load(self) -> LoadedArtifacts:
        model = LinearPremiumModel.from_params(load_model(self.model_path))
        scaler = FeatureScaler.from_params(load_scaler(self.scaler_path), self.config.feature_cols)
        calib_params = load_calibration(self.calibration_path)
        if calib_params is None:
            logger.info("No calibration file at %s; serving uncalibrated predictions", self.calibration_path)
            calibrator = None
        else:
            calibrator = AffineCalibrator.from_params(calib_params)
            logger.info("Loaded calibration a=%.6f b=%.4f", calib_params.a, calib_params.b)
        return LoadedArtifacts(scaler=scaler, model=model, calibrator=calibrator)

    def artifacts(self) -> LoadedArtifacts:
        # A failed load is not cached, so the next request tries again.
        if self._artifacts is None:
            with self._lock:
                if self._artifacts is None:
                    self._artifacts = self._load()
        return self._artifacts

    @property
    def is_loaded(self) -> bool:
        return self._artifacts is not None

    def predict(self, record: FeatureRecord) -> PredictionOutput:
        artifacts = self.artifacts()
        x_scaled = artifacts.scaler.transform(record.as_array())
        raw = artifacts.model.predict_one(x_scaled)

        value = raw
        if artifacts.calibrator is not None:
            value = max(0.0, artifacts.calibrator.apply(raw))

        if not math.isfinite(value):
            raise PredictionError(f"Prediction is not finite: {value}")
        return PredictionOutput(
            predicted_premium=round(value, 2),
            raw_prediction=raw,
            calibrated=artifacts.calibrator is not None,
        )

    def predict_payload(self, data: Mapping[str, Any]) -> PredictionOutput:
        return self.predict(parse_feature_record(data))
