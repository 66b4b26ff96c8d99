from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from premium.artifacts import load_model, load_scaler, save_calibration
from premium.calibration import AffineCalibrator
from premium.config import (
    DEFAULT_CALIBRATION_CSV,
    DEFAULT_CALIBRATION_PATH,
    DEFAULT_MODEL_PATH,
    DEFAULT_SCALER_PATH,
    TrainingConfig,
)
from premium.data_loader import load_table
from premium.linear_model import LinearPremiumModel
from premium.preprocessing import feature_matrix, require_columns, resolve_coverage, target_vector
from premium.scaler import FeatureScaler

logger = logging.getLogger(__name__)


def fit_calibration(
    df: pd.DataFrame,
    scaler: FeatureScaler,
    model: LinearPremiumModel,
    config: TrainingConfig,
) -> AffineCalibrator:
    frame = resolve_coverage(df, config)
    require_columns(frame, [*config.feature_cols, config.calibration_target_col])
    X = feature_matrix(frame, config)
    y_true = target_vector(frame, config.calibration_target_col)

    raw_preds = model.predict(scaler.transform(X))
    calibrator = AffineCalibrator(shrinkage=config.shrinkage).fit(raw_preds, y_true)
    a, b = calibrator.raw_fit
    logger.info(
        "Calibration on %d samples: raw a=%.6f b=%.4f, shrunk a=%.6f b=%.4f",
        len(y_true), a, b, calibrator.params.a, calibrator.params.b,
    )
    return calibrator


def run_calibration(
    csv_path: str | Path = DEFAULT_CALIBRATION_CSV,
    model_path: str | Path = DEFAULT_MODEL_PATH,
    scaler_path: str | Path = DEFAULT_SCALER_PATH,
    output_path: str | Path = DEFAULT_CALIBRATION_PATH,
    config: TrainingConfig | None = None,
) -> AffineCalibrator:
    config = config or TrainingConfig()
    logger.info("Loading calibration data: %s", csv_path)
    frame = load_table(csv_path)
    scaler = FeatureScaler.from_params(load_scaler(scaler_path), config.feature_cols)
    model = LinearPremiumModel.from_params(load_model(model_path))
    calibrator = fit_calibration(frame, scaler, model, config)
    save_calibration(calibrator.params, output_path)
    return calibrator
