from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from premium.artifacts import save_model, save_scaler
from premium.config import TrainingConfig
from premium.data_loader import load_table
from premium.linear_model import LinearPremiumModel, RegressionMetrics, evaluate
from premium.preprocessing import build_features
from premium.scaler import FeatureScaler
from premium.splitting import train_test_split

logger = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    scaler: FeatureScaler
    model: LinearPremiumModel
    metrics: RegressionMetrics
    n_train: int
    n_test: int


def train_premium_model(df: pd.DataFrame, config: TrainingConfig) -> TrainingResult:
    X, y = build_features(df, config)
    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=config.test_size, random_state=config.random_state
    )
    logger.info("Split %d rows into %d train / %d test", len(X), len(X_train), len(X_test))

    scaler = FeatureScaler(config.feature_cols).fit(X_train)
    model = LinearPremiumModel(
        solver=config.solver,
        epochs=config.epochs,
        learning_rate=config.learning_rate,
        batch_size=config.batch_size,
        random_state=config.random_state,
    )
    model.fit(scaler.transform(X_train), y_train)

    metrics = evaluate(y_test, model.predict(scaler.transform(X_test)))
    logger.info("Test metrics: MAE=%.4f RMSE=%.4f R2=%.4f", metrics.mae, metrics.rmse, metrics.r2)
    return TrainingResult(
        scaler=scaler,
        model=model,
        metrics=metrics,
        n_train=len(X_train),
        n_test=len(X_test),
    )


def run_training(
    csv_path: str | Path,
    model_path: str | Path,
    scaler_path: str | Path,
    config: TrainingConfig | None = None,
) -> TrainingResult:
    config = config or TrainingConfig()
    logger.info("Loading CSV: %s", csv_path)
    frame = load_table(csv_path)
    result = train_premium_model(frame, config)

    # nothing is written until every step above has succeeded
    save_model(result.model.params, model_path, feature_names=config.feature_cols, solver=config.solver)
    save_scaler(result.scaler.params, scaler_path)
    logger.info("Done! Saved: %s, %s", model_path, scaler_path)
    return result
