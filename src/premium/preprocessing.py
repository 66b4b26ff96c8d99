from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence, Tuple

import numpy as np
import pandas as pd

from premium.config import TrainingConfig
from premium.errors import SchemaError

logger = logging.getLogger(__name__)


def _yes_no_flag(value: Any) -> Any:
    if isinstance(value, str):
        return 1 if value.strip().lower() == "yes" else 0
    return value


def require_columns(frame: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise SchemaError(f"Missing required columns: {', '.join(missing)}")


def resolve_coverage(frame: pd.DataFrame, config: TrainingConfig) -> pd.DataFrame:
    """Fill the coverage column from the property value column when only the latter exists."""
    if config.coverage_col in frame.columns:
        return frame
    if config.coverage_fallback_col not in frame.columns:
        raise SchemaError(
            f"Missing required columns: {config.coverage_col} (or {config.coverage_fallback_col})"
        )
    frame = frame.copy()
    frame[config.coverage_col] = frame[config.coverage_fallback_col]
    return frame


def preprocess(df: pd.DataFrame, config: TrainingConfig, target_col: str | None = None) -> pd.DataFrame:
    frame = df.drop(columns=[c for c in config.excluded_cols if c in df.columns])

    if config.build_year_col in frame.columns and config.age_col not in frame.columns:
        build_year = pd.to_numeric(frame[config.build_year_col], errors="coerce")
        frame[config.age_col] = config.reference_year - build_year
        frame = frame.drop(columns=[config.build_year_col])

    for col in config.yes_no_cols:
        if col in frame.columns:
            frame[col] = frame[col].map(_yes_no_flag)

    frame = resolve_coverage(frame, config)
    require_columns(frame, [*config.feature_cols, target_col or config.target_col])
    logger.debug("Preprocessed frame columns: %s", list(frame.columns))
    return frame


def _numeric_block(frame: pd.DataFrame, columns: Sequence[str]) -> np.ndarray:
    block = frame[list(columns)].apply(pd.to_numeric, errors="coerce").to_numpy(dtype=float)
    bad = ~np.isfinite(block)
    if bad.any():
        cols = [columns[i] for i in np.flatnonzero(bad.any(axis=0))]
        raise SchemaError(
            f"Non-numeric or missing values in columns: {', '.join(cols)} ({int(bad.any(axis=1).sum())} rows)"
        )
    return block


def feature_matrix(frame: pd.DataFrame, config: TrainingConfig) -> np.ndarray:
    require_columns(frame, config.feature_cols)
    return _numeric_block(frame, config.feature_cols)


def target_vector(frame: pd.DataFrame, column: str) -> np.ndarray:
    require_columns(frame, [column])
    return _numeric_block(frame, [column])[:, 0]


def build_features(df: pd.DataFrame, config: TrainingConfig) -> Tuple[np.ndarray, np.ndarray]:
    frame = preprocess(df, config)
    return feature_matrix(frame, config), target_vector(frame, config.target_col)
