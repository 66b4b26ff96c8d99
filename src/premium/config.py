from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TrainingConfig:
    feature_cols: tuple[str, ...] = ("Bedrooms", "Square Footage", "Coverage A", "Age of Home")
    target_col: str = "Premiums Per Policy"
    calibration_target_col: str = "ActualPremium"
    excluded_cols: tuple[str, ...] = ("ZIP Code", "Year")
    build_year_col: str = "Year Built"
    age_col: str = "Age of Home"
    reference_year: int = 2025  # ages are not relative to today
    yes_no_cols: tuple[str, ...] = (
        "Has Swimming Pool",
        "Security System Installed",
        "Has Garage",
        "Has Basement",
    )
    coverage_col: str = "Coverage A"
    coverage_fallback_col: str = "Property Value"
    test_size: float = 0.33
    random_state: int = 42
    solver: str = "ols"
    epochs: int = 100
    learning_rate: float = 0.01
    batch_size: int = 32
    shrinkage: float = 0.3


DEFAULT_TRAINING_CSV = "simulated_home_insurance_quotes.csv"
DEFAULT_CALIBRATION_CSV = "calib_samples.csv"
DEFAULT_MODEL_PATH = "model.joblib"
DEFAULT_SCALER_PATH = "scaler.json"
DEFAULT_CALIBRATION_PATH = "calib.json"
