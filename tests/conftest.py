from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from premium.artifacts import save_calibration
from premium.calibration import CalibrationParameters
from premium.training_pipeline import run_training


def make_quotes(n: int = 150, seed: int = 7, coverage_col: str = "Coverage A") -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    rows = []
    for i in range(n):
        bedrooms = int(rng.integers(1, 6))
        sqft = float(rng.integers(700, 4200))
        coverage = float(rng.integers(120_000, 650_000))
        year_built = int(rng.integers(1950, 2024))
        age = 2025 - year_built
        premium = 300 + 40 * bedrooms + 0.2 * sqft + 0.003 * coverage + 5 * age + rng.normal(0, 15)
        rows.append(
            {
                "ZIP Code": f"{90000 + i % 50}",
                "Year": 2024,
                "Bedrooms": bedrooms,
                "Square Footage": sqft,
                coverage_col: coverage,
                "Year Built": year_built,
                "Has Swimming Pool": str(rng.choice(["Yes", "No"])),
                "Security System Installed": str(rng.choice(["yes ", " NO"])),
                "Has Garage": str(rng.choice(["Yes", "No"])),
                "Has Basement": "No",
                "Premiums Per Policy": round(float(premium), 2),
            }
        )
    return pd.DataFrame(rows)


def make_calibration_samples() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Bedrooms": [2, 3, 4],
            "Square Footage": [1200, 2000, 3100],
            "Coverage A": [180_000, 250_000, 410_000],
            "Age of Home": [40, 15, 5],
            "ActualPremium": [1520.0, 1710.0, 2105.0],
        }
    )


@pytest.fixture
def quotes_csv(tmp_path: Path) -> Path:
    path = tmp_path / "quotes.csv"
    make_quotes().to_csv(path, index=False)
    return path


@pytest.fixture
def trained_artifacts(tmp_path: Path, quotes_csv: Path) -> dict[str, Path]:
    paths = {
        "model": tmp_path / "model.joblib",
        "scaler": tmp_path / "scaler.json",
        "calibration": tmp_path / "calib.json",
    }
    run_training(quotes_csv, paths["model"], paths["scaler"])
    return paths


@pytest.fixture
def calibrated_artifacts(trained_artifacts: dict[str, Path]) -> dict[str, Path]:
    save_calibration(CalibrationParameters(a=0.95, b=40.0), trained_artifacts["calibration"])
    return trained_artifacts
