import numpy as np
import pandas as pd
import pytest

from premium.config import TrainingConfig
from premium.errors import SchemaError
from premium.preprocessing import build_features, feature_matrix, preprocess, resolve_coverage

from conftest import make_quotes


def test_preprocess_drops_derives_and_binarizes():
    cfg = TrainingConfig()
    raw = pd.DataFrame(
        {
            "ZIP Code": [90210, 10001],
            "Year": [2024, 2024],
            "Bedrooms": [3, 2],
            "Square Footage": [2000, 1100],
            "Coverage A": [250_000, 150_000],
            "Year Built": [2010, 1990],
            "Has Swimming Pool": [" YES ", "no"],
            "Has Garage": [1, 0],
            "Premiums Per Policy": [1500.0, 1100.0],
        }
    )
    frame = preprocess(raw, cfg)

    assert "ZIP Code" not in frame.columns
    assert "Year" not in frame.columns
    assert "Year Built" not in frame.columns
    assert frame["Age of Home"].tolist() == [15, 35]
    assert frame["Has Swimming Pool"].tolist() == [1, 0]
    # numeric flags pass through untouched
    assert frame["Has Garage"].tolist() == [1, 0]
    # input is not mutated
    assert "Year Built" in raw.columns


def test_existing_age_is_kept_over_build_year():
    cfg = TrainingConfig()
    raw = pd.DataFrame(
        {
            "Bedrooms": [3],
            "Square Footage": [2000],
            "Coverage A": [250_000],
            "Age of Home": [7],
            "Year Built": [1900],
            "Premiums Per Policy": [1500.0],
        }
    )
    frame = preprocess(raw, cfg)
    assert frame["Age of Home"].tolist() == [7]
    assert "Year Built" in frame.columns


def test_property_value_fills_coverage():
    cfg = TrainingConfig()
    raw = make_quotes(n=5, coverage_col="Property Value")
    frame = resolve_coverage(raw, cfg)
    assert frame["Coverage A"].tolist() == raw["Property Value"].tolist()
    assert "Coverage A" not in raw.columns


def test_missing_coverage_raises_schema_error():
    cfg = TrainingConfig()
    raw = make_quotes(n=5).drop(columns=["Coverage A"])
    with pytest.raises(SchemaError, match="Coverage A"):
        preprocess(raw, cfg)


def test_missing_columns_are_all_named():
    cfg = TrainingConfig()
    raw = make_quotes(n=5).drop(columns=["Bedrooms", "Premiums Per Policy"])
    with pytest.raises(SchemaError) as excinfo:
        preprocess(raw, cfg)
    assert "Bedrooms" in str(excinfo.value)
    assert "Premiums Per Policy" in str(excinfo.value)


def test_non_numeric_feature_cells_rejected():
    cfg = TrainingConfig()
    frame = preprocess(make_quotes(n=4), cfg)
    frame["Bedrooms"] = frame["Bedrooms"].astype(object)
    frame.loc[0, "Bedrooms"] = "three"
    with pytest.raises(SchemaError, match="Bedrooms"):
        feature_matrix(frame, cfg)


def test_build_features_column_order():
    cfg = TrainingConfig()
    raw = make_quotes(n=10)
    X, y = build_features(raw, cfg)
    assert X.shape == (10, 4)
    assert y.shape == (10,)
    np.testing.assert_allclose(X[:, 0], raw["Bedrooms"].to_numpy(dtype=float))
    np.testing.assert_allclose(X[:, 2], raw["Coverage A"].to_numpy(dtype=float))
    np.testing.assert_allclose(X[:, 3], 2025 - raw["Year Built"].to_numpy(dtype=float))
