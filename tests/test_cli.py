import json

from premium.artifacts import load_calibration, load_model, load_scaler
from premium_service.cli import build_train_parser, calibrate_main, train_main

from conftest import make_calibration_samples


def test_train_parser_defaults():
    args = build_train_parser().parse_args([])
    assert args.csv == "simulated_home_insurance_quotes.csv"
    assert args.model == "model.joblib"
    assert args.scaler == "scaler.json"
    assert args.solver == "ols"


def test_train_then_calibrate(tmp_path, quotes_csv, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_FORMAT", "text")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")

    code = train_main(["--csv", str(quotes_csv), "--model", "model.joblib", "--scaler", "scaler.json"])
    assert code == 0
    metrics = json.loads(capsys.readouterr().out)
    assert set(metrics) == {"MAE", "RMSE", "R2"}
    assert load_model(tmp_path / "model.joblib")
    assert load_scaler(tmp_path / "scaler.json")

    make_calibration_samples().to_csv(tmp_path / "calib_samples.csv", index=False)
    assert calibrate_main([]) == 0
    assert load_calibration(tmp_path / "calib.json") is not None


def test_train_missing_csv_exits_non_zero(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_FORMAT", "text")
    assert train_main(["--csv", "missing.csv"]) == 1
    assert not (tmp_path / "model.joblib").exists()


def test_calibrate_without_samples_exits_non_zero(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_FORMAT", "text")
    assert calibrate_main([]) == 1
    assert not (tmp_path / "calib.json").exists()
