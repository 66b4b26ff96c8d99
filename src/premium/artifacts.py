from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Sequence

import joblib

from premium.calibration import CalibrationParameters
from premium.errors import ArtifactLoadError
from premium.linear_model import ModelParameters
from premium.scaler import ScalerParameters

logger = logging.getLogger(__name__)

MODEL_KEY = "home_premium_linear"
N_FEATURES = 4


@contextmanager
def _atomic_path(path: Path) -> Iterator[Path]:
    """Yield a temp path beside ``path``; move it into place only if the block succeeds."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        yield tmp_path
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    with _atomic_path(path) as tmp:
        tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _read_json(path: Path, what: str) -> dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ArtifactLoadError(f"{what} file not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise ArtifactLoadError(f"Could not read {what} file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ArtifactLoadError(f"{what} file {path} must contain a JSON object")
    return payload


def _finite_vector(value: Any, name: str, path: Path, length: int) -> tuple[float, ...]:
    try:
        vec = tuple(float(v) for v in value)
    except (TypeError, ValueError) as exc:
        raise ArtifactLoadError(f"{path}: '{name}' must be a list of numbers") from exc
    if len(vec) != length:
        raise ArtifactLoadError(f"{path}: '{name}' must have {length} values, got {len(vec)}")
    if not all(math.isfinite(v) for v in vec):
        raise ArtifactLoadError(f"{path}: '{name}' contains non-finite values")
    return vec


def _finite_scalar(value: Any, name: str, path: Path) -> float:
    if isinstance(value, bool):
        raise ArtifactLoadError(f"{path}: '{name}' must be a number")
    try:
        num = float(value)
    except (TypeError, ValueError) as exc:
        raise ArtifactLoadError(f"{path}: '{name}' must be a number") from exc
    if not math.isfinite(num):
        raise ArtifactLoadError(f"{path}: '{name}' is not finite")
    return num


# ── Scaler ──────────────────────────────────────────────────────────

def save_scaler(params: ScalerParameters, path: str | Path) -> Path:
    out = Path(path)
    _write_json(out, params.to_dict())
    logger.info("Saved scaler to %s", out)
    return out


def load_scaler(path: str | Path, n_features: int = N_FEATURES) -> ScalerParameters:
    src = Path(path)
    payload = _read_json(src, "Scaler")
    if "mean" not in payload or "scale" not in payload:
        raise ArtifactLoadError(f"{src}: scaler file needs 'mean' and 'scale'")
    mean = _finite_vector(payload["mean"], "mean", src, n_features)
    scale = _finite_vector(payload["scale"], "scale", src, n_features)
    if any(s <= 0 for s in scale):
        raise ArtifactLoadError(f"{src}: 'scale' values must be positive")
    return ScalerParameters(mean=mean, scale=scale)


# ── Model ───────────────────────────────────────────────────────────

def save_model(
    params: ModelParameters,
    path: str | Path,
    feature_names: Sequence[str],
    solver: str = "ols",
    version: str | None = None,
) -> Path:
    out = Path(path)
    payload = {
        "key": MODEL_KEY,
        "feature_names": list(feature_names),
        "weights": list(params.weights),
        "bias": params.bias,
        "solver": solver,
        "version": version or datetime.now(timezone.utc).strftime("model-%Y%m%d%H%M%S"),
    }
    with _atomic_path(out) as tmp:
        joblib.dump(payload, tmp)
    logger.info("Saved model %s to %s", payload["version"], out)
    return out


def load_model(path: str | Path, n_features: int = N_FEATURES) -> ModelParameters:
    src = Path(path)
    if not src.is_file():
        raise ArtifactLoadError(f"Model file not found: {src}")
    try:
        payload = joblib.load(src)
    except Exception as exc:
        raise ArtifactLoadError(f"Could not read model file {src}: {exc}") from exc
    if not isinstance(payload, dict) or "weights" not in payload or "bias" not in payload:
        raise ArtifactLoadError(f"{src}: model payload needs 'weights' and 'bias'")
    weights = _finite_vector(payload["weights"], "weights", src, n_features)
    bias = _finite_scalar(payload["bias"], "bias", src)
    logger.info("Loaded model %s from %s", payload.get("version", "unknown"), src)
    return ModelParameters(weights=weights, bias=bias)


# ── Calibration ─────────────────────────────────────────────────────

def save_calibration(params: CalibrationParameters, path: str | Path) -> Path:
    out = Path(path)
    _write_json(out, params.to_dict())
    logger.info("Saved calibration to %s", out)
    return out


def load_calibration(path: str | Path) -> CalibrationParameters | None:
    """Return None when no calibration file exists; a present but broken file is an error."""
    src = Path(path)
    if not src.exists():
        return None
    payload = _read_json(src, "Calibration")
    if "a" not in payload or "b" not in payload:
        raise ArtifactLoadError(f"{src}: calibration file needs 'a' and 'b'")
    return CalibrationParameters(
        a=_finite_scalar(payload["a"], "a", src),
        b=_finite_scalar(payload["b"], "b", src),
    )
