from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from premium.calibration_pipeline import run_calibration
from premium.config import (
    DEFAULT_MODEL_PATH,
    DEFAULT_SCALER_PATH,
    DEFAULT_TRAINING_CSV,
    TrainingConfig,
)
from premium.errors import PremiumError
from premium.linear_model import SOLVERS
from premium.training_pipeline import run_training
from premium_service.logging_config import configure_logging
from premium_service.settings import ServiceSettings

logger = logging.getLogger(__name__)


def _configure_from_settings() -> ServiceSettings:
    settings = ServiceSettings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)
    return settings


def build_train_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="premium-train",
        description="Train the linear premium model and write model and scaler artifacts.",
    )
    parser.add_argument("--csv", default=DEFAULT_TRAINING_CSV,
                        help=f"Training CSV (default {DEFAULT_TRAINING_CSV})")
    parser.add_argument("--model", default=DEFAULT_MODEL_PATH,
                        help=f"Output model artifact (default {DEFAULT_MODEL_PATH})")
    parser.add_argument("--scaler", default=DEFAULT_SCALER_PATH,
                        help=f"Output scaler artifact (default {DEFAULT_SCALER_PATH})")
    parser.add_argument("--solver", choices=SOLVERS, default="ols",
                        help="ols: closed-form least squares (default); adam: gradient descent, needs torch")
    return parser


def train_main(argv: Sequence[str] | None = None) -> int:
    args = build_train_parser().parse_args(argv)
    _configure_from_settings()
    try:
        result = run_training(args.csv, args.model, args.scaler, TrainingConfig(solver=args.solver))
    except (PremiumError, OSError, RuntimeError) as exc:
        logger.error("Error: %s", exc)
        return 1
    print(json.dumps(result.metrics.to_dict(), indent=2))
    return 0


def calibrate_main(argv: Sequence[str] | None = None) -> int:
    argparse.ArgumentParser(
        prog="premium-calibrate",
        description="Fit calibration from calib_samples.csv using model.joblib and scaler.json; writes calib.json.",
    ).parse_args(argv)
    _configure_from_settings()
    try:
        calibrator = run_calibration()
    except (PremiumError, OSError) as exc:
        logger.error("Error: %s", exc)
        return 1
    print(json.dumps(calibrator.params.to_dict(), indent=2))
    return 0


def serve_main() -> None:
    import uvicorn

    settings = _configure_from_settings()
    logger.info("Server running on http://%s:%d", settings.host, settings.port)
    uvicorn.run("premium_service.api:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    sys.exit(train_main())
