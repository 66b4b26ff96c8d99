from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Mapping

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from premium.errors import ArtifactLoadError, ValidationError
from premium_service.logging_config import configure_logging, correlation_id
from premium_service.predictor import PremiumPredictor
from premium_service.settings import ServiceSettings

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATE_PATH = PACKAGE_DIR / "templates" / "index.html"
STATIC_DIR = PACKAGE_DIR / "static"

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# ── Response Models ─────────────────────────────────────────────────

class PredictResponse(BaseModel):
    predicted_premium: float


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    status: str
    checks: dict[str, bool]


async def read_payload(request: Request) -> Mapping[str, Any]:
    """Decode a JSON or form-encoded body into a flat mapping."""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}

    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise ValidationError("Invalid input types: request body is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Invalid input types: request body must be a JSON object")
    return payload


# ── App Factory ─────────────────────────────────────────────────────

def create_app(
    settings: ServiceSettings | None = None,
    predictor: PremiumPredictor | None = None,
) -> FastAPI:
    settings = settings or ServiceSettings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)

    predictor = predictor or PremiumPredictor(
        model_path=settings.model_path,
        scaler_path=settings.scaler_path,
        calibration_path=settings.calibration_path,
    )

    app = FastAPI(title="Home Insurance Premium API", version="0.1.0")
    app.state.settings = settings
    app.state.predictor = predictor
    app.mount("/static", StaticFiles(directory=STATIC_DIR, check_dir=False), name="static")

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next: Any) -> Response:
        cid = request.headers.get("X-Correlation-ID") or uuid.uuid4().hex[:12]
        correlation_id.set(cid)
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response

    # ── Prediction ──────────────────────────────────────────────────

    @app.post(
        "/predict",
        response_model=PredictResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def predict(request: Request) -> Any:
        try:
            payload = await read_payload(request)
            output = predictor.predict_payload(payload)
        except ValidationError as exc:
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})
        except Exception:
            logger.exception("Prediction error")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error during prediction"},
            )
        return PredictResponse(predicted_premium=output.predicted_premium)

    # ── Health ──────────────────────────────────────────────────────

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/ready", response_model=ReadinessResponse)
    async def ready() -> ReadinessResponse:
        try:
            artifacts = predictor.artifacts()
        except ArtifactLoadError as exc:
            logger.warning("Readiness check failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=ReadinessResponse(status="degraded", checks={"artifacts": False, "calibration": False}).model_dump(),
            )
        checks = {"artifacts": True, "calibration": artifacts.calibrator is not None}
        return ReadinessResponse(status="ready", checks=checks)

    # ── Page ────────────────────────────────────────────────────────

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        return HTMLResponse(TEMPLATE_PATH.read_text(encoding="utf-8"))

    return app


app = create_app()
