from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from premium.config import DEFAULT_CALIBRATION_PATH, DEFAULT_MODEL_PATH, DEFAULT_SCALER_PATH


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
        populate_by_name=True,
    )

    model_path: str = Field(default=DEFAULT_MODEL_PATH, alias="MODEL_PATH")
    scaler_path: str = Field(default=DEFAULT_SCALER_PATH, alias="SCALER_PATH")
    calibration_path: str = Field(default=DEFAULT_CALIBRATION_PATH, alias="CALIB_PATH")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")
