"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    tangram_verify_env: str = "development"
    tangram_verify_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Verification defaults (panel points); override per deployment scale
    max_rotation_degrees: float = Field(default=15.0, ge=0, le=180)
    rotation_step_degrees: float = 2.0
    iou_threshold: float = 0.60
    centroid_error_max: float = 30.0

    # One camera frame at 30 fps
    frame_budget_ms: float = 33.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
