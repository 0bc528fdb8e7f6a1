"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str


class ConfigResponse(BaseModel):
    max_rotation_degrees: float
    rotation_step_degrees: float
    iou_threshold: float
    centroid_error_max: float
    use_greedy_assignment: bool = True


class MetricsModel(BaseModel):
    iou: float
    centroid_error: float
    rotation_delta_degrees: float


class MatchResultModel(BaseModel):
    target_id: str
    piece_type: str
    matched_index: int | None = Field(default=None, description="Position of the matched candidate in the request list")
    type_index: int | None = Field(default=None, description="Position among candidates of the same piece type")
    metrics: MetricsModel | None = None


class SnapModel(BaseModel):
    translation: tuple[float, float]
    rotation_radians: float
    rotation_degrees: float


class VerifyResponse(BaseModel):
    results: dict[str, MatchResultModel] = Field(default_factory=dict)
    matched_targets: list[str] = Field(default_factory=list)
    snap: SnapModel | None = None
    processing_time_ms: float = 0.0
    warnings: list[str] = Field(default_factory=list)
