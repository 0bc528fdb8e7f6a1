"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from tangram_verify.engine.types import PieceType


class _Outline(BaseModel):
    piece_type: PieceType = Field(..., description="Piece type label, e.g. 'square' or 'smallTriangle1'")
    points: list[tuple[float, float]] = Field(..., description="Outline vertices, implicitly closed")

    @field_validator("piece_type", mode="before")
    @classmethod
    def _normalise_label(cls, v: object) -> PieceType:
        if isinstance(v, str):
            return PieceType.from_label(v)
        return v


class TargetModel(_Outline):
    id: str = Field(..., description="Unique target id within the puzzle")


class CandidateModel(_Outline):
    pass


class ConfigOverrides(BaseModel):
    max_rotation_degrees: float | None = Field(default=None, ge=0, le=180)
    rotation_step_degrees: float | None = Field(default=None, gt=0)
    iou_threshold: float | None = Field(default=None, ge=0, le=1)
    centroid_error_max: float | None = Field(default=None, ge=0)


class VerifyRequest(BaseModel):
    targets: list[TargetModel] = Field(..., description="Puzzle target outlines")
    candidates: list[CandidateModel] = Field(
        default_factory=list,
        description="Detected outlines for this frame, in detection order",
    )
    config: ConfigOverrides = Field(default_factory=ConfigOverrides)
