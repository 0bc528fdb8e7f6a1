"""Verification configuration — acceptance thresholds and rotation sweep."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tangram_verify.config import Settings


@dataclass(frozen=True)
class VerificationConfig:
    """Tunable knobs for matching detected outlines against targets.

    The numeric defaults were tuned for a panel measured in screen points;
    re-check them when the coordinate scale changes.
    """

    # Rotation sweep covers [-max, +max]; also the acceptance bound on |rotation delta|
    max_rotation_degrees: float = 15.0
    rotation_step_degrees: float = 2.0

    # Acceptance thresholds
    iou_threshold: float = 0.60
    centroid_error_max: float = 30.0  # same length unit as the polygons

    # Greedy priority assignment is the only mode implemented
    use_greedy_assignment: bool = True

    def __post_init__(self) -> None:
        if self.rotation_step_degrees <= 0:
            raise ValueError("rotation_step_degrees must be positive")
        if not 0.0 <= self.max_rotation_degrees <= 180.0:
            raise ValueError("max_rotation_degrees must be within [0, 180]")
        if self.centroid_error_max < 0:
            raise ValueError("centroid_error_max must be non-negative")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be within [0, 1]")

    @classmethod
    def from_settings(cls, settings: Settings) -> VerificationConfig:
        return cls(
            max_rotation_degrees=settings.max_rotation_degrees,
            rotation_step_degrees=settings.rotation_step_degrees,
            iou_threshold=settings.iou_threshold,
            centroid_error_max=settings.centroid_error_max,
        )

    def with_overrides(self, **overrides: Any) -> VerificationConfig:
        """Copy with the given fields replaced; ``None`` values are ignored."""
        values = asdict(self)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return VerificationConfig(**values)
