"""Value types flowing through the verification engine.

Everything here is created fresh per call and discarded once the caller has
consumed it. A candidate index only means something within the call that
produced it.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

from tangram_verify.utils.geometry import as_points
from tangram_verify.utils.math_helpers import rotation_matrix


class PieceType(str, enum.Enum):
    """Interchangeable piece shapes. Duplicate pieces share a type."""

    SMALL_TRIANGLE = "small_triangle"
    MEDIUM_TRIANGLE = "medium_triangle"
    LARGE_TRIANGLE = "large_triangle"
    SQUARE = "square"
    PARALLELOGRAM = "parallelogram"

    @classmethod
    def from_label(cls, label: str | PieceType) -> PieceType:
        """Normalise a detector or puzzle label to a piece type.

        Accepts the enum itself, snake_case, camelCase and numbered duplicates:
        ``"smallTriangle1"``, ``"large_triangle_2"``, ``"Square"``.
        """
        if isinstance(label, PieceType):
            return label
        key = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", label.strip())
        key = re.sub(r"[\s\-]+", "_", key).lower()
        key = re.sub(r"_?\d+$", "", key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown piece type label: {label!r}") from None

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(frozen=True)
class TargetPiece:
    """One outline of the puzzle template. ``id`` is unique even when types repeat."""

    id: str
    piece_type: PieceType
    polygon: NDArray[np.float64] = field(compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "piece_type", PieceType.from_label(self.piece_type))
        object.__setattr__(self, "polygon", as_points(self.polygon))


@dataclass(frozen=True)
class CandidatePolygon:
    """One detected outline with its classified type."""

    piece_type: PieceType
    polygon: NDArray[np.float64] = field(compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "piece_type", PieceType.from_label(self.piece_type))
        object.__setattr__(self, "polygon", as_points(self.polygon))


@dataclass(frozen=True)
class MatchMetrics:
    iou: float
    centroid_error: float
    # Signed; positive = CCW rotation of the target to line up with the candidate
    rotation_delta_degrees: float


@dataclass(frozen=True)
class MatchResult:
    target_id: str
    piece_type: PieceType
    # Index into candidates_by_type[piece_type]; None when unmatched
    matched_index: int | None = None
    metrics: MatchMetrics | None = None

    @property
    def is_matched(self) -> bool:
        return self.matched_index is not None


@dataclass(frozen=True)
class VerificationResult:
    per_target: dict[str, MatchResult] = field(default_factory=dict)

    @property
    def matched_targets(self) -> list[str]:
        return [tid for tid, r in self.per_target.items() if r.is_matched]

    def __getitem__(self, target_id: str) -> MatchResult:
        return self.per_target[target_id]

    def __len__(self) -> int:
        return len(self.per_target)


@dataclass(frozen=True)
class GlobalSnapTransform:
    """Rigid correction: rotate about the origin, then translate."""

    translation: tuple[float, float]
    rotation_radians: float

    @property
    def rotation_degrees(self) -> float:
        return math.degrees(self.rotation_radians)

    def apply(self, points: ArrayLike) -> NDArray[np.float64]:
        pts = as_points(points)
        return pts @ rotation_matrix(self.rotation_radians).T + np.asarray(self.translation)


def group_candidates(
    candidates: Iterable[CandidatePolygon],
) -> dict[PieceType, list[CandidatePolygon]]:
    """Group a flat detector list by type, keeping detection order within each type."""
    grouped: dict[PieceType, list[CandidatePolygon]] = {}
    for c in candidates:
        grouped.setdefault(c.piece_type, []).append(c)
    return grouped
