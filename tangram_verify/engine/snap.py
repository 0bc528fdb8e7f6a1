"""Global snap — one rigid correction for the whole detected arrangement.

Models the common failure where the physical layout is consistently rotated
or offset against the template (camera pose drift, calibration), so the
caller can nudge the displayed template instead of each piece.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence

import numpy as np

from tangram_verify.engine.types import (
    CandidatePolygon,
    GlobalSnapTransform,
    PieceType,
    TargetPiece,
    VerificationResult,
)
from tangram_verify.utils.geometry import centroid
from tangram_verify.utils.math_helpers import circular_mean, clamp, rotation_matrix

logger = logging.getLogger(__name__)

Point = tuple[float, float]


def compute_global_snap(
    result: VerificationResult,
    target_centroids: Mapping[str, Point],
    candidate_centroids: Mapping[str, Point],
    max_rotation_degrees: float = 15.0,
) -> GlobalSnapTransform | None:
    """Estimate rotation + translation aligning matched targets onto their candidates.

    Both centroid maps are keyed by target id. Only matched targets with both
    centroids known contribute; with none, returns None (apply no correction).

    Rotation is the circular mean of the per-match rotation deltas, clamped to
    ±max_rotation_degrees. Translation is the mean of
    ``candidate_centroid - R(theta) @ target_centroid``.
    """
    pairs = []
    deltas = []
    for r in result.per_target.values():
        if r.matched_index is None or r.metrics is None:
            continue
        t_c = target_centroids.get(r.target_id)
        c_c = candidate_centroids.get(r.target_id)
        if t_c is None or c_c is None:
            continue
        pairs.append((t_c, c_c))
        deltas.append(math.radians(r.metrics.rotation_delta_degrees))

    if not pairs:
        return None

    limit = math.radians(abs(max_rotation_degrees))
    theta = clamp(circular_mean(deltas), -limit, limit)

    targets = np.array([p[0] for p in pairs], dtype=np.float64)
    candidates = np.array([p[1] for p in pairs], dtype=np.float64)
    rotated = targets @ rotation_matrix(theta).T
    tx, ty = np.mean(candidates - rotated, axis=0)

    logger.debug(
        "Global snap from %d matches: rotation=%.2f°, translation=(%.2f, %.2f)",
        len(pairs),
        math.degrees(theta),
        tx,
        ty,
    )
    return GlobalSnapTransform(translation=(float(tx), float(ty)), rotation_radians=float(theta))


def target_centroids(targets: Sequence[TargetPiece]) -> dict[str, Point]:
    """Centroid of each target outline, keyed by target id."""
    return {t.id: centroid(t.polygon) for t in targets}


def matched_candidate_centroids(
    result: VerificationResult,
    candidates_by_type: Mapping[PieceType, Sequence[CandidatePolygon]],
) -> dict[str, Point]:
    """Centroid of each matched candidate, keyed by the id of the target it matched."""
    out: dict[str, Point] = {}
    for r in result.per_target.values():
        if r.matched_index is None:
            continue
        group = candidates_by_type.get(r.piece_type) or []
        if r.matched_index < len(group):
            out[r.target_id] = centroid(group[r.matched_index].polygon)
    return out
