"""Match engine — pair target outlines with detected outlines of the same type.

Per target and candidate, a bounded rotation sweep finds the rigid alignment
(rotate about the target centroid, then move centroid onto centroid) with the
best IoU. Targets then claim candidates greedily: the target whose best
candidate scores highest goes first, and a candidate claimed by one target is
unavailable to other targets of the same type.

The assignment is greedy and priority-ordered, NOT a globally optimal
(Hungarian) matching. Callers depend on the current tie-break order, so a
switch to an optimal solver is a behaviour change.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType

from numpy.typing import ArrayLike

from tangram_verify.engine.config import VerificationConfig
from tangram_verify.engine.types import (
    CandidatePolygon,
    MatchMetrics,
    MatchResult,
    PieceType,
    TargetPiece,
    VerificationResult,
)
from tangram_verify.utils.geometry import as_points, centroid, iou, rotate_about, translate

logger = logging.getLogger(__name__)

# Finer steps cost more than they gain at tangram scale
MIN_ROTATION_STEP_DEGREES = 0.5
_SWEEP_TOLERANCE = 1e-3
# Scores equal to this many decimals count as tied, so float noise does not pick the winner
_TIE_DECIMALS = 9


@dataclass(frozen=True)
class CandidateScore:
    index: int
    metrics: MatchMetrics


@dataclass(frozen=True)
class _Assignment:
    """Fold state for the greedy pass: claimed indices per type plus results so far."""

    claimed: Mapping[PieceType, frozenset[int]]
    results: Mapping[str, MatchResult]


def build_rotation_sweep(max_degrees: float, step_degrees: float) -> list[float]:
    """Angles to try, ascending, covering [-max, +max].

    The sweep is built outward from 0 so an unrotated piece is always tried
    exactly, and both endpoints are always included.
    """
    step = max(MIN_ROTATION_STEP_DEGREES, step_degrees)
    max_degrees = abs(max_degrees)
    angles = {0.0}
    k = 1
    while k * step <= max_degrees + _SWEEP_TOLERANCE:
        d = min(k * step, max_degrees)
        angles.update((d, -d))
        k += 1
    angles.update((max_degrees, -max_degrees))
    return sorted(angles)


def best_alignment(
    target: ArrayLike,
    candidate: ArrayLike,
    rotation_sweep: Sequence[float],
) -> MatchMetrics | None:
    """Best rigid alignment of ``target`` onto ``candidate`` over the sweep.

    Maximises IoU; ties go to the smaller centroid error, then the smaller
    |rotation|. Returns None if either outline has fewer than 3 vertices.
    """
    target_pts = as_points(target)
    candidate_pts = as_points(candidate)
    if len(target_pts) < 3 or len(candidate_pts) < 3:
        return None

    t_cx, t_cy = centroid(target_pts)
    c_cx, c_cy = centroid(candidate_pts)

    best: MatchMetrics | None = None
    for deg in rotation_sweep:
        rotated = rotate_about(target_pts, deg, (t_cx, t_cy))
        r_cx, r_cy = centroid(rotated)
        dx, dy = c_cx - r_cx, c_cy - r_cy
        aligned = translate(rotated, dx, dy)

        metrics = MatchMetrics(
            iou=iou(aligned, candidate_pts),
            centroid_error=math.hypot(dx, dy),
            rotation_delta_degrees=deg,
        )
        if best is None or _alignment_key(metrics) > _alignment_key(best):
            best = metrics
    return best


def _alignment_key(m: MatchMetrics) -> tuple[float, float, float]:
    return (
        round(m.iou, _TIE_DECIMALS),
        -round(m.centroid_error, _TIE_DECIMALS),
        -abs(m.rotation_delta_degrees),
    )


def _rank_key(score: CandidateScore) -> tuple[float, float, float]:
    """Best-first: IoU desc, |rotation| asc, centroid error asc."""
    m = score.metrics
    return (
        -round(m.iou, _TIE_DECIMALS),
        abs(m.rotation_delta_degrees),
        round(m.centroid_error, _TIE_DECIMALS),
    )


def score_candidates(
    target: TargetPiece,
    candidates: Sequence[CandidatePolygon],
    rotation_sweep: Sequence[float],
) -> list[CandidateScore]:
    """Score every candidate for one target, ranked best-first."""
    scores = []
    for idx, cand in enumerate(candidates):
        metrics = best_alignment(target.polygon, cand.polygon, rotation_sweep)
        if metrics is not None:
            scores.append(CandidateScore(index=idx, metrics=metrics))
    scores.sort(key=_rank_key)
    return scores


def passes_thresholds(m: MatchMetrics, config: VerificationConfig) -> bool:
    return (
        m.iou >= config.iou_threshold
        and abs(m.rotation_delta_degrees) <= config.max_rotation_degrees
        and m.centroid_error <= config.centroid_error_max
    )


def _claim_step(
    config: VerificationConfig,
) -> Callable[[_Assignment, tuple[TargetPiece, list[CandidateScore]]], _Assignment]:
    def step(
        state: _Assignment,
        item: tuple[TargetPiece, list[CandidateScore]],
    ) -> _Assignment:
        target, scores = item
        taken = state.claimed.get(target.piece_type, frozenset())
        chosen = next((s for s in scores if s.index not in taken), None)

        if chosen is not None and passes_thresholds(chosen.metrics, config):
            result = MatchResult(
                target_id=target.id,
                piece_type=target.piece_type,
                matched_index=chosen.index,
                metrics=chosen.metrics,
            )
            claimed = {**state.claimed, target.piece_type: taken | {chosen.index}}
        else:
            # A rejected candidate stays available to later targets
            result = MatchResult(target_id=target.id, piece_type=target.piece_type)
            claimed = state.claimed

        return _Assignment(
            claimed=MappingProxyType(claimed),
            results=MappingProxyType({**state.results, target.id: result}),
        )

    return step


def verify_matches(
    targets: Sequence[TargetPiece],
    candidates_by_type: Mapping[PieceType, Sequence[CandidatePolygon]],
    config: VerificationConfig | None = None,
) -> VerificationResult:
    """Match every target against the detected candidates of its type.

    Returns a result for every target. A target is unmatched when its type has
    no candidates, when every candidate of its type was claimed by a stronger
    target, or when its first unclaimed candidate fails the thresholds.
    """
    config = config or VerificationConfig()
    if not config.use_greedy_assignment:
        raise NotImplementedError("Only greedy assignment is implemented")

    unmatched: dict[str, MatchResult] = {}
    contested: list[tuple[TargetPiece, Sequence[CandidatePolygon]]] = []
    for target in targets:
        candidates = candidates_by_type.get(target.piece_type) or []
        if candidates:
            contested.append((target, candidates))
        else:
            unmatched[target.id] = MatchResult(target_id=target.id, piece_type=target.piece_type)

    scored: list[tuple[TargetPiece, list[CandidateScore]]] = []
    if contested:
        sweep = build_rotation_sweep(config.max_rotation_degrees, config.rotation_step_degrees)
        scored = [(t, score_candidates(t, cands, sweep)) for t, cands in contested]

    # Strongest best-candidate first; sorted() is stable so input order breaks full ties
    def priority(item: tuple[TargetPiece, list[CandidateScore]]) -> tuple[float, float, float]:
        _, scores = item
        if not scores:
            return (0.0, math.inf, math.inf)
        return _rank_key(scores[0])

    initial = _Assignment(claimed=MappingProxyType({}), results=MappingProxyType({}))
    assigned = reduce(_claim_step(config), sorted(scored, key=priority), initial)

    merged = {**unmatched, **assigned.results}
    per_target = {t.id: merged[t.id] for t in targets}
    result = VerificationResult(per_target=per_target)

    logger.debug(
        "Verified %d targets against %d candidate types: %d matched",
        len(per_target),
        len(candidates_by_type),
        len(result.matched_targets),
    )
    return result
