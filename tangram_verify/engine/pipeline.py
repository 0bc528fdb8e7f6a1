"""Frame verifier — runs matching then global snap for one camera frame."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from tangram_verify.config import settings
from tangram_verify.engine.config import VerificationConfig
from tangram_verify.engine.matching import verify_matches
from tangram_verify.engine.snap import (
    compute_global_snap,
    matched_candidate_centroids,
    target_centroids,
)
from tangram_verify.engine.types import (
    CandidatePolygon,
    GlobalSnapTransform,
    PieceType,
    TargetPiece,
    VerificationResult,
    group_candidates,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameVerification:
    result: VerificationResult
    snap: GlobalSnapTransform | None
    elapsed_ms: float = 0.0


class FrameVerifier:
    """Holds a configuration and nothing else; every run is independent."""

    def __init__(
        self,
        config: VerificationConfig | None = None,
        frame_budget_ms: float | None = None,
    ) -> None:
        self.config = config or VerificationConfig.from_settings(settings)
        self.frame_budget_ms = (
            frame_budget_ms if frame_budget_ms is not None else settings.frame_budget_ms
        )

    def run(
        self,
        targets: Sequence[TargetPiece],
        candidates: Mapping[PieceType, Sequence[CandidatePolygon]] | Iterable[CandidatePolygon],
    ) -> FrameVerification:
        """Verify one frame. ``candidates`` may be grouped by type or a flat list."""
        start = time.perf_counter()

        if isinstance(candidates, Mapping):
            by_type = {PieceType.from_label(k): list(v) for k, v in candidates.items()}
        else:
            by_type = group_candidates(candidates)

        result = verify_matches(targets, by_type, self.config)
        snap = compute_global_snap(
            result,
            target_centroids(targets),
            matched_candidate_centroids(result, by_type),
            self.config.max_rotation_degrees,
        )

        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(
            "Frame verified: %d/%d targets matched, snap=%s in %.1fms",
            len(result.matched_targets),
            len(result),
            "yes" if snap is not None else "no",
            elapsed,
        )
        if elapsed > self.frame_budget_ms:
            logger.info(
                "Frame verification took %.1fms (budget %.1fms) for %d targets",
                elapsed,
                self.frame_budget_ms,
                len(targets),
            )
        return FrameVerification(result=result, snap=snap, elapsed_ms=elapsed)


def create_verifier(config: VerificationConfig | None = None) -> FrameVerifier:
    """Factory function for creating a frame verifier."""
    return FrameVerifier(config=config)
