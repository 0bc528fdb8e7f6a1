"""Tangram piece-verification engine."""

from tangram_verify.engine.config import VerificationConfig
from tangram_verify.engine.matching import verify_matches
from tangram_verify.engine.pieces import STANDARD_SET, make_target, place_piece
from tangram_verify.engine.pipeline import FrameVerification, FrameVerifier, create_verifier
from tangram_verify.engine.snap import compute_global_snap
from tangram_verify.engine.types import (
    CandidatePolygon,
    GlobalSnapTransform,
    MatchMetrics,
    MatchResult,
    PieceType,
    TargetPiece,
    VerificationResult,
    group_candidates,
)

__all__ = [
    "VerificationConfig",
    "verify_matches",
    "compute_global_snap",
    "FrameVerifier",
    "FrameVerification",
    "create_verifier",
    "STANDARD_SET",
    "make_target",
    "place_piece",
    "CandidatePolygon",
    "GlobalSnapTransform",
    "MatchMetrics",
    "MatchResult",
    "PieceType",
    "TargetPiece",
    "VerificationResult",
    "group_candidates",
]
