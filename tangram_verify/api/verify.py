"""POST /api/verify — verify one frame of detected outlines against a puzzle."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from tangram_verify.config import Settings
from tangram_verify.dependencies import get_settings
from tangram_verify.engine.config import VerificationConfig
from tangram_verify.engine.pipeline import create_verifier
from tangram_verify.engine.types import CandidatePolygon, PieceType, TargetPiece
from tangram_verify.models.requests import VerifyRequest
from tangram_verify.models.responses import (
    ConfigResponse,
    MatchResultModel,
    MetricsModel,
    SnapModel,
    VerifyResponse,
)
from tangram_verify.utils.geometry import is_convex

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/config", response_model=ConfigResponse)
async def current_config(app_settings: Settings = Depends(get_settings)) -> ConfigResponse:
    return ConfigResponse(**asdict(VerificationConfig.from_settings(app_settings)))


@router.post("/verify", response_model=VerifyResponse)
async def verify(
    req: VerifyRequest,
    app_settings: Settings = Depends(get_settings),
) -> VerifyResponse:
    config = VerificationConfig.from_settings(app_settings).with_overrides(
        **req.config.model_dump()
    )

    targets = [TargetPiece(id=t.id, piece_type=t.piece_type, polygon=t.points) for t in req.targets]
    candidates = [CandidatePolygon(piece_type=c.piece_type, polygon=c.points) for c in req.candidates]

    warnings: list[str] = []
    for t in targets:
        if len(t.polygon) < 3:
            warnings.append(f"target {t.id}: fewer than 3 points, cannot be matched")
        elif not is_convex(t.polygon):
            warnings.append(f"target {t.id}: outline is not convex, overlap may be inaccurate")
    for i, c in enumerate(candidates):
        if len(c.polygon) < 3:
            warnings.append(f"candidate {i} ({c.piece_type.value}): fewer than 3 points, ignored")
        elif not is_convex(c.polygon):
            warnings.append(f"candidate {i} ({c.piece_type.value}): outline is not convex, overlap may be inaccurate")

    # Request positions of each type's candidates, in the order the engine groups them
    positions: dict[PieceType, list[int]] = {}
    for i, c in enumerate(candidates):
        positions.setdefault(c.piece_type, []).append(i)

    # CPU-bound; keep the event loop free for other requests
    verifier = create_verifier(config)
    frame = await asyncio.get_running_loop().run_in_executor(None, verifier.run, targets, candidates)

    results = {
        tid: MatchResultModel(
            target_id=r.target_id,
            piece_type=r.piece_type.value,
            matched_index=(
                positions[r.piece_type][r.matched_index] if r.matched_index is not None else None
            ),
            type_index=r.matched_index,
            metrics=MetricsModel(**asdict(r.metrics)) if r.metrics is not None else None,
        )
        for tid, r in frame.result.per_target.items()
    }

    snap = None
    if frame.snap is not None:
        snap = SnapModel(
            translation=frame.snap.translation,
            rotation_radians=frame.snap.rotation_radians,
            rotation_degrees=frame.snap.rotation_degrees,
        )

    logger.info(
        "Verify: %d targets, %d candidates, %d matched",
        len(targets),
        len(candidates),
        len(frame.result.matched_targets),
    )

    return VerifyResponse(
        results=results,
        matched_targets=frame.result.matched_targets,
        snap=snap,
        processing_time_ms=round(frame.elapsed_ms, 3),
        warnings=warnings,
    )
