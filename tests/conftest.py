"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from tangram_verify.engine.types import CandidatePolygon, PieceType, TargetPiece


# Sample outlines (panel points, y-up)

SQUARE_CCW = np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]])
SQUARE_CW = SQUARE_CCW[::-1].copy()

# Same square, centroid moved to (2, 0)
SQUARE_SHIFTED = SQUARE_CCW + np.array([2.0, 0.0])

TRIANGLE_CCW = np.array([[0.0, 0.0], [60.0, 0.0], [0.0, 60.0]])

# Long thin plank; a few degrees of residual rotation kills its overlap
PLANK = np.array([[-50.0, -2.0], [50.0, -2.0], [50.0, 2.0], [-50.0, 2.0]])

COLLINEAR = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])


def rotated(points: np.ndarray, degrees: float) -> np.ndarray:
    """Rotate about the vertex mean (= area centroid for the symmetric samples)."""
    rad = np.radians(degrees)
    c, s = np.cos(rad), np.sin(rad)
    center = points.mean(axis=0)
    d = points - center
    return np.column_stack([d[:, 0] * c - d[:, 1] * s, d[:, 0] * s + d[:, 1] * c]) + center


def target(tid: str, piece_type: PieceType, points) -> TargetPiece:
    return TargetPiece(id=tid, piece_type=piece_type, polygon=points)


def candidate(piece_type: PieceType, points) -> CandidatePolygon:
    return CandidatePolygon(piece_type=piece_type, polygon=points)


@pytest.fixture
def square_ccw() -> np.ndarray:
    return SQUARE_CCW.copy()


@pytest.fixture
def square_cw() -> np.ndarray:
    return SQUARE_CW.copy()


@pytest.fixture
def triangle() -> np.ndarray:
    return TRIANGLE_CCW.copy()
