"""Canonical tangram geometry in normalized space (small triangle legs = 1).

Vertices are counter-clockwise, starting from the origin vertex.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from tangram_verify.engine.types import PieceType, TargetPiece
from tangram_verify.utils.geometry import centroid, rotate_about

_SQRT2 = math.sqrt(2.0)

_CANONICAL: dict[PieceType, list[tuple[float, float]]] = {
    PieceType.SMALL_TRIANGLE: [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)],
    PieceType.MEDIUM_TRIANGLE: [(0.0, 0.0), (_SQRT2, 0.0), (0.0, _SQRT2)],
    PieceType.LARGE_TRIANGLE: [(0.0, 0.0), (2.0, 0.0), (0.0, 2.0)],
    PieceType.SQUARE: [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)],
    PieceType.PARALLELOGRAM: [
        (0.0, 0.0),
        (_SQRT2, 0.0),
        (_SQRT2 / 2, _SQRT2 / 2),
        (-_SQRT2 / 2, _SQRT2 / 2),
    ],
}

_CANONICAL_AREA: dict[PieceType, float] = {
    PieceType.SMALL_TRIANGLE: 0.5,
    PieceType.MEDIUM_TRIANGLE: 1.0,
    PieceType.LARGE_TRIANGLE: 2.0,
    PieceType.SQUARE: 1.0,
    PieceType.PARALLELOGRAM: 1.0,
}

# The seven pieces of a full set, by conventional id
STANDARD_SET: dict[str, PieceType] = {
    "large_triangle_1": PieceType.LARGE_TRIANGLE,
    "large_triangle_2": PieceType.LARGE_TRIANGLE,
    "medium_triangle": PieceType.MEDIUM_TRIANGLE,
    "small_triangle_1": PieceType.SMALL_TRIANGLE,
    "small_triangle_2": PieceType.SMALL_TRIANGLE,
    "square": PieceType.SQUARE,
    "parallelogram": PieceType.PARALLELOGRAM,
}


def canonical_vertices(piece_type: PieceType | str) -> NDArray[np.float64]:
    return np.array(_CANONICAL[PieceType.from_label(piece_type)], dtype=np.float64)


def canonical_area(piece_type: PieceType | str) -> float:
    return _CANONICAL_AREA[PieceType.from_label(piece_type)]


def place_piece(
    piece_type: PieceType | str,
    scale: float = 1.0,
    rotation_degrees: float = 0.0,
    offset: tuple[float, float] = (0.0, 0.0),
) -> NDArray[np.float64]:
    """Scale a canonical piece, rotate it about its centroid, and move the centroid to ``offset``."""
    pts = canonical_vertices(piece_type) * scale
    cx, cy = centroid(pts)
    pts = rotate_about(pts, rotation_degrees, (cx, cy))
    return pts + np.array([offset[0] - cx, offset[1] - cy])


def make_target(
    target_id: str,
    piece_type: PieceType | str,
    scale: float = 1.0,
    rotation_degrees: float = 0.0,
    offset: tuple[float, float] = (0.0, 0.0),
) -> TargetPiece:
    return TargetPiece(
        id=target_id,
        piece_type=PieceType.from_label(piece_type),
        polygon=place_piece(piece_type, scale, rotation_degrees, offset),
    )
