"""Leaf-node geometry helpers. No engine imports.

Polygons are (N, 2) float arrays, implicitly closed (the last vertex connects
back to the first). Winding is never assumed; anything that needs it derives
it from the signed area.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray
from shapely.geometry import MultiPoint

# Below this |signed area| the centroid falls back to the vertex mean
CENTROID_AREA_EPS = 1e-6
# Below this |signed area| a clip polygon is treated as empty
CLIP_AREA_EPS = 1e-9
# Near-parallel edge crossings are dropped
PARALLEL_EPS = 1e-8
# Unions at or below this are treated as empty
UNION_EPS = 1e-8


def as_points(polygon: ArrayLike) -> NDArray[np.float64]:
    """Coerce a polygon-like value to a float64 (N, 2) array.

    Anything that does not have two columns comes back as an empty (0, 2) array.
    """
    pts = np.asarray(polygon, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        return np.empty((0, 2))
    return pts


def signed_area(polygon: ArrayLike) -> float:
    """Shoelace formula over the closed ring. Positive = CCW, Negative = CW."""
    pts = as_points(polygon)
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    return float(0.5 * np.sum(x * y_next - x_next * y))


def area(polygon: ArrayLike) -> float:
    return abs(signed_area(polygon))


def centroid(polygon: ArrayLike) -> tuple[float, float]:
    """Area-weighted centroid.

    Degenerate polygons (collinear or repeated vertices) have no meaningful
    area centroid, so the arithmetic mean of the vertices is returned instead.
    """
    pts = as_points(polygon)
    if len(pts) == 0:
        return (0.0, 0.0)

    sa = signed_area(pts)
    if abs(sa) < CENTROID_AREA_EPS:
        return (float(np.mean(pts[:, 0])), float(np.mean(pts[:, 1])))

    x = pts[:, 0]
    y = pts[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    cross = x * y_next - x_next * y
    factor = 1.0 / (6.0 * sa)
    cx = float(np.sum((x + x_next) * cross) * factor)
    cy = float(np.sum((y + y_next) * cross) * factor)
    return (cx, cy)


def _is_inside(
    p: tuple[float, float],
    a: tuple[float, float],
    b: tuple[float, float],
    inside_sign: float,
) -> bool:
    """Half-plane test against the directed edge a→b.

    inside_sign=+1 keeps the left side (CCW clip), -1 the right side (CW clip).
    Points on the edge are inside.
    """
    cross = (b[0] - a[0]) * (p[1] - a[1]) - (b[1] - a[1]) * (p[0] - a[0])
    return inside_sign * cross >= 0


def _line_intersection(
    s: tuple[float, float],
    e: tuple[float, float],
    a: tuple[float, float],
    b: tuple[float, float],
) -> tuple[float, float] | None:
    """Intersection of line s-e with line a-b, or None if near-parallel."""
    a1 = e[1] - s[1]
    b1 = s[0] - e[0]
    c1 = a1 * s[0] + b1 * s[1]
    a2 = b[1] - a[1]
    b2 = a[0] - b[0]
    c2 = a2 * a[0] + b2 * a[1]
    det = a1 * b2 - a2 * b1
    if abs(det) < PARALLEL_EPS:
        return None
    return ((b2 * c1 - b1 * c2) / det, (a1 * c2 - a2 * c1) / det)


def intersect(subject: ArrayLike, clip: ArrayLike) -> NDArray[np.float64]:
    """Clip ``subject`` by ``clip`` (Sutherland–Hodgman).

    The clip polygon's winding is read from its signed area and the inside
    test flips for clockwise clips, so either operand may come in either
    orientation.

    Precondition: ``clip`` must be convex. A concave clip gives undefined
    results. Tangram pieces are all convex.

    Returns an empty (0, 2) array when there is no overlap or either input is
    degenerate.
    """
    subj = as_points(subject)
    clp = as_points(clip)
    if len(subj) < 3 or len(clp) < 3:
        return np.empty((0, 2))

    clip_area = signed_area(clp)
    if abs(clip_area) < CLIP_AREA_EPS:
        return np.empty((0, 2))
    inside_sign = 1.0 if clip_area > 0 else -1.0

    clip_pts = [(float(x), float(y)) for x, y in clp]
    output = [(float(x), float(y)) for x, y in subj]

    for i, a in enumerate(clip_pts):
        b = clip_pts[(i + 1) % len(clip_pts)]
        candidates = output
        output = []
        if not candidates:
            break
        s = candidates[-1]
        for e in candidates:
            if _is_inside(e, a, b, inside_sign):
                if not _is_inside(s, a, b, inside_sign):
                    hit = _line_intersection(s, e, a, b)
                    if hit is not None:
                        output.append(hit)
                output.append(e)
            elif _is_inside(s, a, b, inside_sign):
                hit = _line_intersection(s, e, a, b)
                if hit is not None:
                    output.append(hit)
            s = e

    if len(output) < 3:
        return np.empty((0, 2))
    return np.array(output, dtype=np.float64)


def iou(a: ArrayLike, b: ArrayLike) -> float:
    """Intersection-over-Union of two polygons, in [0, 1]."""
    inter = intersect(a, b)
    if len(inter) == 0:
        return 0.0
    inter_area = area(inter)
    union = area(a) + area(b) - inter_area
    if union <= UNION_EPS:
        return 0.0
    return float(min(1.0, max(0.0, inter_area / union)))


def rotate_about(
    polygon: ArrayLike,
    degrees: float,
    origin: tuple[float, float],
) -> NDArray[np.float64]:
    """Rotate CCW by ``degrees`` about ``origin``. Zero returns an exact copy."""
    pts = as_points(polygon)
    if degrees == 0:
        return pts.copy()
    rad = math.radians(degrees)
    cos_a, sin_a = math.cos(rad), math.sin(rad)
    ox, oy = origin
    dx = pts[:, 0] - ox
    dy = pts[:, 1] - oy
    rotated = np.empty_like(pts)
    rotated[:, 0] = dx * cos_a - dy * sin_a + ox
    rotated[:, 1] = dx * sin_a + dy * cos_a + oy
    return rotated


def translate(polygon: ArrayLike, dx: float, dy: float) -> NDArray[np.float64]:
    pts = as_points(polygon)
    return pts + np.array([dx, dy])


def is_convex(polygon: ArrayLike, tolerance: float = 1e-6) -> bool:
    """True if the polygon fills its convex hull (within ``tolerance``)."""
    pts = as_points(polygon)
    if len(pts) < 3:
        return False
    hull_area = float(MultiPoint([tuple(p) for p in pts]).convex_hull.area)
    if hull_area <= UNION_EPS:
        return False
    return area(pts) / hull_area >= 1.0 - tolerance
