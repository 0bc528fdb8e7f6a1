"""Tests for the geometry kernel — area, centroid, clipping, IoU."""

from __future__ import annotations

import numpy as np
import pytest
from shapely.geometry import Polygon

from tangram_verify.utils.geometry import (
    area,
    as_points,
    centroid,
    intersect,
    iou,
    is_convex,
    rotate_about,
    signed_area,
    translate,
)
from tests.conftest import COLLINEAR, SQUARE_CCW, SQUARE_CW, TRIANGLE_CCW, rotated


def _regular_polygon(n: int, radius: float, center: tuple[float, float], phase: float) -> np.ndarray:
    angles = phase + np.arange(n) * 2 * np.pi / n
    return np.column_stack([center[0] + radius * np.cos(angles), center[1] + radius * np.sin(angles)])


def _random_convex_pairs(count: int = 25):
    rng = np.random.default_rng(7)
    for _ in range(count):
        a = _regular_polygon(int(rng.integers(3, 9)), rng.uniform(0.5, 3), tuple(rng.uniform(-2, 2, 2)), rng.uniform(0, np.pi))
        b = _regular_polygon(int(rng.integers(3, 9)), rng.uniform(0.5, 3), tuple(rng.uniform(-2, 2, 2)), rng.uniform(0, np.pi))
        yield a, b


# --- area / centroid ---


def test_signed_area_winding():
    assert signed_area(SQUARE_CCW) == pytest.approx(4.0)
    assert signed_area(SQUARE_CW) == pytest.approx(-4.0)
    assert area(SQUARE_CW) == pytest.approx(4.0)


def test_signed_area_degenerate():
    assert signed_area(COLLINEAR) == pytest.approx(0.0)
    assert signed_area([[0, 0], [1, 1]]) == 0.0


def test_centroid_triangle():
    cx, cy = centroid(TRIANGLE_CCW)
    assert cx == pytest.approx(20.0)
    assert cy == pytest.approx(20.0)


def test_centroid_is_area_weighted():
    # Extra vertex on the bottom edge skews the vertex mean but not the area centroid
    pts = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [2.0, 2.0], [0.0, 2.0]])
    cx, cy = centroid(pts)
    assert cx == pytest.approx(1.0)
    assert cy == pytest.approx(1.0)


def test_centroid_collinear_falls_back_to_mean():
    assert centroid(COLLINEAR) == pytest.approx((1.0, 1.0))


def test_centroid_independent_of_winding():
    assert centroid(SQUARE_CW) == pytest.approx(centroid(SQUARE_CCW))


def test_centroid_empty():
    assert centroid([]) == (0.0, 0.0)


def test_as_points_rejects_bad_shapes():
    assert as_points([1.0, 2.0, 3.0]).shape == (0, 2)
    assert as_points([[1, 2, 3]]).shape == (0, 2)
    assert as_points([(0, 0), (1, 0), (0, 1)]).dtype == np.float64


# --- clipping ---


def test_intersect_self_is_whole_polygon():
    inter = intersect(SQUARE_CCW, SQUARE_CCW)
    assert area(inter) == pytest.approx(4.0)


def test_intersect_half_overlap():
    shifted = translate(SQUARE_CCW, 1.0, 0.0)
    inter = intersect(SQUARE_CCW, shifted)
    assert area(inter) == pytest.approx(2.0)


@pytest.mark.parametrize("flip_subject", [False, True])
@pytest.mark.parametrize("flip_clip", [False, True])
def test_intersect_orientation_invariant(flip_subject, flip_clip):
    a = rotated(SQUARE_CCW, 30.0)
    b = translate(SQUARE_CCW, 0.5, 0.7)
    if flip_subject:
        a = a[::-1]
    if flip_clip:
        b = b[::-1]
    expected = Polygon(a).intersection(Polygon(b)).area
    assert area(intersect(a, b)) == pytest.approx(expected, rel=1e-9)


def test_intersect_matches_shapely_on_convex_pairs():
    for a, b in _random_convex_pairs():
        expected = Polygon(a).intersection(Polygon(b)).area
        assert area(intersect(a, b)) == pytest.approx(expected, abs=1e-9)


def test_intersect_disjoint_is_empty():
    far = translate(SQUARE_CCW, 10.0, 0.0)
    assert len(intersect(SQUARE_CCW, far)) == 0


def test_intersect_degenerate_clip_is_empty():
    assert len(intersect(SQUARE_CCW, COLLINEAR)) == 0


def test_intersect_too_few_points():
    assert len(intersect(SQUARE_CCW, [[0, 0], [1, 1]])) == 0
    assert len(intersect([[0, 0]], SQUARE_CCW)) == 0


# --- IoU ---


def test_iou_identity():
    assert iou(SQUARE_CCW, SQUARE_CCW) == 1.0
    assert iou(TRIANGLE_CCW, TRIANGLE_CCW) == 1.0


def test_iou_known_value():
    shifted = translate(SQUARE_CCW, 1.0, 0.0)
    # overlap 2, union 6
    assert iou(SQUARE_CCW, shifted) == pytest.approx(1.0 / 3.0)


def test_iou_symmetric():
    for a, b in _random_convex_pairs():
        assert iou(a, b) == pytest.approx(iou(b, a), abs=1e-12)


def test_iou_bounds():
    for a, b in _random_convex_pairs():
        value = iou(a, b)
        assert 0.0 <= value <= 1.0


def test_iou_disjoint_is_zero():
    assert iou(SQUARE_CCW, translate(SQUARE_CCW, 5.0, 5.0)) == 0.0


def test_iou_edge_touching_is_zero():
    assert iou(SQUARE_CCW, translate(SQUARE_CCW, 2.0, 0.0)) == pytest.approx(0.0)


def test_iou_orientation_invariant():
    b = translate(rotated(SQUARE_CCW, 10.0), 0.3, -0.2)
    reference = iou(SQUARE_CCW, b)
    assert iou(SQUARE_CW, b) == pytest.approx(reference)
    assert iou(SQUARE_CCW, b[::-1]) == pytest.approx(reference)
    assert iou(SQUARE_CW, b[::-1]) == pytest.approx(reference)


def test_iou_degenerate_is_zero():
    assert iou(SQUARE_CCW, COLLINEAR) == 0.0
    assert iou(COLLINEAR, COLLINEAR) == 0.0


# --- transforms / convexity ---


def test_rotate_about_zero_is_exact_copy():
    out = rotate_about(TRIANGLE_CCW, 0.0, (20.0, 20.0))
    assert np.array_equal(out, TRIANGLE_CCW)
    assert out is not TRIANGLE_CCW


def test_rotate_about_quarter_turn():
    out = rotate_about([[1.0, 0.0], [0.0, 0.0], [0.0, 1.0]], 90.0, (0.0, 0.0))
    np.testing.assert_allclose(out, [[0.0, 1.0], [0.0, 0.0], [-1.0, 0.0]], atol=1e-12)


def test_rotate_keeps_centroid():
    out = rotate_about(TRIANGLE_CCW, 37.0, centroid(TRIANGLE_CCW))
    assert centroid(out) == pytest.approx(centroid(TRIANGLE_CCW))


def test_is_convex():
    assert is_convex(SQUARE_CCW)
    assert is_convex(SQUARE_CW)
    arrow = np.array([[0.0, 0.0], [2.0, 1.0], [0.0, 2.0], [1.0, 1.0]])
    assert not is_convex(arrow)
    assert not is_convex(COLLINEAR)
