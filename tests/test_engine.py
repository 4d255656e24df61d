import math

import numpy as np
import pytest

from polysimp.polysimp import (
    INTERSECTION_SLACK,
    Outcome,
    Point,
    PointPath,
    SimplificationEngine,
    attach,
    intersect,
    project,
    simplify,
)


def run(points, threshold):
    engine = SimplificationEngine(threshold)
    for p in points:
        engine.append(p)
    return engine


def segment_distance(p, a, b):
    p, a, b = (np.asarray(v, dtype=float) for v in (p, a, b))
    ab = b - a
    denom = float(np.dot(ab, ab))
    if denom == 0.0:
        return float(np.linalg.norm(p - a))
    t = min(1.0, max(0.0, float(np.dot(p - a, ab)) / denom))
    return float(np.linalg.norm(p - (a + t * ab)))


def polyline_distance(p, polyline):
    return min(
        segment_distance(p, polyline[k], polyline[k + 1])
        for k in range(len(polyline) - 1)
    )


def test_empty_and_single_point():
    engine = SimplificationEngine(1.0)
    assert engine.simplified() == []
    engine.append((3, 4))
    assert engine.simplified() == [(3, 4)]
    assert engine.tags[0].dist == 0
    assert engine.tags[0].next == -1
    assert engine.trace() == []


def test_two_points_unchanged():
    engine = run([(0, 0), (3, 1)], 0.5)
    out = engine.simplified()
    assert len(out) == 2
    assert out[0] == pytest.approx((0, 0), abs=1e-9)
    assert out[1] == pytest.approx((3, 1), abs=1e-9)


def test_invalid_threshold():
    with pytest.raises(ValueError):
        SimplificationEngine(-1.0)
    with pytest.raises(ValueError):
        SimplificationEngine(math.nan)


def test_nearly_straight_collapses():
    engine = run([(0, 0), (1, 0.01), (2, -0.01), (3, 0)], 0.5)
    out = engine.simplified()
    assert len(out) == 2
    assert out[0] == pytest.approx((0, 0), abs=0.02)
    assert out[1] == pytest.approx((3, 0), abs=0.02)


def test_right_angle_keeps_corner():
    engine = run([(0, 0), (5, 0), (5, 5)], 0.1)
    out = engine.simplified()
    assert len(out) == 3
    assert out[0] == pytest.approx((0, 0), abs=1e-9)
    assert out[1] == pytest.approx((5, 0), abs=1e-9)
    assert out[2] == pytest.approx((5, 5), abs=1e-9)
    assert [e.outcome for e in engine.trace()] == [Outcome.THRESHOLD, Outcome.ACCEPT]


def test_infinite_threshold_gives_best_fit_segment():
    pts = [(x, 0.3 * (-1) ** x + 0.05 * x) for x in range(15)]
    engine = run(pts, math.inf)
    out = engine.simplified()
    assert len(out) == 2

    line = engine.fitter.fit_line()
    assert out[0] == pytest.approx(project(Point(*pts[0]), line))
    assert out[1] == pytest.approx(project(Point(*pts[-1]), line))


def test_zero_threshold_keeps_every_point():
    pts = [(0, 0), (1, 2), (3, 1), (4, 4), (6, 3), (7, 7), (9, 5)]
    out = run(pts, 0.0).simplified()
    assert len(out) == len(pts)
    for p, q in zip(pts, out):
        assert q == pytest.approx(p, abs=1e-9)


def test_dist_is_monotone():
    x = np.linspace(0, 30, 150)
    pts = list(zip(x, 2.0 * np.sin(x / 3.0)))
    for threshold in (0.05, 0.2, 1.0):
        dists = [tag.dist for tag in run(pts, threshold).tags]
        assert all(a <= b for a, b in zip(dists, dists[1:]))


def test_deviation_bound_on_arc():
    theta = np.linspace(0, math.pi, 200)
    pts = list(zip(10 * np.cos(theta), 10 * np.sin(theta)))
    threshold = 0.2
    out = run(pts, threshold).simplified()
    assert 2 < len(out) < len(pts)
    worst = max(polyline_distance(p, out) for p in pts)
    assert worst <= 2 * threshold + 1e-9


def test_self_intersection_cut_is_sticky():
    engine = run([(0, 0), (2, 0), (1, 1), (1, -1)], math.inf)
    assert engine.tags[0].cut
    assert engine.trace() == [
        (0, Outcome.CUT),
        (1, Outcome.PIONEER_WEAK),
        (2, Outcome.ACCEPT),
    ]

    engine.append((1, -3))
    assert engine.tags[0].cut
    assert engine.trace()[0].outcome is Outcome.CUT
    # the crossing rules out a single segment from the start
    assert len(engine.simplified()) > 2


def test_trace_is_in_increasing_index_order():
    engine = run([(x, 0.01 * (x % 2)) for x in range(6)], 1.0)
    indices = [e.index for e in engine.trace()]
    assert indices == sorted(indices)
    assert indices[-1] == 4


def test_clear_resets_engine():
    engine = run([(0, 0), (1, 1), (2, 0)], 0.1)
    engine.clear()
    assert len(engine) == 0
    assert engine.simplified() == []
    engine.append((5, 5))
    assert engine.tags[0].dist == 0


def test_attach_replays_existing_points():
    pts = [(x, math.sin(x)) for x in np.linspace(0, 12, 60)]
    path = PointPath(pts[:25])
    engine = attach(path, 0.1)
    for p in pts[25:]:
        path.append(p)

    reference = run(pts, 0.1)
    assert len(engine) == len(pts)
    assert [t.dist for t in engine.tags] == [t.dist for t in reference.tags]
    np.testing.assert_allclose(engine.simplified_array(), reference.simplified_array())


def test_path_clear_notifies_engine():
    path = PointPath([(0, 0), (1, 0)])
    engine = attach(path)
    path.clear()
    assert len(path) == 0
    assert len(engine) == 0
    path.append((2, 2))
    assert engine.simplified() == [(2, 2)]


def test_path_rejects_other_mutations():
    path = PointPath([(0, 0)])
    with pytest.raises(TypeError):
        path.insert(0, (1, 1))
    with pytest.raises(TypeError):
        path.pop()
    with pytest.raises(TypeError):
        path[0] = (3, 3)


def test_simplify_batch():
    out = simplify(np.array([(0, 0), (1, 0.01), (2, -0.01), (3, 0)]), 0.5)
    assert out.shape == (2, 2)
    np.testing.assert_allclose(out, [[0, 0], [3, 0]], atol=0.02)

    assert simplify([], 1.0).shape == (0, 2)
    with pytest.raises(ValueError):
        simplify(np.zeros((3, 3)), 1.0)


def test_non_finite_point_leaves_engine_unchanged():
    engine = run([(0, 0), (1, 0)], 0.5)
    for bad in ((math.nan, 1.0), (2.0, math.inf)):
        with pytest.raises(ValueError):
            engine.append(bad)
        assert len(engine) == len(engine.tags) == 2
        assert len(engine.fitter) == 2

    engine.append((2, 0))
    assert len(engine.tags) == 3
    assert len(engine.simplified()) == 2


def test_non_finite_point_rejected_by_path():
    path = PointPath([(0, 0)])
    engine = attach(path, 0.5)
    with pytest.raises(ValueError):
        path.append((math.nan, 0))
    assert len(path) == 1
    assert len(engine) == 1
    with pytest.raises(ValueError):
        PointPath([(0, 0), (math.inf, 1)])


def test_end_point_not_extremal_stops_scan():
    # a hairpin: (3, 0.01) lies between its neighbours along the fitted line
    engine = run([(0, 0), (2, 0), (4, 0), (3, 0.01)], 0.1)
    assert engine.trace() == [
        (1, Outcome.PIONEER_STRONG),
        (2, Outcome.ACCEPT),
    ]
    assert engine.tags[3].next == 2


def test_far_intersection_falls_back_to_original_vertex():
    pts = [(0, 0), (2, 0), (4, 0), (3, 0.01), (1, 0.01)]
    threshold = 0.1
    engine = run(pts, threshold)
    assert [engine.tags[i].next for i in (4, 2)] == [2, 0]

    # the two nearly parallel legs meet near x = 5, far from the turn at (4, 0)
    legs = [engine.fitter.fit_line(0, 2), engine.fitter.fit_line(2, 4)]
    q = intersect(*legs)
    assert (q.x - 4) ** 2 + q.y ** 2 > INTERSECTION_SLACK * threshold ** 2

    out = engine.simplified()
    assert len(out) == 3
    assert out[1] == (4, 0)
    assert max(polyline_distance(p, out) for p in pts) <= 2 * threshold


def test_repeated_point_is_not_a_hull_vertex():
    engine = run([(1, 1), (1, 1)], 0.5)
    assert engine.trace() == [(0, Outcome.PIONEER_WEAK)]
    assert engine.tags[1].next == 0
