from __future__ import annotations

import math

import pytest

import dxfscene.bulge as bulge_module
from tests._scene_helpers import distance, xy_close


def test_semicircle_bulge_emits_start_but_not_end() -> None:
    vertices = bulge_module.bulge_vertices((0.0, 0.0), (1.0, 0.0), 1.0)

    # 180 degrees at roughly one segment per 10 degrees.
    assert len(vertices) == bulge_module.default_segment_count(1.0)
    assert len(vertices) >= 18
    assert vertices[0] == (0.0, 0.0, 0.0)
    assert all(not xy_close(vertex, (1.0, 0.0)) for vertex in vertices)
    # Positive bulge turns counterclockwise, passing below the chord here.
    assert min(y for _x, y, _z in vertices) < -0.45
    for vertex in vertices:
        assert distance(vertex, (0.5, 0.0)) == pytest.approx(0.5)


def test_negative_bulge_turns_clockwise() -> None:
    vertices = bulge_module.bulge_vertices((0.0, 0.0), (1.0, 0.0), -1.0)
    assert max(y for _x, y, _z in vertices) > 0.45


def test_quarter_circle_center_and_radius() -> None:
    bulge = math.tan(math.pi / 8.0)
    center, radius, start_angle, angle = bulge_module.bulge_arc_parameters((1.0, 0.0), (0.0, 1.0), bulge)

    assert xy_close((center.x, center.y), (0.0, 0.0))
    assert radius == pytest.approx(1.0)
    assert start_angle == pytest.approx(0.0)
    assert angle == pytest.approx(math.pi / 2.0)


def test_small_arcs_use_at_least_six_segments() -> None:
    assert bulge_module.default_segment_count(0.01) == 6
    assert len(bulge_module.bulge_vertices((0.0, 0.0), (1.0, 0.0), 0.01)) == 6


def test_explicit_segment_count_is_respected() -> None:
    vertices = bulge_module.bulge_vertices((0.0, 0.0), (1.0, 0.0), 1.0, segments=4)
    assert len(vertices) == 4


def test_zero_bulge_or_degenerate_chord_returns_start_only() -> None:
    assert bulge_module.bulge_vertices((2.0, 3.0), (4.0, 3.0), 0.0) == [(2.0, 3.0, 0.0)]
    assert bulge_module.bulge_vertices((2.0, 3.0), (2.0, 3.0), 0.5) == [(2.0, 3.0, 0.0)]


def test_final_step_closes_on_end_point_and_shrinks_with_more_segments() -> None:
    start = (0.0, 0.0)
    end = (3.0, 1.0)
    bulge = 0.6
    center, radius, _start_angle, angle = bulge_module.bulge_arc_parameters(start, end, bulge)
    chord = distance(start, end)

    gaps = []
    for segments in (6, 12, 24, 48):
        vertices = bulge_module.bulge_vertices(start, end, bulge, segments=segments)
        for vertex in vertices:
            assert distance(vertex, (center.x, center.y)) == pytest.approx(abs(radius))
        # The remaining step to the end point is one angular step long.
        gap = distance(vertices[-1], end)
        assert gap == pytest.approx(2.0 * abs(radius) * math.sin(abs(angle) / segments / 2.0))
        gaps.append(gap)
        # First emitted vertex plus caller-supplied end reproduce the chord.
        assert distance(vertices[0], end) == pytest.approx(chord)

    assert gaps == sorted(gaps, reverse=True)


@pytest.mark.parametrize("degrees", [30.0, 95.0, 265.0])
def test_mirrored_bulges_use_the_same_segment_count(degrees: float) -> None:
    bulge = math.tan(math.radians(degrees) / 4.0)

    assert bulge_module.default_segment_count(-bulge) == bulge_module.default_segment_count(bulge)
    assert bulge_module.default_segment_count(bulge) == max(math.ceil(degrees / 10.0), 6)
    clockwise = bulge_module.bulge_vertices((0.0, 0.0), (1.0, 0.0), -bulge)
    counterclockwise = bulge_module.bulge_vertices((0.0, 0.0), (1.0, 0.0), bulge)
    assert len(clockwise) == len(counterclockwise)
