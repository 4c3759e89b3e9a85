from __future__ import annotations

import math
from typing import Any

from ezdxf.math import Vec2

from .entity import Point3D

# One arc segment roughly every 10 degrees, never fewer than 6.
_DEGREES_PER_SEGMENT = math.pi / 18.0
_MIN_SEGMENTS = 6


def bulge_arc_parameters(start: Any, end: Any, bulge: float) -> tuple[Vec2, float, float, float]:
    """Return ``(center, radius, start_angle, included_angle)`` of a bulge arc.

    ``radius`` is signed like the bulge; angles are in radians.
    """
    p0 = Vec2(start[0], start[1])
    p1 = Vec2(end[0], end[1])
    angle = 4.0 * math.atan(bulge)
    radius = p0.distance(p1) / 2.0 / math.sin(angle / 2.0)
    center = p0 + Vec2.from_angle(_direction(p0, p1) + (math.pi / 2.0 - angle / 2.0), radius)
    start_angle = _direction(center, p0)
    return center, radius, start_angle, angle


def default_segment_count(bulge: float) -> int:
    angle = 4.0 * math.atan(bulge)
    return max(math.ceil(abs(angle) / _DEGREES_PER_SEGMENT), _MIN_SEGMENTS)


def bulge_vertices(
    start: Any,
    end: Any,
    bulge: float,
    segments: int | None = None,
) -> list[Point3D]:
    """Expand the bulged segment ``start -> end`` into arc vertices.

    The start point is included and the end point is not; the caller emits the
    end point as the next vertex of the polyline. Vertices lie on z=0.
    """
    p0 = (float(start[0]), float(start[1]), 0.0)
    if not bulge or (start[0] == end[0] and start[1] == end[1]):
        return [p0]

    center, radius, start_angle, angle = bulge_arc_parameters(start, end, bulge)
    if segments is None:
        segments = default_segment_count(bulge)
    segments = max(int(segments), 1)
    step = angle / segments

    vertices = [p0]
    for i in range(1, segments):
        vertex = center + Vec2.from_angle(start_angle + step * i, abs(radius))
        vertices.append((vertex.x, vertex.y, 0.0))
    return vertices


def _direction(p0: Vec2, p1: Vec2) -> float:
    # Angle of p0->p1 in (-pi, pi].
    delta = (p1 - p0).normalize()
    if delta.y < 0:
        return -math.acos(max(-1.0, min(1.0, delta.x)))
    return math.acos(max(-1.0, min(1.0, delta.x)))
