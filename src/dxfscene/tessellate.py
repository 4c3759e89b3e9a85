from __future__ import annotations

import math
from typing import Callable, Sequence

from .bulge import bulge_vertices
from .context import DrawContext
from .entity import Entity, Point3D, point3
from .geometry import DashStyle, Primitive, TextLayout
from .text import decode_mtext_plain_text

_EPSILON = 1.0e-12
_TWO_PI = 2.0 * math.pi

# Line types that defer to the layer or block and never live in the pattern table.
_INHERITED_LINETYPES = {"BYLAYER", "BYBLOCK"}

# attachment point -> (column factor of width, row factor of height)
_ATTACHMENT_OFFSETS = {
    1: (0.0, -1.0),  # top left
    2: (-0.5, -1.0),  # top center
    3: (-1.0, -1.0),  # top right
    4: (0.0, -0.5),  # middle left
    5: (-0.5, -0.5),  # middle center
    6: (-1.0, -0.5),  # middle right
    7: (0.0, 0.0),  # bottom left
    8: (-0.5, 0.0),  # bottom center
    9: (-1.0, 0.0),  # bottom right
}


def draw_arc(entity: Entity, ctx: DrawContext) -> Primitive | None:
    dxf = entity.dxf
    if entity.dxftype == "CIRCLE":
        start = math.radians(float(dxf.get("start_angle") or 0.0))
        end = start + _TWO_PI
    else:
        start = math.radians(float(dxf.get("start_angle", 0.0)))
        end = math.radians(float(dxf.get("end_angle", 0.0)))
    radius = float(dxf.get("radius", 0.0))
    center = point3(dxf.get("center"))

    vertices = sample_ellipse(
        center,
        radius,
        radius,
        start,
        end,
        ctx.options.arc_segments,
        full_when_closed=True,
    )
    return Primitive(
        kind="line",
        vertices=tuple(vertices),
        color=ctx.color_of(entity),
        dxftype=entity.dxftype,
        handle=entity.handle,
    )


def draw_line(entity: Entity, ctx: DrawContext) -> Primitive | None:
    dxf = entity.dxf
    points = entity.to_points()
    if not points:
        return None
    bulges = list(dxf.get("bulges") or [])

    vertices: list[Point3D] = []
    for i, point in enumerate(points):
        bulge = float(bulges[i]) if i < len(bulges) and bulges[i] else 0.0
        if bulge:
            end = points[i + 1] if i + 1 < len(points) else points[0]
            vertices.extend(bulge_vertices(point, end, bulge))
        else:
            vertices.append((point[0], point[1], 0.0))

    if dxf.get("closed"):
        vertices.append(vertices[0])

    return Primitive(
        kind="line",
        vertices=tuple(vertices),
        color=ctx.color_of(entity),
        dash=_dash_style(entity, ctx),
        dxftype=entity.dxftype,
        handle=entity.handle,
    )


def draw_ellipse(entity: Entity, ctx: DrawContext) -> Primitive | None:
    dxf = entity.dxf
    center = point3(dxf.get("center"))
    major_x, major_y, _ = point3(dxf.get("major_axis"))
    radius_x = math.hypot(major_x, major_y)
    radius_y = radius_x * float(dxf.get("ratio", 1.0))
    rotation = math.atan2(major_y, major_x)

    vertices = sample_ellipse(
        center,
        radius_x,
        radius_y,
        float(dxf.get("start_param", 0.0)),
        float(dxf.get("end_param", _TWO_PI)),
        ctx.options.ellipse_segments,
        rotation=rotation,
        full_when_closed=False,
    )
    return Primitive(
        kind="line",
        vertices=tuple(vertices),
        color=ctx.color_of(entity),
        dxftype=entity.dxftype,
        handle=entity.handle,
    )


def draw_spline(entity: Entity, ctx: DrawContext) -> Primitive | None:
    dxf = entity.dxf
    points = [(p[0], p[1]) for p in entity.to_points()]
    if len(points) < 2:
        return None

    degree = int(dxf.get("degree") or 0)
    vertices: list[tuple[float, float]] = []
    if degree in (2, 3) and len(points) >= 3:
        # Overlapping control point triples, each read as a quadratic Bezier.
        for i in range(0, len(points) - 2, 2):
            vertices.extend(
                quadratic_bezier(points[i], points[i + 1], points[i + 2], ctx.options.spline_segments)
            )
    else:
        vertices = catmull_rom(points, ctx.options.spline_fallback_segments)

    return Primitive(
        kind="line",
        vertices=tuple((x, y, 0.0) for x, y in vertices),
        color=ctx.color_of(entity),
        dxftype=entity.dxftype,
        handle=entity.handle,
    )


def draw_solid(entity: Entity, ctx: DrawContext) -> Primitive | None:
    points = entity.to_points()
    if len(points) < 3:
        return None
    while len(points) < 4:
        points.append(points[-1])
    points = points[:4]

    p0, p1, p2 = points[0], points[1], points[2]
    cross_z = (p1[0] - p0[0]) * (p2[1] - p0[1]) - (p1[1] - p0[1]) * (p2[0] - p0[0])
    if cross_z < 0:
        indices = ((2, 1, 0), (2, 3, 1))
    else:
        indices = ((0, 1, 2), (1, 3, 2))

    return Primitive(
        kind="triangles",
        vertices=tuple(points),
        color=ctx.color_of(entity),
        indices=indices,
        dxftype=entity.dxftype,
        handle=entity.handle,
    )


def draw_point(entity: Entity, ctx: DrawContext) -> Primitive | None:
    return Primitive(
        kind="points",
        vertices=(point3(entity.dxf.get("location")),),
        color=ctx.color_of(entity),
        dxftype=entity.dxftype,
        handle=entity.handle,
    )


def draw_text(entity: Entity, ctx: DrawContext) -> Primitive | None:
    dxf = entity.dxf
    text = str(dxf.get("text") or "")
    if text == "":
        return None
    if ctx.shaper is None:
        ctx.report("missing_text_shaper", "text needs a text shaper to be measured", entity)
        return None

    size = float(dxf.get("height") or ctx.options.default_text_height)
    width, height = ctx.shaper.measure(text, size)
    insert = point3(dxf.get("insert"))
    rotation = float(dxf.get("rotation") or 0.0)
    return _text_primitive(entity, ctx, text, insert, insert, size, width, height, rotation)


def draw_mtext(entity: Entity, ctx: DrawContext) -> Primitive | None:
    dxf = entity.dxf
    text = decode_mtext_plain_text(str(dxf.get("text") or ""))
    if text.strip() == "":
        return None
    if ctx.shaper is None:
        ctx.report("missing_text_shaper", "text needs a text shaper to be measured", entity)
        return None

    char_height = float(dxf.get("char_height") or ctx.options.default_text_height)
    size = char_height * ctx.options.mtext_height_factor
    width, height = ctx.shaper.measure(text, size)

    box_width = dxf.get("width")
    if box_width and width > float(box_width):
        ctx.report(
            "layout_overflow",
            f"text width {width:.3f} exceeds box width {float(box_width):.3f}; "
            "multi-line reflow is not supported",
            entity,
        )
        return None

    try:
        attachment = int(dxf.get("attachment_point"))
    except (TypeError, ValueError):
        attachment = None
    offset = _ATTACHMENT_OFFSETS.get(attachment)
    if offset is None:
        ctx.report(
            "invalid_attachment",
            f"attachment point {dxf.get('attachment_point')!r} is not in 1-9",
            entity,
        )
        return None

    insert = point3(dxf.get("insert"))
    origin = (insert[0] + offset[0] * width, insert[1] + offset[1] * height, 0.0)
    rotation = float(dxf.get("rotation") or 0.0)
    return _text_primitive(entity, ctx, text, origin, insert, size, width, height, rotation)


def sample_ellipse(
    center: Point3D,
    radius_x: float,
    radius_y: float,
    start: float,
    end: float,
    divisions: int,
    rotation: float = 0.0,
    full_when_closed: bool = False,
) -> list[Point3D]:
    """Sample a counterclockwise elliptical arc with ``divisions`` steps.

    The sweep ``end - start`` is wrapped into [0, 2*pi]. Equal start and end
    sweep a full turn when ``full_when_closed`` is set, otherwise nothing.
    """
    delta = end - start
    same_points = abs(delta) < _EPSILON
    while delta < 0:
        delta += _TWO_PI
    while delta > _TWO_PI:
        delta -= _TWO_PI
    if delta < _EPSILON:
        delta = _TWO_PI if (full_when_closed or not same_points) else 0.0

    cx, cy, cz = center
    cos_r = math.cos(rotation)
    sin_r = math.sin(rotation)
    divisions = max(int(divisions), 1)
    vertices: list[Point3D] = []
    for i in range(divisions + 1):
        angle = start + delta * i / divisions
        x = radius_x * math.cos(angle)
        y = radius_y * math.sin(angle)
        if rotation:
            x, y = x * cos_r - y * sin_r, x * sin_r + y * cos_r
        vertices.append((cx + x, cy + y, cz))
    return vertices


def quadratic_bezier(
    p0: Sequence[float],
    p1: Sequence[float],
    p2: Sequence[float],
    divisions: int,
) -> list[tuple[float, float]]:
    divisions = max(int(divisions), 1)
    points = []
    for i in range(divisions + 1):
        t = i / divisions
        k = 1.0 - t
        points.append(
            (
                k * k * p0[0] + 2.0 * k * t * p1[0] + t * t * p2[0],
                k * k * p0[1] + 2.0 * k * t * p1[1] + t * t * p2[1],
            )
        )
    return points


def catmull_rom(points: Sequence[Sequence[float]], divisions: int) -> list[tuple[float, float]]:
    """Uniform Catmull-Rom curve passing through every point."""
    count = len(points)
    divisions = max(int(divisions), 1)
    out = []
    for i in range(divisions + 1):
        p = (count - 1) * (i / divisions)
        index = int(math.floor(p))
        weight = p - index
        p0 = points[index if index == 0 else index - 1]
        p1 = points[index]
        p2 = points[count - 1 if index > count - 2 else index + 1]
        p3 = points[count - 1 if index > count - 3 else index + 2]
        out.append(
            (
                _catmull_rom_1d(weight, p0[0], p1[0], p2[0], p3[0]),
                _catmull_rom_1d(weight, p0[1], p1[1], p2[1], p3[1]),
            )
        )
    return out


def _catmull_rom_1d(t: float, p0: float, p1: float, p2: float, p3: float) -> float:
    v0 = (p2 - p0) * 0.5
    v1 = (p3 - p1) * 0.5
    t2 = t * t
    t3 = t * t2
    return (2 * p1 - 2 * p2 + v0 + v1) * t3 + (-3 * p1 + 3 * p2 - 2 * v0 - v1) * t2 + v0 * t + p1


def _dash_style(entity: Entity, ctx: DrawContext) -> DashStyle | None:
    name = entity.linetype
    if not name or name.upper() in _INHERITED_LINETYPES:
        return None
    if name not in ctx.linetypes:
        ctx.report("missing_reference", f"line type {name!r} is not defined", entity)
        return None
    pattern = ctx.linetypes[name]
    if not pattern:
        return None
    return DashStyle.from_pattern(
        pattern,
        dash_size=ctx.options.dash_size,
        gap_size=ctx.options.gap_size,
    )


def _text_primitive(
    entity: Entity,
    ctx: DrawContext,
    text: str,
    origin: Point3D,
    pivot: Point3D,
    size: float,
    width: float,
    height: float,
    rotation: float,
) -> Primitive:
    corners = [
        (origin[0], origin[1]),
        (origin[0] + width, origin[1]),
        (origin[0] + width, origin[1] + height),
        (origin[0], origin[1] + height),
    ]
    if rotation:
        angle = math.radians(rotation)
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        corners = [
            (
                pivot[0] + (x - pivot[0]) * cos_a - (y - pivot[1]) * sin_a,
                pivot[1] + (x - pivot[0]) * sin_a + (y - pivot[1]) * cos_a,
            )
            for x, y in corners
        ]
    vertices = tuple((x, y, origin[2]) for x, y in corners)
    return Primitive(
        kind="text",
        vertices=vertices,
        color=ctx.color_of(entity),
        text=TextLayout(
            text=text,
            position=vertices[0],
            size=size,
            width=width,
            height=height,
            rotation=rotation,
        ),
        dxftype=entity.dxftype,
        handle=entity.handle,
    )


TESSELLATORS: dict[str, Callable[[Entity, DrawContext], Primitive | None]] = {
    "ARC": draw_arc,
    "CIRCLE": draw_arc,
    "LINE": draw_line,
    "LWPOLYLINE": draw_line,
    "POLYLINE": draw_line,
    "ELLIPSE": draw_ellipse,
    "SPLINE": draw_spline,
    "SOLID": draw_solid,
    "POINT": draw_point,
    "TEXT": draw_text,
    "MTEXT": draw_mtext,
}
