from __future__ import annotations

from typing import Any, Iterable

from .colors import to_hex
from .geometry import DashStyle, TextLayout
from .viewport import Viewport


def plot(
    target: Any,
    types: str | Iterable[str] | None = None,
    ax: Any | None = None,
    show: bool = True,
    title: str | None = None,
    line_width: float = 1.0,
    point_size: float = 4.0,
    width: int = 800,
    height: int = 600,
    dpi: int = 100,
):
    """Draw a Scene, Drawing, Layout or DXF path with matplotlib.

    The fitted viewport becomes the axes limits, so the whole drawing is
    visible at the output's aspect ratio.
    """
    scene = _resolve_scene(target, types=types, width=width, height=height)
    return plot_scene(
        scene,
        ax=ax,
        show=show,
        title=title,
        line_width=line_width,
        point_size=point_size,
        dpi=dpi,
    )


def plot_scene(
    scene: Any,
    ax: Any | None = None,
    show: bool = True,
    title: str | None = None,
    line_width: float = 1.0,
    point_size: float = 4.0,
    dpi: int = 100,
):
    plt = _require_matplotlib()
    if ax is None:
        _, ax = plt.subplots(figsize=(scene.width / dpi, scene.height / dpi), dpi=dpi)

    for primitive in scene.world_primitives():
        color = to_hex(primitive.color)
        if primitive.kind == "line":
            _draw_line(ax, primitive.vertices, line_width, color=color, dash=primitive.dash)
        elif primitive.kind == "points":
            _draw_points(ax, primitive.vertices, point_size, color=color)
        elif primitive.kind == "triangles":
            _draw_triangles(ax, primitive.vertices, primitive.indices, color=color)
        elif primitive.kind == "text" and primitive.text is not None:
            _draw_text(ax, primitive.text, color=color)

    if title:
        ax.set_title(title)
    if scene.viewport is not None:
        _apply_viewport(ax, scene.viewport)
    if show:
        plt.show()
    return ax


def _require_matplotlib():
    try:
        import matplotlib.pyplot as plt
    except Exception as exc:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with `pip install matplotlib`."
        ) from exc
    return plt


def _resolve_scene(target: Any, types=None, width: int = 800, height: int = 600):
    from .document import Drawing, Layout, read
    from .scene import Scene, build_scene

    if isinstance(target, Scene):
        return target
    if isinstance(target, Layout):
        return build_scene(target.drawing, width, height, types=types)
    if isinstance(target, Drawing):
        return build_scene(target, width, height, types=types)
    if isinstance(target, str):
        return build_scene(read(target), width, height, types=types)
    raise TypeError("plot() expects a path, Drawing, Layout, or Scene")


def _draw_line(ax, points, line_width: float, color=None, dash: DashStyle | None = None):
    if not points:
        return
    xs = [pt[0] for pt in points]
    ys = [pt[1] for pt in points]
    kwargs: dict[str, Any] = {"linewidth": line_width, "color": color}
    if dash is not None:
        kwargs["linestyle"] = (0, dash.on_off_sequence())
    ax.plot(xs, ys, **kwargs)


def _draw_points(ax, points, point_size: float, color=None):
    xs = [pt[0] for pt in points]
    ys = [pt[1] for pt in points]
    ax.scatter(xs, ys, s=point_size, color=color)


def _draw_triangles(ax, vertices, indices, color=None):
    from matplotlib.patches import Polygon

    for triangle in indices:
        corners = [(vertices[i][0], vertices[i][1]) for i in triangle]
        ax.add_patch(Polygon(corners, closed=True, facecolor=color, edgecolor=color))


def _draw_text(ax, layout: TextLayout, color=None):
    from matplotlib.patches import PathPatch
    from matplotlib.textpath import TextPath
    from matplotlib.transforms import Affine2D

    x, y = layout.position[0], layout.position[1]
    lines = layout.text.split("\n")
    line_height = layout.height / len(lines) if lines else 0.0
    rotate = Affine2D().rotate_deg_around(x, y, layout.rotation)
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        baseline = y + line_height * (len(lines) - 1 - i)
        path = TextPath((x, baseline), line, size=layout.size)
        ax.add_patch(
            PathPatch(rotate.transform_path(path), facecolor=color, edgecolor="none")
        )


def _apply_viewport(ax, viewport: Viewport):
    ax.set_xlim(viewport.left, viewport.right)
    ax.set_ylim(viewport.bottom, viewport.top)
    ax.set_aspect("equal", adjustable="box")
