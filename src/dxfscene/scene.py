from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .bounds import BoundingBox, scene_bounds
from .context import Diagnostic, DrawContext, SceneOptions
from .dispatch import draw_top_level
from .document import Drawing
from .geometry import Item, Primitive, iter_world_primitives
from .text import TextShaper, default_text_shaper
from .viewport import Viewport, fit_viewport

logger = logging.getLogger(__name__)

_DEFAULT_SHAPER = object()


@dataclass(frozen=True)
class Scene:
    items: tuple[Item, ...]
    bounds: BoundingBox
    viewport: Viewport | None
    diagnostics: tuple[Diagnostic, ...]
    width: float
    height: float

    def world_primitives(self) -> list[Primitive]:
        return list(iter_world_primitives(self.items))

    def diagnostics_by_kind(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for diagnostic in self.diagnostics:
            counts[diagnostic.kind] = counts.get(diagnostic.kind, 0) + 1
        return dict(sorted(counts.items()))

    def resized(self, width: float, height: float) -> "Scene":
        viewport = self.viewport
        if viewport is not None:
            viewport = viewport.resized(self.width, self.height, width, height)
        return Scene(
            items=self.items,
            bounds=self.bounds,
            viewport=viewport,
            diagnostics=self.diagnostics,
            width=width,
            height=height,
        )


def build_scene(
    drawing: Drawing,
    width: float = 800,
    height: float = 600,
    *,
    types: str | Iterable[str] | None = None,
    shaper: TextShaper | None | object = _DEFAULT_SHAPER,
    options: SceneOptions | None = None,
) -> Scene:
    """Tessellate ``drawing`` and fit a viewport for a ``width`` x ``height`` output.

    Problems with single entities never abort the pass; they are collected in
    ``Scene.diagnostics``. Pass ``shaper=None`` to skip text measurement.
    """
    if shaper is _DEFAULT_SHAPER:
        shaper = default_text_shaper()
    ctx = DrawContext.for_drawing(drawing, shaper=shaper, options=options)

    items: list[Item] = []
    for entity in drawing.modelspace().query(types):
        items.extend(draw_top_level(entity, ctx))
    bounds = scene_bounds(items)

    viewport = None
    if bounds.is_defined:
        viewport = fit_viewport(bounds, width, height)
    else:
        ctx.report("empty_scene", "no geometry was produced; viewport is undefined")

    logger.debug(
        "built scene: %d items, %d diagnostics",
        len(items),
        len(ctx.diagnostics),
    )
    return Scene(
        items=tuple(items),
        bounds=bounds,
        viewport=viewport,
        diagnostics=tuple(ctx.diagnostics),
        width=width,
        height=height,
    )
