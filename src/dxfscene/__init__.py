from typing import Sequence

from .bounds import BoundingBox, scene_bounds
from .colors import resolve_color
from .context import Diagnostic, DrawContext, SceneOptions
from .dispatch import SUPPORTED_ENTITY_TYPES, draw_entity
from .document import Drawing, Layout, from_ezdxf, read
from .entity import Entity
from .geometry import DashStyle, Group, Primitive, TextLayout, Transform
from .render import plot
from .scene import Scene, build_scene
from .viewport import Viewport, fit_viewport

__all__ = [
    "read",
    "from_ezdxf",
    "Drawing",
    "Layout",
    "Entity",
    "build_scene",
    "Scene",
    "SceneOptions",
    "Diagnostic",
    "DrawContext",
    "draw_entity",
    "SUPPORTED_ENTITY_TYPES",
    "Primitive",
    "Group",
    "Transform",
    "DashStyle",
    "TextLayout",
    "BoundingBox",
    "scene_bounds",
    "Viewport",
    "fit_viewport",
    "resolve_color",
    "plot",
]


def main(argv: Sequence[str] | None = None) -> int:
    from dxfscene.cli import main as cli_main

    return cli_main(argv)
