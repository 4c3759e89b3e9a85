from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .colors import resolve_color
from .entity import Entity
from .text import TextShaper

logger = logging.getLogger(__name__)

DIAGNOSTIC_KINDS = (
    "missing_reference",
    "unsupported_entity",
    "layout_overflow",
    "invalid_attachment",
    "missing_text_shaper",
    "depth_limit",
    "invalid_entity",
    "empty_scene",
)

_INFO_KINDS = {"unsupported_entity"}


@dataclass(frozen=True)
class SceneOptions:
    arc_segments: int = 32
    ellipse_segments: int = 50
    spline_segments: int = 50
    spline_fallback_segments: int = 100
    default_text_height: float = 12.0
    mtext_height_factor: float = 4.0 / 5.0
    dash_size: float = 4.0
    gap_size: float = 4.0
    max_block_depth: int = 32


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    message: str
    dxftype: str | None = None
    handle: int | None = None

    def __str__(self) -> str:
        if self.dxftype is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind}[{self.dxftype}#{self.handle}]: {self.message}"


@dataclass
class DrawContext:
    blocks: Mapping[str, tuple[Entity, ...]] = field(default_factory=dict)
    layers: Mapping[str, int | None] = field(default_factory=dict)
    linetypes: Mapping[str, tuple[float, ...]] = field(default_factory=dict)
    shaper: TextShaper | None = None
    options: SceneOptions = field(default_factory=SceneOptions)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @classmethod
    def for_drawing(
        cls,
        drawing: Any,
        shaper: TextShaper | None = None,
        options: SceneOptions | None = None,
    ) -> "DrawContext":
        return cls(
            blocks=drawing.blocks,
            layers=drawing.layers,
            linetypes=drawing.linetypes,
            shaper=shaper,
            options=options or SceneOptions(),
        )

    def color_of(self, entity: Entity) -> int:
        return resolve_color(entity, self.layers)

    def report(self, kind: str, message: str, entity: Entity | None = None) -> Diagnostic:
        if kind not in DIAGNOSTIC_KINDS:
            raise ValueError(f"unknown diagnostic kind: {kind}")
        diagnostic = Diagnostic(
            kind=kind,
            message=message,
            dxftype=getattr(entity, "dxftype", None),
            handle=getattr(entity, "handle", None),
        )
        self.diagnostics.append(diagnostic)
        if kind in _INFO_KINDS:
            logger.info("%s", diagnostic)
        else:
            logger.warning("%s", diagnostic)
        return diagnostic
