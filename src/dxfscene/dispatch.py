from __future__ import annotations

import logging

from .blocks import draw_block, draw_dimension_block
from .context import DrawContext
from .entity import Entity
from .geometry import Group, Item
from .tessellate import TESSELLATORS

logger = logging.getLogger(__name__)

SUPPORTED_ENTITY_TYPES = tuple(TESSELLATORS) + ("INSERT", "DIMENSION")


def draw_entity(entity: Entity, ctx: DrawContext, depth: int = 0) -> Item | None:
    """Turn one entity into a primitive or group, or ``None`` when skipped.

    A block-backed DIMENSION met here (inside a block being instanced) becomes
    an untransformed group so its geometry follows the enclosing insert.
    """
    try:
        return _draw_entity_unsafe(entity, ctx, depth)
    except Exception as exc:
        logger.debug("failed to draw %s #%s", entity.dxftype, entity.handle, exc_info=True)
        ctx.report("invalid_entity", f"failed to tessellate: {exc}", entity)
        return None


def draw_top_level(entity: Entity, ctx: DrawContext) -> list[Item]:
    """Draw a modelspace entity; DIMENSION blocks are flattened into the scene."""
    if entity.dxftype == "DIMENSION":
        try:
            return draw_dimension_block(entity, ctx)
        except Exception as exc:
            logger.debug("failed to draw DIMENSION #%s", entity.handle, exc_info=True)
            ctx.report("invalid_entity", f"failed to tessellate: {exc}", entity)
            return []
    item = draw_entity(entity, ctx)
    if item is None:
        return []
    return [item]


def _draw_entity_unsafe(entity: Entity, ctx: DrawContext, depth: int) -> Item | None:
    dxftype = entity.dxftype
    if dxftype == "INSERT":
        return draw_block(entity, ctx, depth)
    if dxftype == "DIMENSION":
        items = draw_dimension_block(entity, ctx, depth)
        if not items:
            return None
        return Group(
            children=tuple(items),
            name=entity.dxf.get("block"),
            dxftype=dxftype,
            handle=entity.handle,
        )

    tessellator = TESSELLATORS.get(dxftype)
    if tessellator is None:
        ctx.report("unsupported_entity", f"no tessellator for {dxftype}", entity)
        return None
    return tessellator(entity, ctx)
