from __future__ import annotations

import math

from .context import DrawContext
from .entity import Entity, point3
from .geometry import Group, Item, Transform


def insert_transform(entity: Entity) -> Transform:
    dxf = entity.dxf
    xscale = dxf.get("xscale")
    yscale = dxf.get("yscale")
    rotation = dxf.get("rotation")
    return Transform(
        scale=(
            1.0 if xscale is None else float(xscale),
            1.0 if yscale is None else float(yscale),
        ),
        rotation=0.0 if rotation is None else math.radians(float(rotation)),
        translation=point3(dxf.get("insert")),
    )


def draw_block(entity: Entity, ctx: DrawContext, depth: int = 0) -> Group | None:
    """Instance the block named by an INSERT as a positioned group.

    Every block entity is dispatched in the block's own frame and the group
    carries the insert's scale, rotation and position. Nested inserts become
    nested groups.
    """
    from .dispatch import draw_entity

    name = entity.dxf.get("name")
    block = ctx.blocks.get(name) if name else None
    if not block:
        reason = "is not defined" if name not in ctx.blocks else "has no entities"
        ctx.report("missing_reference", f"block {name!r} {reason}", entity)
        return None
    if depth >= ctx.options.max_block_depth:
        ctx.report(
            "depth_limit",
            f"block {name!r} nested deeper than {ctx.options.max_block_depth} levels",
            entity,
        )
        return None

    children: list[Item] = []
    for child in block:
        item = draw_entity(child, ctx, depth=depth + 1)
        if item is not None:
            children.append(item)

    return Group(
        transform=insert_transform(entity),
        children=tuple(children),
        name=name,
        dxftype=entity.dxftype,
        handle=entity.handle,
    )


def draw_dimension_block(entity: Entity, ctx: DrawContext, depth: int = 0) -> list[Item]:
    """Dispatch the entities of a DIMENSION's block without wrapping them."""
    from .dispatch import draw_entity

    name = entity.dxf.get("block")
    if not name:
        ctx.report("missing_reference", "dimension has no block", entity)
        return []
    if name not in ctx.blocks:
        ctx.report("missing_reference", f"dimension block {name!r} is not defined", entity)
        return []
    if depth >= ctx.options.max_block_depth:
        ctx.report(
            "depth_limit",
            f"block {name!r} nested deeper than {ctx.options.max_block_depth} levels",
            entity,
        )
        return []

    items: list[Item] = []
    for child in ctx.blocks[name]:
        item = draw_entity(child, ctx, depth=depth + 1)
        if item is not None:
            items.append(item)
    return items
