from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from .geometry import Item, iter_world_primitives

AxisValues = tuple[float | None, float | None, float | None]

_UNDEFINED: AxisValues = (None, None, None)


@dataclass(frozen=True)
class BoundingBox:
    """Per-axis min/max; an axis stays ``None`` until a finite value arrives."""

    min: AxisValues = _UNDEFINED
    max: AxisValues = _UNDEFINED

    @property
    def is_defined(self) -> bool:
        return all(value is not None for value in self.min[:2] + self.max[:2])

    @property
    def width(self) -> float:
        return self._extent(0)

    @property
    def height(self) -> float:
        return self._extent(1)

    @property
    def center(self) -> tuple[float, float]:
        self._require_defined()
        return ((self.min[0] + self.max[0]) / 2.0, (self.min[1] + self.max[1]) / 2.0)

    def extend(self, points: Iterable[Sequence[float | None]]) -> "BoundingBox":
        lo = list(self.min)
        hi = list(self.max)
        for point in points:
            for axis in range(3):
                value = point[axis] if axis < len(point) else None
                if value is None or not math.isfinite(value):
                    continue
                if lo[axis] is None or value < lo[axis]:
                    lo[axis] = value
                if hi[axis] is None or value > hi[axis]:
                    hi[axis] = value
        return BoundingBox(min=tuple(lo), max=tuple(hi))

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return self.extend([other.min, other.max])

    def contains(self, other: "BoundingBox", tolerance: float = 1.0e-9) -> bool:
        for axis in range(3):
            if other.min[axis] is None:
                continue
            if self.min[axis] is None or self.max[axis] is None:
                return False
            if other.min[axis] < self.min[axis] - tolerance:
                return False
            if other.max[axis] > self.max[axis] + tolerance:
                return False
        return True

    def _extent(self, axis: int) -> float:
        self._require_defined()
        return self.max[axis] - self.min[axis]

    def _require_defined(self) -> None:
        if not self.is_defined:
            raise ValueError("bounding box is undefined")


def item_bounds(item: Item) -> BoundingBox:
    box = BoundingBox()
    for primitive in iter_world_primitives([item]):
        box = box.extend(primitive.vertices)
    return box


def scene_bounds(items: Iterable[Item], initial: BoundingBox | None = None) -> BoundingBox:
    """Fold the world-space extents of every item into one box."""
    box = initial or BoundingBox()
    for item in items:
        box = box.union(item_bounds(item))
    return box
