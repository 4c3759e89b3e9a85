from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Union

from ezdxf.math import Matrix44, Vec3

from .entity import Point3D

PRIMITIVE_KINDS = ("line", "points", "triangles", "text")


@dataclass(frozen=True)
class DashStyle:
    pattern: tuple[float, ...]
    pattern_length: float
    dash_size: float = 4.0
    gap_size: float = 4.0

    @classmethod
    def from_pattern(
        cls,
        pattern: Iterable[float],
        dash_size: float = 4.0,
        gap_size: float = 4.0,
    ) -> "DashStyle":
        values = tuple(float(value) for value in pattern)
        return cls(
            pattern=values,
            pattern_length=sum(abs(value) for value in values),
            dash_size=dash_size,
            gap_size=gap_size,
        )

    def on_off_sequence(self) -> tuple[float, ...]:
        """Pattern as strictly positive on/off lengths (even count)."""
        if not self.pattern:
            return (self.dash_size, self.gap_size)
        # Zero-length segments are dots.
        values = [max(abs(value), 0.1) for value in self.pattern]
        if self.pattern[0] < 0:
            values.insert(0, 0.1)
        if len(values) % 2:
            values.append(self.gap_size)
        return tuple(values)


@dataclass(frozen=True)
class TextLayout:
    text: str
    position: Point3D
    size: float
    width: float
    height: float
    rotation: float = 0.0


@dataclass(frozen=True)
class Primitive:
    kind: str
    vertices: tuple[Point3D, ...]
    color: int
    indices: tuple[tuple[int, int, int], ...] = ()
    dash: DashStyle | None = None
    text: TextLayout | None = None
    dxftype: str | None = None
    handle: int | None = None

    def __post_init__(self) -> None:
        if self.kind not in PRIMITIVE_KINDS:
            raise ValueError(f"unknown primitive kind: {self.kind}")

    def transformed(self, matrix: Matrix44) -> "Primitive":
        vertices = tuple(_as_point(vertex) for vertex in matrix.transform_vertices(self.vertices))
        text = self.text
        if text is not None:
            ux = matrix.transform_direction(Vec3(1.0, 0.0, 0.0))
            uy = matrix.transform_direction(Vec3(0.0, 1.0, 0.0))
            text = replace(
                text,
                position=vertices[0] if vertices else _as_point(matrix.transform(text.position)),
                size=text.size * uy.magnitude,
                width=text.width * ux.magnitude,
                height=text.height * uy.magnitude,
                rotation=text.rotation + math.degrees(math.atan2(ux.y, ux.x)),
            )
        return replace(self, vertices=vertices, text=text)


@dataclass(frozen=True)
class Transform:
    scale: tuple[float, float] = (1.0, 1.0)
    rotation: float = 0.0
    translation: Point3D = (0.0, 0.0, 0.0)

    def matrix(self) -> Matrix44:
        sx, sy = self.scale
        tx, ty, tz = self.translation
        return Matrix44.chain(
            Matrix44.scale(sx, sy, 1.0),
            Matrix44.z_rotate(self.rotation),
            Matrix44.translate(tx, ty, tz),
        )


@dataclass(frozen=True)
class Group:
    transform: Transform = field(default_factory=Transform)
    children: tuple["Item", ...] = ()
    name: str | None = None
    dxftype: str | None = None
    handle: int | None = None

    def world_primitives(self, parent: Matrix44 | None = None) -> list[Primitive]:
        return list(iter_world_primitives([self], parent))


Item = Union[Primitive, Group]


def iter_world_primitives(
    items: Iterable[Item],
    matrix: Matrix44 | None = None,
) -> Iterator[Primitive]:
    """Yield every primitive below ``items`` in world coordinates.

    A group's transform is applied in its own frame first, then its parent's.
    """
    for item in items:
        if isinstance(item, Group):
            local = item.transform.matrix()
            world = local if matrix is None else Matrix44.chain(local, matrix)
            yield from iter_world_primitives(item.children, world)
        elif matrix is None:
            yield item
        else:
            yield item.transformed(matrix)


def _as_point(vector) -> Point3D:
    return (float(vector[0]), float(vector[1]), float(vector[2]))
