from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

Point3D = tuple[float, float, float]


@dataclass(frozen=True)
class Entity:
    dxftype: str
    handle: int
    dxf: Mapping[str, Any]

    @property
    def color(self) -> int | None:
        return self.dxf.get("color")

    @property
    def layer(self) -> str | None:
        return self.dxf.get("layer")

    @property
    def linetype(self) -> str | None:
        return self.dxf.get("linetype")

    def to_points(self) -> list[Point3D]:
        if self.dxftype == "LINE":
            if "vertices" in self.dxf:
                return [point3(point) for point in self.dxf["vertices"]]
            return [point3(self.dxf["start"]), point3(self.dxf["end"])]
        if self.dxftype in {"LWPOLYLINE", "POLYLINE"}:
            return [point3(point) for point in self.dxf.get("vertices", [])]
        if self.dxftype == "POINT":
            return [point3(self.dxf["location"])]
        if self.dxftype in {"TEXT", "MTEXT", "INSERT"}:
            return [point3(self.dxf.get("insert"))]
        if self.dxftype == "SOLID":
            return [point3(point) for point in self.dxf.get("points", [])]
        if self.dxftype == "SPLINE":
            return [point3(point) for point in self.dxf.get("control_points", [])]
        if self.dxftype in {"ARC", "CIRCLE", "ELLIPSE"}:
            return [point3(self.dxf["center"])]
        raise NotImplementedError(f"to_points is not supported for {self.dxftype}")


def point3(value: Any) -> Point3D:
    if value is None:
        return (0.0, 0.0, 0.0)
    if isinstance(value, (list, tuple)):
        if len(value) >= 3:
            return (float(value[0]), float(value[1]), float(value[2]))
        if len(value) >= 2:
            return (float(value[0]), float(value[1]), 0.0)
    if hasattr(value, "x") and hasattr(value, "y"):
        return (float(value.x), float(value.y), float(getattr(value, "z", 0.0)))
    raise ValueError(f"invalid point value: {value!r}")
