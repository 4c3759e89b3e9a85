from __future__ import annotations

import fnmatch
import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from .colors import aci_to_color
from .entity import Entity, point3

logger = logging.getLogger(__name__)

_LAYOUT_BLOCK_PREFIXES = ("*model_space", "*paper_space")


def read(path: str) -> "Drawing":
    ezdxf = _require_ezdxf()
    try:
        doc = ezdxf.readfile(path)
    except ezdxf.DXFStructureError as exc:
        raise ValueError(f"invalid DXF file: {path}: {exc}") from exc
    return from_ezdxf(doc, path=path)


def from_ezdxf(doc: Any, path: str | None = None) -> "Drawing":
    """Build a Drawing from an ezdxf document (modelspace, blocks and tables)."""
    entities = tuple(_convert_entity(entity) for entity in doc.modelspace())

    blocks: dict[str, tuple[Entity, ...]] = {}
    for block in doc.blocks:
        if block.name.lower().startswith(_LAYOUT_BLOCK_PREFIXES):
            continue
        blocks[block.name] = tuple(_convert_entity(entity) for entity in block)

    layers = {layer.dxf.name: _layer_color(layer) for layer in doc.layers}
    linetypes = {linetype.dxf.name: _linetype_pattern(linetype) for linetype in doc.linetypes}

    logger.debug(
        "loaded %d entities, %d blocks, %d layers, %d line types",
        len(entities),
        len(blocks),
        len(layers),
        len(linetypes),
    )
    return Drawing(
        entities=entities,
        blocks=blocks,
        layers=layers,
        linetypes=linetypes,
        path=path,
    )


@dataclass(frozen=True)
class Drawing:
    entities: tuple[Entity, ...] = ()
    blocks: Mapping[str, tuple[Entity, ...]] = field(default_factory=dict)
    layers: Mapping[str, int | None] = field(default_factory=dict)
    linetypes: Mapping[str, tuple[float, ...]] = field(default_factory=dict)
    path: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "entities", tuple(self.entities))
        object.__setattr__(
            self,
            "blocks",
            MappingProxyType({name: tuple(items) for name, items in self.blocks.items()}),
        )
        object.__setattr__(self, "layers", MappingProxyType(dict(self.layers)))
        object.__setattr__(
            self,
            "linetypes",
            MappingProxyType({name: tuple(pattern) for name, pattern in self.linetypes.items()}),
        )

    def modelspace(self) -> "Layout":
        return Layout(self, "MODELSPACE")

    def scene(self, *args, **kwargs):
        from .scene import build_scene

        return build_scene(self, *args, **kwargs)

    def plot(self, *args, **kwargs):
        from .render import plot

        return plot(self, *args, **kwargs)


@dataclass(frozen=True)
class Layout:
    drawing: Drawing
    name: str

    def iter_entities(self, types: str | Iterable[str] | None = None) -> Iterator[Entity]:
        return self.query(types)

    def query(self, types: str | Iterable[str] | None = None) -> Iterator[Entity]:
        present = _present_types(self.drawing.entities)
        type_set = set(_normalize_types(types, present))
        for entity in self.drawing.entities:
            if entity.dxftype in type_set:
                yield entity

    def plot(self, *args, **kwargs):
        from .render import plot

        return plot(self, *args, **kwargs)


def _require_ezdxf():
    try:
        import ezdxf
    except Exception as exc:
        raise ImportError(
            "ezdxf is required to read DXF files. "
            "Install it with `pip install ezdxf`."
        ) from exc
    return ezdxf


def _present_types(entities: Iterable[Entity]) -> list[str]:
    seen: list[str] = []
    for entity in entities:
        if entity.dxftype not in seen:
            seen.append(entity.dxftype)
    return seen


def _normalize_types(types: str | Iterable[str] | None, candidates: list[str]) -> list[str]:
    if types is None:
        return list(candidates)
    if isinstance(types, str):
        tokens = re.split(r"[,\s]+", types.strip())
    else:
        tokens = list(types)

    normalized = [token.strip().upper() for token in tokens if token and token.strip()]
    if not normalized:
        return list(candidates)

    if any(token in {"*", "ALL"} for token in normalized):
        return list(candidates)

    selected: list[str] = []
    seen = set()

    for token in normalized:
        if any(ch in token for ch in "*?[]"):
            matches = [name for name in candidates if fnmatch.fnmatchcase(name, token)]
            for name in matches:
                if name not in seen:
                    seen.add(name)
                    selected.append(name)
            continue

        if token not in seen:
            seen.add(token)
            selected.append(token)

    return selected


def _convert_entity(entity: Any) -> Entity:
    dxftype = entity.dxftype()
    dxf = _convert_entity_dxf(dxftype, entity)
    dxf["color"] = _entity_color(entity)
    dxf["layer"] = entity.dxf.get("layer", "0")
    dxf["linetype"] = entity.dxf.get("linetype", "BYLAYER")
    return Entity(dxftype=dxftype, handle=_handle(entity), dxf=dxf)


def _convert_entity_dxf(dxftype: str, entity: Any) -> dict[str, Any]:
    attribs = entity.dxf

    if dxftype == "LINE":
        return {
            "vertices": [point3(attribs.start), point3(attribs.end)],
            "closed": False,
        }

    if dxftype == "LWPOLYLINE":
        elevation = float(attribs.get("elevation", 0.0))
        rows = list(entity.get_points("xyb"))
        return {
            "vertices": [(float(x), float(y), elevation) for x, y, _ in rows],
            "bulges": [float(b) for _, _, b in rows],
            "closed": bool(entity.closed),
        }

    if dxftype == "POLYLINE":
        vertices = list(entity.vertices)
        return {
            "vertices": [point3(vertex.dxf.location) for vertex in vertices],
            "bulges": [float(vertex.dxf.get("bulge", 0.0)) for vertex in vertices],
            "closed": bool(entity.is_closed),
        }

    if dxftype == "ARC":
        return {
            "center": point3(attribs.center),
            "radius": float(attribs.radius),
            "start_angle": float(attribs.start_angle),
            "end_angle": float(attribs.end_angle),
        }

    if dxftype == "CIRCLE":
        return {"center": point3(attribs.center), "radius": float(attribs.radius)}

    if dxftype == "ELLIPSE":
        return {
            "center": point3(attribs.center),
            "major_axis": point3(attribs.major_axis),
            "ratio": float(attribs.ratio),
            "start_param": float(attribs.start_param),
            "end_param": float(attribs.end_param),
        }

    if dxftype == "SPLINE":
        return {
            "control_points": [point3(point) for point in entity.control_points],
            "degree": int(attribs.degree),
        }

    if dxftype == "SOLID":
        points = [point3(attribs.vtx0), point3(attribs.vtx1), point3(attribs.vtx2)]
        points.append(point3(attribs.get("vtx3", attribs.vtx2)))
        return {"points": points}

    if dxftype == "POINT":
        return {"location": point3(attribs.location)}

    if dxftype == "TEXT":
        return {
            "insert": point3(attribs.insert),
            "text": str(attribs.get("text", "")),
            "height": float(attribs.get("height", 0.0)),
            "rotation": float(attribs.get("rotation", 0.0)),
        }

    if dxftype == "MTEXT":
        return {
            "insert": point3(attribs.insert),
            "text": str(entity.text),
            "char_height": float(attribs.get("char_height", 0.0)),
            "width": attribs.get("width"),
            "attachment_point": int(attribs.get("attachment_point", 1)),
            "rotation": float(attribs.get("rotation", 0.0)),
        }

    if dxftype == "INSERT":
        return {
            "name": attribs.name,
            "insert": point3(attribs.insert),
            "xscale": float(attribs.get("xscale", 1.0)),
            "yscale": float(attribs.get("yscale", 1.0)),
            "rotation": float(attribs.get("rotation", 0.0)),
        }

    if dxftype == "DIMENSION":
        return {
            "block": attribs.get("geometry"),
            "dimtype": int(attribs.get("dimtype", 0)),
        }

    return {}


def _handle(entity: Any) -> int:
    handle = entity.dxf.get("handle")
    try:
        return int(handle, 16)
    except (TypeError, ValueError):
        return 0


def _entity_color(entity: Any) -> int | None:
    if entity.dxf.hasattr("true_color"):
        return int(entity.dxf.true_color) & 0xFFFFFF
    return aci_to_color(entity.dxf.get("color", 256))


def _layer_color(layer: Any) -> int | None:
    if layer.dxf.hasattr("true_color"):
        return int(layer.dxf.true_color) & 0xFFFFFF
    # Negative ACI marks a layer that is switched off.
    return aci_to_color(abs(int(layer.dxf.get("color", 7))))


def _linetype_pattern(linetype: Any) -> tuple[float, ...]:
    pattern_tags = getattr(linetype, "pattern_tags", None)
    tags = getattr(pattern_tags, "tags", None) or ()
    # Group code 49 carries the dash lengths.
    return tuple(float(tag.value) for tag in tags if getattr(tag, "code", None) == 49)
