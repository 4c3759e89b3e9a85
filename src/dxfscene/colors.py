from __future__ import annotations

from typing import Any, Mapping

from ezdxf.colors import aci2rgb, int2rgb, rgb2int

BLACK = 0x000000
WHITE = 0xFFFFFF


def resolve_color(entity: Any, layers: Mapping[str, int | None] | None = None) -> int:
    """Return the display color of ``entity`` as a 24-bit RGB integer.

    Precedence is entity color, then layer color, then black. A color code of
    0 counts as "no color" and falls through to the layer, and pure white is
    drawn black so default strokes stay visible on a light background.
    """
    dxf = _entity_dxf(entity)
    color = dxf.get("color")
    if not color:
        color = None
        layer_name = dxf.get("layer")
        if layers is not None and layer_name is not None and layer_name in layers:
            color = layers[layer_name]
    if color is None:
        return BLACK
    color = int(color) & 0xFFFFFF
    if color == WHITE:
        return BLACK
    return color


def aci_to_color(index: int | None) -> int | None:
    try:
        aci = int(index)
    except Exception:
        return None
    # 0 is BYBLOCK, 256 BYLAYER, 257 BYOBJECT.
    if 1 <= aci <= 255:
        return rgb2int(aci2rgb(aci))
    return None


def to_rgb(color: int) -> tuple[float, float, float]:
    r, g, b = int2rgb(int(color) & 0xFFFFFF)
    return (r / 255.0, g / 255.0, b / 255.0)


def to_hex(color: int) -> str:
    return f"#{int(color) & 0xFFFFFF:06x}"


def _entity_dxf(entity: Any) -> Mapping[str, Any]:
    dxf = getattr(entity, "dxf", None)
    if dxf is None:
        return entity
    return dxf
