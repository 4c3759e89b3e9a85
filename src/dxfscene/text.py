from __future__ import annotations

from functools import lru_cache
from typing import Protocol


class TextShaper(Protocol):
    def measure(self, text: str, size: float) -> tuple[float, float]:
        """Return the (width, height) of ``text`` set at glyph ``size``."""


class MatplotlibTextShaper:
    """Measures text with matplotlib's glyph outlines."""

    def __init__(self, family: str = "DejaVu Sans") -> None:
        self.family = family

    def measure(self, text: str, size: float) -> tuple[float, float]:
        # TextPath lays out a single line; stack lines at their measured heights.
        sizes = [_measure_text_path(line, float(size), self.family) for line in text.split("\n")]
        return (max(width for width, _ in sizes), sum(height for _, height in sizes))


def default_text_shaper() -> TextShaper | None:
    try:
        import matplotlib.textpath  # noqa: F401
    except Exception:
        return None
    return MatplotlibTextShaper()


@lru_cache(maxsize=1024)
def _measure_text_path(text: str, size: float, family: str) -> tuple[float, float]:
    from matplotlib.font_manager import FontProperties
    from matplotlib.textpath import TextPath

    if not text.strip():
        return (0.0, 0.0)
    path = TextPath((0.0, 0.0), text, size=size, prop=FontProperties(family=family))
    extents = path.get_extents()
    return (float(extents.width), float(extents.height))


def decode_mtext_plain_text(value: str) -> str:
    if not value:
        return ""

    out: list[str] = []
    i = 0
    n = len(value)
    while i < n:
        ch = value[i]

        if ch in "{}":
            i += 1
            continue
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= n:
            out.append("\\")
            break

        code = value[i + 1]
        if code in "\\{}":
            out.append(code)
            i += 2
            continue
        if code in {"P", "X"}:
            out.append("\n")
            i += 2
            continue
        if code == "~":
            out.append(" ")
            i += 2
            continue
        # Underline, overline and strike-through toggles.
        if code in {"L", "l", "O", "o", "K", "k"}:
            i += 2
            continue
        if code in {"U", "u"} and i + 6 < n and value[i + 2] == "+":
            hex_digits = value[i + 3 : i + 7]
            if all(c in "0123456789abcdefABCDEF" for c in hex_digits):
                out.append(chr(int(hex_digits, 16)))
                i += 7
                continue
        if code == "S":
            i += 2
            stacked: list[str] = []
            while i < n and value[i] != ";":
                token = value[i]
                if token in {"#", "^"}:
                    token = "/"
                stacked.append(token)
                i += 1
            if i < n and value[i] == ";":
                i += 1
            out.append("".join(stacked))
            continue
        if code in {"A", "C", "c", "F", "f", "H", "h", "Q", "q", "T", "t", "W", "w", "p"}:
            i += 2
            while i < n and value[i] != ";":
                i += 1
            if i < n and value[i] == ";":
                i += 1
            continue

        out.append(code)
        i += 2

    return "".join(out)
