from __future__ import annotations

from dataclasses import dataclass

from .bounds import BoundingBox


@dataclass(frozen=True)
class Viewport:
    left: float
    right: float
    top: float
    bottom: float
    center: tuple[float, float]

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def contains(self, bounds: BoundingBox, tolerance: float = 1.0e-9) -> bool:
        return (
            bounds.min[0] >= self.left - tolerance
            and bounds.max[0] <= self.right + tolerance
            and bounds.min[1] >= self.bottom - tolerance
            and bounds.max[1] <= self.top + tolerance
        )

    def resized(self, old_width: float, old_height: float, width: float, height: float) -> "Viewport":
        """Rescale the view for a new output size, keeping the drawing's scale."""
        _check_size(old_width, old_height)
        _check_size(width, height)
        return _centered(
            self.center,
            self.width * (width / old_width),
            self.height * (height / old_height),
        )


def fit_viewport(bounds: BoundingBox, width: float, height: float) -> Viewport:
    """Fit ``bounds`` into a ``width`` x ``height`` output without cropping.

    The axis with spare room is widened so the viewport has exactly the
    output's aspect ratio; the content is letterboxed on that axis.
    """
    if not bounds.is_defined:
        raise ValueError("cannot fit a viewport to undefined bounds")
    _check_size(width, height)

    aspect_ratio = width / height
    vp_width = bounds.width
    vp_height = bounds.height
    center = bounds.center

    if vp_width <= 0 and vp_height <= 0:
        vp_width = vp_height = 1.0
    elif vp_height <= 0:
        vp_height = vp_width / aspect_ratio
    elif vp_width <= 0:
        vp_width = vp_height * aspect_ratio

    extents_aspect_ratio = abs(vp_width / vp_height)
    if aspect_ratio > extents_aspect_ratio:
        vp_width = vp_height * aspect_ratio
    else:
        vp_height = vp_width / aspect_ratio

    return _centered(center, vp_width, vp_height)


def _centered(center: tuple[float, float], width: float, height: float) -> Viewport:
    cx, cy = center
    return Viewport(
        left=cx - width / 2.0,
        right=cx + width / 2.0,
        top=cy + height / 2.0,
        bottom=cy - height / 2.0,
        center=(cx, cy),
    )


def _check_size(width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"output size must be positive, got {width}x{height}")
