"""
Affine transform module

Composed element-to-screen transforms (2D affine subset only) and bounding box mapping
"""
import math
from typing import Iterable, Optional, Sequence, Tuple

from affine import Affine

from ..model.intermediate import BoundingBox, ElementRect, RectSpace


class ScreenTransform:
    """Element-local to screen-pixel transform"""

    def __init__(self, matrix: Affine):
        self.matrix = matrix

    @classmethod
    def identity(cls) -> "ScreenTransform":
        return cls(Affine.identity())

    @classmethod
    def from_dom(cls, a: float, b: float, c: float, d: float, e: float, f: float) -> "ScreenTransform":
        """
        Build from DOMMatrix / SVGMatrix components

        DOM order maps x' = a*x + c*y + e, y' = b*x + d*y + f, while Affine takes
        the row-major (a, b, c, d, e, f) = (sx, shx, tx, shy, sy, ty).
        """
        return cls(Affine(a, c, e, b, d, f))

    @classmethod
    def from_sequence(cls, values: Optional[Sequence[float]]) -> Optional["ScreenTransform"]:
        """Build from a 6-number DOM-ordered sequence; None when missing or malformed."""
        if values is None:
            return None
        try:
            parts = [float(v) for v in values]
        except (TypeError, ValueError):
            return None
        if len(parts) != 6 or not all(math.isfinite(v) for v in parts):
            return None
        return cls.from_dom(*parts)

    @classmethod
    def translate(cls, tx: float, ty: float) -> "ScreenTransform":
        return cls(Affine.translation(tx, ty))

    @classmethod
    def scale(cls, sx: float, sy: Optional[float] = None) -> "ScreenTransform":
        return cls(Affine.scale(sx, sx if sy is None else sy))

    def then(self, outer: "ScreenTransform") -> "ScreenTransform":
        """Compose: apply self first, then outer (ancestor) transform"""
        return ScreenTransform(outer.matrix @ self.matrix)

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return self.matrix @ (x, y)

    def transform_points(self, points: Iterable[Tuple[float, float]]) -> list:
        return [self.apply(x, y) for x, y in points]

    def transform_bbox(self, bbox: BoundingBox) -> Optional[ElementRect]:
        """
        Map all four corners of a local box and return their axis-aligned bounds

        Using every corner keeps the result correct under reflection and
        non-uniform scale, where top-left/bottom-right may swap.
        """
        corners = [
            (bbox.x, bbox.y),
            (bbox.x + bbox.width, bbox.y),
            (bbox.x, bbox.y + bbox.height),
            (bbox.x + bbox.width, bbox.y + bbox.height),
        ]
        mapped = self.transform_points(corners)
        xs = [p[0] for p in mapped]
        ys = [p[1] for p in mapped]
        if not all(math.isfinite(v) for v in xs + ys):
            return None
        min_x, min_y = min(xs), min(ys)
        return ElementRect(min_x, min_y, max(xs) - min_x, max(ys) - min_y, RectSpace.SCREEN)


def rect_from_local_bounds(
    bbox: Optional[BoundingBox], transform: Optional[ScreenTransform]
) -> Optional[ElementRect]:
    """
    Screen rectangle of a local bounding box under its composed screen transform

    Returns:
        SCREEN-space ElementRect, or None when bbox/transform are unavailable
        (callers fall back to the element's screen bounding rect)
    """
    if bbox is None or transform is None:
        return None
    values = (bbox.x, bbox.y, bbox.width, bbox.height)
    if not all(math.isfinite(v) for v in values):
        return None
    return transform.transform_bbox(bbox)
