"""
Intermediate model module

Value objects exchanged between the scene loader, the geometry/style resolvers and the PPTX writer
"""
import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from pptx.dml.color import RGBColor  # type: ignore[import]

from ..geom.units import parse_px, round_emu


class SizingMode(Enum):
    """How the logical box is projected onto the slide"""
    FIT = "fit"
    VIEWPORT_PERCENT = "percent"

    @classmethod
    def parse(cls, value: Optional[str], default: "SizingMode" = None) -> "SizingMode":
        """Parse 'fit' / 'percent' (case-insensitive); unknown values yield default (FIT)"""
        low = (value or "").strip().lower()
        for mode in cls:
            if low in (mode.value, mode.name.lower()):
                return mode
        return default or cls.FIT


class RectSpace(Enum):
    """Coordinate space a bounding box was captured in"""
    LOCAL = "local"
    SCREEN = "screen"


class DashStyle(Enum):
    SOLID = "solid"
    DASHED = "dashed"


@dataclass(frozen=True)
class ViewportRect:
    """On-screen rectangle of the slide root, in source pixels"""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class LogicalBox:
    """Declared coordinate system of the source scene (viewBox)"""
    min_x: float
    min_y: float
    width: float
    height: float


def _positive_or(value: Optional[float], fallback: Optional[float]) -> float:
    """Return value when positive and finite, else fallback (minimum 1)."""
    if value is not None and math.isfinite(value) and value > 0:
        return float(value)
    if fallback is not None and math.isfinite(fallback) and fallback > 0:
        return max(float(fallback), 1.0)
    return 1.0


@dataclass(frozen=True)
class SlideContext:
    """Per-slide geometry context, immutable for the slide's lifetime"""
    viewport: ViewportRect
    logical_box: LogicalBox
    sizing_mode: SizingMode
    output_width: int
    output_height: int

    @classmethod
    def create(
        cls,
        viewport: ViewportRect,
        logical_box: Optional[LogicalBox],
        sizing_mode: SizingMode,
        output_width: int,
        output_height: int,
    ) -> "SlideContext":
        """
        Build a context, falling back to the viewport for a missing or empty logical box.

        A logical dimension that is zero, negative or non-finite is replaced by the
        viewport dimension (minimum 1) so later divisions are always safe.
        """
        if logical_box is None:
            logical_box = LogicalBox(0.0, 0.0, viewport.width, viewport.height)
        min_x = logical_box.min_x if math.isfinite(logical_box.min_x) else 0.0
        min_y = logical_box.min_y if math.isfinite(logical_box.min_y) else 0.0
        logical_box = LogicalBox(
            min_x,
            min_y,
            _positive_or(logical_box.width, viewport.width),
            _positive_or(logical_box.height, viewport.height),
        )
        return cls(viewport, logical_box, sizing_mode, int(output_width), int(output_height))


@dataclass(frozen=True)
class ElementRect:
    """Bounding box tagged with the coordinate space it was captured in"""
    x: float
    y: float
    width: float
    height: float
    space: RectSpace = RectSpace.SCREEN


@dataclass(frozen=True)
class Absolute:
    """Coordinate already expressed in EMU"""
    value: int

    def resolve(self, extent: int) -> int:
        return self.value


@dataclass(frozen=True)
class Percent:
    """Coordinate expressed as a percentage of the slide extent"""
    value: float

    def as_string(self) -> str:
        text = f"{self.value:.4f}".rstrip("0").rstrip(".")
        if text in ("", "-0"):
            text = "0"
        return f"{text}%"

    def resolve(self, extent: int) -> int:
        return round_emu(self.value / 100.0 * extent)


Coordinate = Union[Absolute, Percent]


@dataclass(frozen=True)
class SlideMetrics:
    """Placement of a primitive in EMU, with optional percent overrides per axis"""
    x: int
    y: int
    w: int
    h: int
    percent_x: Optional[Percent] = None
    percent_y: Optional[Percent] = None

    @property
    def x_coord(self) -> Coordinate:
        return self.percent_x if self.percent_x is not None else Absolute(self.x)

    @property
    def y_coord(self) -> Coordinate:
        return self.percent_y if self.percent_y is not None else Absolute(self.y)

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0


@dataclass(frozen=True)
class Point:
    x: int
    y: int
    percent_x: Optional[Percent] = None
    percent_y: Optional[Percent] = None

    @property
    def x_coord(self) -> Coordinate:
        return self.percent_x if self.percent_x is not None else Absolute(self.x)

    @property
    def y_coord(self) -> Coordinate:
        return self.percent_y if self.percent_y is not None else Absolute(self.y)


@dataclass(frozen=True)
class LineEndpoints:
    start: Point
    end: Point


@dataclass(frozen=True)
class ColorDescriptor:
    """Absolute color plus composed opacity"""
    hex: str = "#000000"
    alpha: float = 0.0

    def with_opacity(self, factor: float) -> "ColorDescriptor":
        """Multiply alpha by factor; the hex value is never blended."""
        return ColorDescriptor(self.hex, self.alpha * factor)

    @property
    def is_visible(self) -> bool:
        return self.alpha > 0

    @property
    def rgb(self) -> RGBColor:
        return RGBColor.from_string(self.hex.lstrip("#").upper())

    @property
    def transparency(self) -> float:
        return 1.0 - max(0.0, min(1.0, self.alpha))


TRANSPARENT = ColorDescriptor("#000000", 0.0)


@dataclass(frozen=True)
class ResolvedColors:
    fill: ColorDescriptor = TRANSPARENT
    stroke: ColorDescriptor = TRANSPARENT
    text: ColorDescriptor = TRANSPARENT
    background: ColorDescriptor = TRANSPARENT


@dataclass(frozen=True)
class FontDescriptor:
    family: str
    size_points: float
    bold: bool = False


@dataclass(frozen=True)
class LineStyle:
    """Resolved outline: color, width in points and dash style"""
    color: ColorDescriptor
    width_pt: float
    dash: DashStyle = DashStyle.SOLID


@dataclass(frozen=True)
class Alignment:
    align: str = "center"
    auto_fit: bool = False


@dataclass(frozen=True)
class StyleSnapshot:
    """
    Computed style of one element, one field per recognized CSS longhand.

    Values are the raw computed strings; resolvers do all parsing.
    """
    background_color: str = ""
    color: str = ""
    fill: str = ""
    stroke: str = ""
    fill_opacity: str = ""
    stroke_opacity: str = ""
    opacity: str = ""
    border_color: str = ""
    border_width: str = ""
    stroke_width: str = ""
    stroke_dasharray: str = ""
    font_family: str = ""
    font_size: str = ""
    font_weight: str = ""
    font_style: str = ""
    text_decoration: str = ""
    text_align: str = ""
    text_anchor: str = ""
    border_radius: str = ""
    padding_top: str = ""
    padding_right: str = ""
    padding_bottom: str = ""
    padding_left: str = ""
    margin_top: str = ""
    margin_right: str = ""
    margin_bottom: str = ""
    margin_left: str = ""
    display: str = ""
    visibility: str = ""

    @classmethod
    def from_mapping(cls, mapping: Optional[Dict[str, object]]) -> "StyleSnapshot":
        """Build from a CSS-name keyed mapping (e.g. 'background-color'); unknown keys are ignored."""
        if not mapping:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in mapping.items():
            name = str(key).strip().lower().replace("-", "_")
            if name in known and value is not None:
                values[name] = str(value)
        return cls(**values)


@dataclass(frozen=True)
class BoundingBox:
    """Local bounding box (getBBox equivalent)"""
    x: float
    y: float
    width: float
    height: float


@dataclass
class TextRun:
    """Inline text run"""
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strike: bool = False
    break_line: bool = False


@dataclass
class SceneElement:
    """One captured element of the rendered scene"""
    tag: str
    rect: Optional[ElementRect] = None
    name: Optional[str] = None
    class_names: Tuple[str, ...] = ()
    bbox: Optional[BoundingBox] = None
    ctm: Optional[Tuple[float, float, float, float, float, float]] = None
    style: StyleSnapshot = field(default_factory=StyleSnapshot)
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    html: str = ""
    hidden: bool = False

    def attr_float(self, key: str) -> Optional[float]:
        """Return a numeric attribute, or None when missing or unparsable."""
        return parse_px(self.attributes.get(key))


@dataclass
class SceneSlide:
    """One slide root of the scene snapshot"""
    viewport: ViewportRect
    view_box: Optional[str] = None
    sizing_mode: Optional[SizingMode] = None
    elements: List[SceneElement] = field(default_factory=list)


def as_ctm(values: Optional[Sequence[float]]) -> Optional[Tuple[float, float, float, float, float, float]]:
    """Coerce a 6-number sequence (DOMMatrix a..f order) to a tuple, or None."""
    if values is None:
        return None
    try:
        parts = tuple(float(v) for v in values)
    except (TypeError, ValueError):
        return None
    if len(parts) != 6 or not all(math.isfinite(v) for v in parts):
        return None
    return parts  # type: ignore[return-value]
