"""
Style mapping module

Computed CSS style → fill/stroke/text/background colors with composed opacity,
stroke width and line options, font, dash style and text alignment
"""
import math
from typing import Dict, Optional

from ..config import STROKE_LIMIT, VECTOR_TAGS
from ..geom.units import EMU_PER_PT, parse_px, px_to_emu, px_to_pt
from ..logger import ConversionLogger
from ..model.intermediate import (
    Alignment, ColorDescriptor, DashStyle, FontDescriptor, LineStyle,
    ResolvedColors, StyleSnapshot, TRANSPARENT,
)
from .color import ColorSampler

BOLD_WEIGHTS = frozenset({"bold", "bolder", "600", "700", "800"})

# PowerPoint <a:ln w> is limited to 0..1584 pt
MIN_LINE_WEIGHT_PT = 1.0
MAX_LINE_WEIGHT_PT = 1584.0

# DOM text-align / SVG text-anchor -> PowerPoint paragraph alignment
TEXT_ALIGNS: Dict[str, Alignment] = {
    "start": Alignment("left", False),
    "end": Alignment("right", False),
    "left": Alignment("left", False),
    "right": Alignment("right", False),
    "center": Alignment("center", False),
    "middle": Alignment("center", False),
    "justify": Alignment("left", True),
}


def parse_factor(value: Optional[str]) -> float:
    """
    Parse an opacity factor ("0.5", "50%") clamped to [0, 1]

    Missing or unparsable values yield 1.
    """
    if value is None or not str(value).strip():
        return 1.0
    text = str(value).strip()
    scale = 1.0
    if text.endswith("%"):
        text = text[:-1]
        scale = 0.01
    try:
        number = float(text) * scale
    except ValueError:
        return 1.0
    if not math.isfinite(number):
        return 1.0
    return max(0.0, min(1.0, number))


def _first_positive(*values: Optional[str]) -> float:
    for raw in values:
        number = parse_px(raw)
        if number is not None and number > 0:
            return number
    return 0.0


def resolve_stroke_width_px(style: StyleSnapshot) -> float:
    """stroke-width first, then border-width; first positive finite value wins, else 0."""
    return _first_positive(style.stroke_width, style.border_width)


def resolve_stroke_width_units(style: StyleSnapshot) -> int:
    """Stroke width converted from source pixels to EMU"""
    return px_to_emu(resolve_stroke_width_px(style))


def resolve_dash(style: StyleSnapshot) -> DashStyle:
    """Any dash array other than 'none' maps to a dashed line; no custom patterns."""
    value = (style.stroke_dasharray or "").strip().lower()
    if value and value != "none":
        return DashStyle.DASHED
    return DashStyle.SOLID


def line_options(
    color: ColorDescriptor,
    width_emu: float,
    dash: DashStyle = DashStyle.SOLID,
    limit: float = STROKE_LIMIT,
) -> Optional[LineStyle]:
    """
    Build the outline for a primitive

    Widths at or below the limit are dropped entirely (they render as noise,
    not as a visible line), as are invisible colors.

    Returns:
        LineStyle with width in points clamped to PowerPoint's range, or None
    """
    if not width_emu or not math.isfinite(width_emu) or width_emu <= limit:
        return None
    if not color.is_visible:
        return None
    width_pt = max(MIN_LINE_WEIGHT_PT, min(MAX_LINE_WEIGHT_PT, width_emu / EMU_PER_PT))
    return LineStyle(color, width_pt, dash)


def resolve_font(style: StyleSnapshot) -> FontDescriptor:
    """First font-family token, px size as points, bold from a fixed weight set"""
    family = (style.font_family or "").split(",")[0].replace('"', "").replace("'", "").strip()
    size_pt = px_to_pt(parse_px(style.font_size))
    bold = (style.font_weight or "").strip().lower() in BOLD_WEIGHTS
    return FontDescriptor(family, size_pt, bold)


def resolve_alignment(style: StyleSnapshot) -> Alignment:
    """text-align, then text-anchor, defaulting to center"""
    for raw in (style.text_align, style.text_anchor):
        alignment = TEXT_ALIGNS.get((raw or "").strip().lower())
        if alignment is not None:
            return alignment
    return TEXT_ALIGNS["center"]


class StyleResolver:
    """Resolve paint attributes from a style snapshot using an injected ColorSampler"""

    def __init__(self, sampler: ColorSampler, logger: Optional[ConversionLogger] = None):
        """
        Args:
            sampler: Color resolution service, shared read-only across elements
            logger: ConversionLogger instance (optional)
        """
        self.sampler = sampler
        self.logger = logger

    def to_descriptor(self, css_color: Optional[str]) -> ColorDescriptor:
        """Sample a CSS color; unparsable or transparent values give #000000 / alpha 0."""
        try:
            rgba = self.sampler.sample(css_color)
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Color sampler failed for {css_color!r}: {e}")
            rgba = None
        if rgba is None:
            return TRANSPARENT
        r, g, b, a = rgba
        return ColorDescriptor(f"#{r:02x}{g:02x}{b:02x}", max(0.0, min(1.0, a / 255.0)))

    def resolve_colors(self, style: StyleSnapshot, tag: str = "") -> ResolvedColors:
        """
        Resolve fill, stroke, text and background colors

        CSS box colors (background-color / border-color) win over vector paint
        (fill / stroke) when visible, except for vector tags where the paint is
        authoritative. Alpha is multiplied by opacity, and for fill/stroke also
        by fill-opacity / stroke-opacity.
        """
        is_vector = (tag or "").strip().lower() in VECTOR_TAGS
        own_opacity = parse_factor(style.opacity)

        background = self.to_descriptor(style.background_color)
        border = self.to_descriptor(style.border_color)

        fill = background if background.is_visible and not is_vector else self.to_descriptor(style.fill)
        stroke = border if border.is_visible and not is_vector else self.to_descriptor(style.stroke)

        return ResolvedColors(
            fill=fill.with_opacity(own_opacity).with_opacity(parse_factor(style.fill_opacity)),
            stroke=stroke.with_opacity(own_opacity).with_opacity(parse_factor(style.stroke_opacity)),
            text=self.to_descriptor(style.color).with_opacity(own_opacity),
            background=background.with_opacity(own_opacity),
        )

    def resolve_line(self, style: StyleSnapshot, stroke: ColorDescriptor, limit: float = STROKE_LIMIT) -> Optional[LineStyle]:
        """Stroke width, dash and color combined into line options (None when suppressed)"""
        return line_options(stroke, resolve_stroke_width_units(style), resolve_dash(style), limit)
