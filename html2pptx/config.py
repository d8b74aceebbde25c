"""
Conversion configuration module

Holds presentation layout, sizing strategy, export filters and resolver constants
"""
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .model.intermediate import SizingMode

# Minimum stroke width (EMU) before line data is dropped; thinner strokes only produce antialiasing noise
STROKE_LIMIT = 0.013683353027016402

# Fixed reference scale used to normalize corner radii (not the element's own size)
RADIUS_REFERENCE = 0.5

# Upper bound of the corner radius ratio handed to PowerPoint's roundRect adjustment
MAX_RADIUS_RATIO = 0.05

# Tags painted with SVG fill/stroke rather than CSS box colors
VECTOR_TAGS = frozenset({"text", "rect", "g", "line"})

# Tags collected from a scene snapshot
EXPORTED_TAGS = frozenset({"text", "rect", "line", "g", "div", "li", "td"})


@dataclass
class ConversionConfig:
    """Conversion configuration"""
    slide_width_in: float = 20.0
    slide_height_in: float = 11.25
    sizing_mode: SizingMode = SizingMode.FIT

    author: str = ""
    title: str = ""
    subject: str = ""

    # Date stamp written for @updateDate placeholders (pt-BR style by default)
    date_format: str = "%d/%m/%Y"

    # Editor preview state: hide-on-presentation elements are skipped only when True
    presentation_mode: bool = False
    excluded_classes: Tuple[str, ...] = ("no-export", "hide-on-export")

    stroke_limit_emu: float = STROKE_LIMIT
    radius_reference: float = RADIUS_REFERENCE

    font_replacements: Dict[str, str] = field(default_factory=dict)

    # SVG -> PNG rasterization for @Svg / @Logo placeholders
    dpi: float = 192.0


default_config = ConversionConfig()
