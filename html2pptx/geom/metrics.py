"""
Geometry resolution module

Maps element bounding boxes (screen pixels or local viewBox units) to slide EMU metrics
under FIT or VIEWPORT_PERCENT sizing, plus line endpoints, text insets and corner radii
"""
import math
import re
from typing import Optional, Tuple

from ..config import MAX_RADIUS_RATIO, RADIUS_REFERENCE
from ..model.intermediate import (
    ElementRect, LineEndpoints, LogicalBox, Percent, Point, RectSpace,
    SizingMode, SlideContext, SlideMetrics, StyleSnapshot, ViewportRect,
)
from .transform import ScreenTransform
from .units import parse_px, px_to_emu, round_emu

_VIEWBOX_SPLIT = re.compile(r"[\s,]+")


def _safe_denominator(value: float) -> float:
    """Zero/negative/non-finite denominators degrade to 1."""
    if value is None or not math.isfinite(value) or value <= 0:
        return 1.0
    return value


def parse_view_box(raw: Optional[str]) -> Optional[LogicalBox]:
    """
    Parse an SVG viewBox attribute ("minX minY width height", space or comma separated)

    Returns:
        LogicalBox, or None unless exactly four finite numbers are present
    """
    if not raw or not str(raw).strip():
        return None
    parts = _VIEWBOX_SPLIT.split(str(raw).strip())
    if len(parts) != 4:
        return None
    try:
        numbers = [float(p) for p in parts]
    except ValueError:
        return None
    if not all(math.isfinite(n) for n in numbers):
        return None
    return LogicalBox(*numbers)


def build_slide_context(
    viewport: ViewportRect,
    view_box: Optional[str],
    sizing_mode: SizingMode,
    output_width: int,
    output_height: int,
) -> SlideContext:
    """Build the per-slide context; an absent or invalid viewBox falls back to the viewport."""
    return SlideContext.create(viewport, parse_view_box(view_box), sizing_mode, output_width, output_height)


def to_logical(rect: ElementRect, ctx: SlideContext) -> Tuple[float, float, float, float]:
    """
    Normalize a rect to logical units relative to the logical box's top-left

    LOCAL rects are already in viewBox units. SCREEN rects are offset from the
    viewport origin and scaled by logical/viewport size first.
    """
    box = ctx.logical_box
    if rect.space == RectSpace.LOCAL:
        x, y, w, h = rect.x, rect.y, rect.width, rect.height
    else:
        vp = ctx.viewport
        scale_x = box.width / _safe_denominator(vp.width)
        scale_y = box.height / _safe_denominator(vp.height)
        x = box.min_x + (rect.x - vp.x) * scale_x
        y = box.min_y + (rect.y - vp.y) * scale_y
        w = rect.width * scale_x
        h = rect.height * scale_y
    return x - box.min_x, y - box.min_y, w, h


def _project_axis(ratio: float, extent: int, sizing_mode: SizingMode) -> Tuple[int, Optional[Percent]]:
    """Project a position ratio onto one slide axis, returning (absolute, percent override)."""
    if sizing_mode == SizingMode.VIEWPORT_PERCENT and (ratio < 0 or ratio > 1):
        return 0, Percent(ratio * 100.0)
    return round_emu(ratio * extent), None


def resolve_metrics(rect: ElementRect, ctx: SlideContext) -> SlideMetrics:
    """
    Resolve an element rect to slide metrics (EMU)

    Args:
        rect: Bounding box tagged LOCAL or SCREEN
        ctx: Slide context

    Returns:
        SlideMetrics; in VIEWPORT_PERCENT mode an out-of-range position carries
        a percent override and a 0 absolute value on that axis
    """
    box = ctx.logical_box
    lx, ly, lw, lh = to_logical(rect, ctx)
    ratio_x = lx / box.width
    ratio_y = ly / box.height

    x, percent_x = _project_axis(ratio_x, ctx.output_width, ctx.sizing_mode)
    y, percent_y = _project_axis(ratio_y, ctx.output_height, ctx.sizing_mode)
    w = round_emu(lw / box.width * ctx.output_width)
    h = round_emu(lh / box.height * ctx.output_height)
    return SlideMetrics(x, y, max(w, 0), max(h, 0), percent_x, percent_y)


def _resolve_point(sx: float, sy: float, ctx: SlideContext) -> Point:
    vp = ctx.viewport
    ratio_x = (sx - vp.x) / _safe_denominator(vp.width)
    ratio_y = (sy - vp.y) / _safe_denominator(vp.height)
    x, percent_x = _project_axis(ratio_x, ctx.output_width, ctx.sizing_mode)
    y, percent_y = _project_axis(ratio_y, ctx.output_height, ctx.sizing_mode)
    return Point(x, y, percent_x, percent_y)


def resolve_line_points(
    p1: Tuple[Optional[float], Optional[float]],
    p2: Tuple[Optional[float], Optional[float]],
    transform: Optional[ScreenTransform],
    ctx: SlideContext,
) -> Optional[LineEndpoints]:
    """
    Resolve the two endpoints of a linear primitive

    Args:
        p1, p2: Local (x, y) endpoints, e.g. the x1/y1/x2/y2 attributes
        transform: Element-to-screen transform (identity when None)
        ctx: Slide context

    Returns:
        LineEndpoints, or None when any coordinate is missing or non-finite
    """
    coords = (*p1, *p2)
    if any(v is None or not math.isfinite(v) for v in coords):
        return None
    transform = transform or ScreenTransform.identity()
    points = []
    for lx, ly in (p1, p2):
        sx, sy = transform.apply(lx, ly)
        if not (math.isfinite(sx) and math.isfinite(sy)):
            return None
        points.append(_resolve_point(sx, sy, ctx))
    return LineEndpoints(points[0], points[1])


def _side_emu(value: str) -> int:
    return px_to_emu(parse_px(value) or 0.0)


def _shift(position: int, percent: Optional[Percent], offset: int, extent: int) -> Tuple[int, Optional[Percent]]:
    """Move a coordinate by offset EMU, keeping a percent override in percent of the extent."""
    if percent is None:
        return position + offset, None
    return position, Percent(percent.value + offset / _safe_denominator(extent) * 100.0)


def inset_for_text(metrics: SlideMetrics, style: StyleSnapshot, ctx: SlideContext) -> SlideMetrics:
    """
    Shrink a box by CSS padding + margin on each side

    Returns the original metrics when the shrink would leave a non-positive
    width or height. A percent override moves by the inset expressed as a
    percentage of the slide extent.
    """
    top = _side_emu(style.padding_top) + _side_emu(style.margin_top)
    right = _side_emu(style.padding_right) + _side_emu(style.margin_right)
    bottom = _side_emu(style.padding_bottom) + _side_emu(style.margin_bottom)
    left = _side_emu(style.padding_left) + _side_emu(style.margin_left)

    w = metrics.w - left - right
    h = metrics.h - top - bottom
    if w <= 0 or h <= 0:
        return metrics
    x, percent_x = _shift(metrics.x, metrics.percent_x, left, ctx.output_width)
    y, percent_y = _shift(metrics.y, metrics.percent_y, top, ctx.output_height)
    return SlideMetrics(x, y, w, h, percent_x, percent_y)


def resolve_radius(explicit_radius_px: Optional[float], reference_dimension: float = RADIUS_REFERENCE) -> float:
    """
    Normalize a corner radius (px) to PowerPoint's roundRect ratio

    The radius is divided by a fixed reference scale rather than the shape's
    own size, then clamped to [0, MAX_RADIUS_RATIO].
    """
    if explicit_radius_px is None or not math.isfinite(explicit_radius_px) or explicit_radius_px <= 0:
        return 0.0
    ratio = explicit_radius_px / _safe_denominator(reference_dimension)
    return max(0.0, min(MAX_RADIUS_RATIO, ratio))


def resolve_corner_radius_px(style: StyleSnapshot, rx: Optional[float] = None, ry: Optional[float] = None) -> float:
    """Positive border-radius wins; otherwise the mean of rx/ry when both are set; otherwise 0."""
    border_radius = parse_px(style.border_radius)
    if border_radius is not None and border_radius > 0:
        return border_radius
    if rx is None or ry is None:
        return 0.0
    return (rx + ry) / 2.0
