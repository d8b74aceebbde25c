"""
Image processing module

Wraps captured SVG markup into standalone documents, rasterizes SVG → PNG (cairosvg)
and reads raster sizes (Pillow). CairoSVG is LGPL; used as library only (no modification).
"""
import io
from typing import Optional, Tuple

from ..config import default_config

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


def _fmt(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".") or "0"


def wrap_svg_markup(inner_markup: str, width: float, height: float, view_box: Optional[str] = None) -> str:
    """
    Build a standalone SVG document around captured inner markup

    Args:
        inner_markup: innerHTML of the placeholder group
        width: Rendered width in pixels
        height: Rendered height in pixels
        view_box: Explicit viewBox (data-viewbox); defaults to "0 0 width height"

    Returns:
        SVG document string
    """
    box = view_box or f"0 0 {_fmt(width)} {_fmt(height)}"
    return (
        f'<svg width="{_fmt(width)}" height="{_fmt(height)}" viewBox="{box}" '
        f'xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" overflow="hidden">'
        f"{inner_markup or ''}</svg>"
    )


def svg_to_png(svg_data: str, dpi: float = None, output_width: Optional[int] = None, output_height: Optional[int] = None) -> Optional[bytes]:
    """
    Rasterize SVG to PNG using cairosvg

    Args:
        svg_data: SVG data (string)
        dpi: DPI setting (uses default_config.dpi if None)
        output_width: Output width in pixels (scaled by DPI / 96)
        output_height: Output height in pixels (scaled by DPI / 96)

    Returns:
        PNG data (bytes), or None on conversion failure.

    Raises:
        ImportError: When cairosvg is not installed.
    """
    if dpi is None:
        dpi = default_config.dpi

    try:
        import cairosvg
    except ImportError as e:
        raise ImportError(
            "SVG rasterization requires cairosvg. Install with: pip install html2pptx[svg]"
        ) from e

    scale = dpi / 96.0
    kwargs = {'dpi': dpi}
    if output_width is not None:
        kwargs['output_width'] = int(output_width * scale)
    if output_height is not None:
        kwargs['output_height'] = int(output_height * scale)

    try:
        out = cairosvg.svg2png(bytestring=svg_data.encode('utf-8'), **kwargs)
    except Exception:
        return None
    return bytes(out) if out else None


def get_image_size(image_bytes: bytes) -> Tuple[Optional[int], Optional[int]]:
    """
    Get raster image dimensions (width, height) in pixels.
    """
    try:
        from PIL import Image

        img = Image.open(io.BytesIO(image_bytes))
        return int(img.width), int(img.height)
    except Exception:
        return None, None


def contain_box(image_w: int, image_h: int, left: int, top: int, width: int, height: int) -> Tuple[int, int, int, int]:
    """
    Fit an image inside a box preserving its aspect ratio, centered

    Returns:
        (left, top, width, height) in the box's unit
    """
    if not image_w or not image_h or width <= 0 or height <= 0:
        return left, top, width, height
    scale = min(width / image_w, height / image_h)
    fit_w = int(round(image_w * scale))
    fit_h = int(round(image_h * scale))
    return left + (width - fit_w) // 2, top + (height - fit_h) // 2, fit_w, fit_h
