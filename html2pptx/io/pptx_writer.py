"""
PowerPoint output module

Emits resolved scene primitives (metrics + paint) as PowerPoint shapes using python-pptx + lxml
"""
import io
import uuid
from datetime import date
from typing import List, Optional, Tuple

from lxml import etree as ET
from pptx import Presentation  # type: ignore[import]
from pptx.enum.dml import MSO_LINE_DASH_STYLE  # type: ignore[import]
from pptx.enum.shapes import MSO_CONNECTOR, MSO_SHAPE  # type: ignore[import]
from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE, PP_ALIGN  # type: ignore[import]
from pptx.util import Emu, Pt  # type: ignore[import]

from ..config import ConversionConfig, default_config
from ..fonts import replace_font
from ..geom.metrics import (
    build_slide_context, inset_for_text, resolve_corner_radius_px,
    resolve_line_points, resolve_metrics, resolve_radius,
)
from ..geom.transform import ScreenTransform, rect_from_local_bounds
from ..geom.units import inches_to_emu
from ..logger import ConversionLogger
from ..mapping.color import ColorSampler, PillowColorSampler
from ..mapping.style_map import StyleResolver, resolve_alignment, resolve_font
from ..mapping.text_map import BULLET_PREFIX, align_x, markup_to_runs
from ..media.image_utils import contain_box, get_image_size, svg_to_png, wrap_svg_markup
from ..model.intermediate import (
    Alignment, ColorDescriptor, DashStyle, ElementRect, FontDescriptor, LineStyle,
    SceneElement, SceneSlide, SlideContext, SlideMetrics, TextRun,
)

# XML namespaces
NS_DRAWINGML = 'http://schemas.openxmlformats.org/drawingml/2006/main'

HORIZONTAL_ALIGN_MAP = {"left": PP_ALIGN.LEFT, "center": PP_ALIGN.CENTER, "right": PP_ALIGN.RIGHT}

HTML_BLOCK_TAGS = ("div", "td", "li")
BOXED_TAGS = ("div", "td")
SVG_IMAGE_NAMES = ("@Logo", "@Svg")

# Size used for @pageNumber placeholders captured without an area
PAGE_NUMBER_FALLBACK_EMU = (Emu(457200), Emu(274320))


def _a(tag_name: str) -> str:
    """Create DrawingML namespace-qualified tag name"""
    return f'{{{NS_DRAWINGML}}}{tag_name}'


def _has_inline_formatting(markup: str) -> bool:
    low = (markup or "").lower()
    return "export-as-text" in low or any(f"<{tag}>" in low or f"<{tag} " in low for tag in ("b", "i", "u", "s"))


class PPTXWriter:
    """PowerPoint presentation writer"""

    def __init__(
        self,
        logger: Optional[ConversionLogger] = None,
        config: Optional[ConversionConfig] = None,
        sampler: Optional[ColorSampler] = None,
    ):
        """
        Args:
            logger: ConversionLogger instance
            config: ConversionConfig instance (uses default_config if None)
            sampler: Color sampler shared by every slide (PillowColorSampler if None)
        """
        self.config = config or default_config
        self.logger = logger
        self.style_resolver = StyleResolver(sampler or PillowColorSampler(), logger)

    def _set_shape_name(self, shape_obj, name: Optional[str]) -> None:
        """Set debug name on a shape/connector/textbox; log on failure."""
        if not name:
            return
        try:
            shape_obj.name = name
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Failed to set shape name: {e}")

    def create_presentation(self) -> Tuple[Presentation, object]:
        """
        Create presentation and blank layout, sized and labelled from the configuration.

        Returns:
            Tuple of (Presentation, blank layout).
        """
        prs = Presentation()

        blank_layout_index = 6
        try:
            blank_layout = prs.slide_layouts[blank_layout_index]
        except Exception:
            blank_layout = prs.slide_layouts[0]

        prs.slide_width = Emu(inches_to_emu(self.config.slide_width_in))
        prs.slide_height = Emu(inches_to_emu(self.config.slide_height_in))

        props = prs.core_properties
        props.author = self.config.author
        props.title = self.config.title
        props.subject = self.config.subject
        return prs, blank_layout

    def build_context(self, prs: Presentation, scene_slide: SceneSlide) -> SlideContext:
        """Slide context for a scene slide on this presentation's page size"""
        return build_slide_context(
            scene_slide.viewport,
            scene_slide.view_box,
            scene_slide.sizing_mode or self.config.sizing_mode,
            int(prs.slide_width),
            int(prs.slide_height),
        )

    def add_slide(self, prs: Presentation, blank_layout, scene_slide: SceneSlide,
                  elements: Optional[List[SceneElement]] = None):
        """
        Add a slide and emit its elements

        Args:
            prs: Presentation object
            blank_layout: Blank layout
            scene_slide: Scene slide (viewport / viewBox / sizing)
            elements: Filtered elements to emit (defaults to all scene elements), in document order
        """
        slide = prs.slides.add_slide(blank_layout)
        ctx = self.build_context(prs, scene_slide)
        for index, element in enumerate(scene_slide.elements if elements is None else elements):
            element_id = element.attributes.get("id") or element.name or f"{element.tag}-{index}"
            try:
                self._add_element(slide, element, ctx, element_id)
            except Exception as e:
                if self.logger:
                    self.logger.warn_skipped_element(element_id, f"emission failed ({e})")
        return slide

    @staticmethod
    def _element_rect(element: SceneElement) -> Optional[ElementRect]:
        """Transformed local bounds when available, otherwise the screen bounding rect."""
        transformed = rect_from_local_bounds(element.bbox, ScreenTransform.from_sequence(element.ctm))
        return transformed or element.rect

    @staticmethod
    def _place(metrics: SlideMetrics, ctx: SlideContext) -> SlideMetrics:
        """Resolve percent overrides against the slide extent."""
        return SlideMetrics(
            metrics.x_coord.resolve(ctx.output_width),
            metrics.y_coord.resolve(ctx.output_height),
            metrics.w,
            metrics.h,
        )

    def _add_element(self, slide, element: SceneElement, ctx: SlideContext, element_id: str):
        """Resolve geometry and paint for one element and emit the matching primitive."""
        style = element.style
        colors = self.style_resolver.resolve_colors(style, element.tag)
        line = self.style_resolver.resolve_line(style, colors.stroke, self.config.stroke_limit_emu)

        if element.tag == "line":
            return self._add_line(slide, element, ctx, line, element_id)

        rect = self._element_rect(element)
        if rect is None:
            if self.logger:
                self.logger.warn_skipped_element(element_id, "no geometry")
            return None
        metrics = resolve_metrics(rect, ctx)

        font = resolve_font(style)
        alignment = resolve_alignment(style)

        if element.name == "@pageNumber":
            return self._add_page_number(slide, self._place(metrics, ctx), font, colors.fill, element_id)

        if metrics.is_empty:
            if self.logger:
                self.logger.debug(f"[{element_id}] Degenerate metrics {metrics}; not rendered")
            return None
        placed = self._place(metrics, ctx)

        if element.name == "@updateDate":
            return self._add_update_date(slide, placed, font, colors.fill, alignment, element_id)
        if element.name in SVG_IMAGE_NAMES:
            return self._add_svg_image(slide, element, rect, placed, element_id)

        radius = resolve_radius(
            resolve_corner_radius_px(style, element.attr_float("rx"), element.attr_float("ry")),
            self.config.radius_reference,
        )

        if element.tag == "text":
            if not element.text.strip():
                return None
            runs = [TextRun(text=element.text.strip(), bold=font.bold)]
            return self._add_text_box(slide, placed, runs, font, colors.fill, alignment,
                                      f"html2pptx:text:{element_id}")
        if element.tag == "rect":
            return self._add_box(slide, placed, colors.fill, line, radius, f"html2pptx:rect:{element_id}")
        if element.tag in HTML_BLOCK_TAGS:
            return self._add_html_block(slide, element, metrics, ctx, colors, line, radius,
                                        font, alignment, element_id)
        return None

    def _add_box(self, slide, placed: SlideMetrics, fill: ColorDescriptor, line: Optional[LineStyle],
                 radius: float, name: str):
        """Add rectangle / rounded rectangle"""
        shape_type = MSO_SHAPE.ROUNDED_RECTANGLE if radius > 0 else MSO_SHAPE.RECTANGLE
        shp = slide.shapes.add_shape(shape_type, Emu(placed.x), Emu(placed.y), Emu(placed.w), Emu(placed.h))
        self._set_shape_name(shp, name)
        if radius > 0:
            try:
                shp.adjustments[0] = float(radius)
            except Exception as e:
                if self.logger:
                    self.logger.debug(f"Failed to set corner radius: {e}")
        self._apply_fill(shp, fill)
        self._apply_line(shp, line)
        try:
            shp.shadow.inherit = False
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Failed to disable shadow: {e}")
        return shp

    def _add_html_block(self, slide, element: SceneElement, metrics: SlideMetrics, ctx: SlideContext,
                        colors, line, radius, font: FontDescriptor, alignment: Alignment, element_id: str):
        """Add an HTML box (div/td get a shape) and its text, inset by padding and margin."""
        if element.tag in BOXED_TAGS:
            self._add_box(slide, self._place(metrics, ctx), colors.fill, line, radius,
                          f"html2pptx:{element.tag}:{element_id}")

        if "shape-only" in element.class_names:
            return None

        if _has_inline_formatting(element.html):
            runs = markup_to_runs(element.html, element.style)
        else:
            runs = [TextRun(text=element.text.strip(), bold=font.bold)]
        if not "".join(run.text for run in runs).strip():
            return None
        if element.tag == "li":
            runs = [TextRun(text=BULLET_PREFIX)] + runs

        text_metrics = self._place(inset_for_text(metrics, element.style, ctx), ctx)
        return self._add_text_box(slide, text_metrics, runs, font, colors.text, alignment,
                                  f"html2pptx:text:{element_id}", shrink=True)

    def _add_update_date(self, slide, placed: SlideMetrics, font: FontDescriptor, color: ColorDescriptor,
                         alignment: Alignment, element_id: str):
        """Add today's date; the box is twice as wide so the stamp never wraps."""
        box_w = placed.w * 2
        left = align_x(alignment.align, box_w, placed)
        box = SlideMetrics(left, placed.y, box_w, placed.h)
        text = date.today().strftime(self.config.date_format)
        return self._add_text_box(slide, box, [TextRun(text=text, bold=font.bold)], font, color, alignment,
                                  f"html2pptx:date:{element_id}")

    def _add_page_number(self, slide, placed: SlideMetrics, font: FontDescriptor, color: ColorDescriptor,
                         element_id: str):
        """Add a text box holding a slide-number field"""
        width, height = placed.w, placed.h
        if placed.is_empty:
            width, height = PAGE_NUMBER_FALLBACK_EMU
        tb = slide.shapes.add_textbox(Emu(placed.x), Emu(placed.y), Emu(width), Emu(height))
        self._set_shape_name(tb, f"html2pptx:page-number:{element_id}")
        text_frame = tb.text_frame
        text_frame.word_wrap = False
        self._zero_margins(text_frame)
        self._set_slide_number_field_xml(text_frame.paragraphs[0], font, color)
        return tb

    def _add_svg_image(self, slide, element: SceneElement, rect: ElementRect, placed: SlideMetrics, element_id: str):
        """Rasterize captured SVG markup and place it with contain sizing"""
        view_box = element.attributes.get("data-viewbox")
        if not view_box and element.bbox is not None:
            bbox = element.bbox
            view_box = f"{bbox.x} {bbox.y} {bbox.width} {bbox.height}"
        svg_data = wrap_svg_markup(element.html, rect.width, rect.height, view_box)
        try:
            png = svg_to_png(svg_data, dpi=self.config.dpi,
                             output_width=int(rect.width), output_height=int(rect.height))
        except ImportError as e:
            if self.logger:
                self.logger.warn_unsupported_effect(element_id, "svg_image", {"reason": str(e)})
            return None
        if not png:
            if self.logger:
                self.logger.warn_skipped_element(element_id, "SVG rasterization failed")
            return None

        img_w, img_h = get_image_size(png)
        left, top, width, height = contain_box(img_w, img_h, placed.x, placed.y, placed.w, placed.h)
        picture = slide.shapes.add_picture(io.BytesIO(png), Emu(left), Emu(top), Emu(width), Emu(height))
        self._set_shape_name(picture, f"html2pptx:image:{element_id}")
        description = element.attributes.get("aria-label") or element.name
        try:
            picture._element.nvPicPr.cNvPr.set("descr", description)
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Failed to set picture description: {e}")
        return picture

    def _add_line(self, slide, element: SceneElement, ctx: SlideContext, line: Optional[LineStyle], element_id: str):
        """Add straight connector for an SVG line"""
        endpoints = resolve_line_points(
            (element.attr_float("x1"), element.attr_float("y1")),
            (element.attr_float("x2"), element.attr_float("y2")),
            ScreenTransform.from_sequence(element.ctm),
            ctx,
        )
        if endpoints is None:
            if self.logger:
                self.logger.warn_skipped_element(element_id, "line endpoints are missing or non-finite")
            return None
        if line is None:
            if self.logger:
                self.logger.debug(f"[{element_id}] Line without visible stroke; not rendered")
            return None

        start, end = endpoints.start, endpoints.end
        connector = slide.shapes.add_connector(
            MSO_CONNECTOR.STRAIGHT,
            Emu(start.x_coord.resolve(ctx.output_width)),
            Emu(start.y_coord.resolve(ctx.output_height)),
            Emu(end.x_coord.resolve(ctx.output_width)),
            Emu(end.y_coord.resolve(ctx.output_height)),
        )
        self._set_shape_name(connector, f"html2pptx:line:{element_id}")
        self._apply_line(connector, line)
        return connector

    def _add_text_box(self, slide, placed: SlideMetrics, runs: List[TextRun], font: FontDescriptor,
                      color: ColorDescriptor, alignment: Alignment, name: str, shrink: bool = False):
        """Add transparent text box with the given runs"""
        tb = slide.shapes.add_textbox(Emu(placed.x), Emu(placed.y), Emu(placed.w), Emu(placed.h))
        self._set_shape_name(tb, name)
        text_frame = tb.text_frame
        text_frame.word_wrap = True
        self._zero_margins(text_frame)
        text_frame.vertical_anchor = MSO_ANCHOR.MIDDLE
        if shrink:
            text_frame.auto_size = MSO_AUTO_SIZE.TEXT_TO_FIT_SHAPE
        elif alignment.auto_fit:
            text_frame.auto_size = MSO_AUTO_SIZE.SHAPE_TO_FIT_TEXT
        else:
            text_frame.auto_size = MSO_AUTO_SIZE.NONE
        self._add_runs_to_text_frame(text_frame, runs, font, color, alignment)
        return tb

    @staticmethod
    def _zero_margins(text_frame) -> None:
        text_frame.margin_top = 0
        text_frame.margin_left = 0
        text_frame.margin_bottom = 0
        text_frame.margin_right = 0

    def _new_paragraph(self, text_frame, alignment: Alignment, first: bool):
        p = text_frame.paragraphs[0] if first else text_frame.add_paragraph()
        p.alignment = HORIZONTAL_ALIGN_MAP.get(alignment.align, PP_ALIGN.CENTER)
        p.space_before = Pt(0)
        p.space_after = Pt(0)
        return p

    def _add_runs_to_text_frame(self, text_frame, runs: List[TextRun], font: FontDescriptor,
                                color: ColorDescriptor, alignment: Alignment) -> None:
        """Add runs; a run with break_line ends its paragraph."""
        family = replace_font(font.family, config=self.config)
        if font.family and family != font.family and self.logger:
            self.logger.warn_font_missing(None, font.family, family)

        p = self._new_paragraph(text_frame, alignment, first=True)
        for run_data in runs:
            if run_data.text:
                run = p.add_run()
                run.text = run_data.text
                run.font.name = family
                if font.size_points > 0:
                    run.font.size = Pt(font.size_points)
                run.font.bold = run_data.bold
                run.font.italic = run_data.italic
                run.font.underline = run_data.underline
                if run_data.strike:
                    run._r.get_or_add_rPr().set("strike", "sngStrike")
                self._set_font_color_xml(run, color)
            if run_data.break_line:
                p = self._new_paragraph(text_frame, alignment, first=False)

    def _apply_fill(self, shp, fill: ColorDescriptor) -> None:
        """Solid fill with alpha, or no fill for invisible colors."""
        if not fill.is_visible:
            try:
                shp.fill.background()
            except Exception as e:
                if self.logger:
                    self.logger.debug(f"Failed to set background fill: {e}")
            return
        try:
            shp.fill.solid()
            shp.fill.fore_color.rgb = fill.rgb
            self._set_alpha_xml(shp._element.spPr, fill.alpha)
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Failed to set fill color: {e}")

    def _apply_line(self, shp, line: Optional[LineStyle]) -> None:
        """Outline from resolved line options; None removes the outline entirely."""
        if line is None:
            self._set_no_line_xml(shp)
            return
        try:
            shp.line.fill.solid()
            shp.line.fill.fore_color.rgb = line.color.rgb
            shp.line.width = Pt(line.width_pt)
            if line.dash == DashStyle.DASHED:
                shp.line.dash_style = MSO_LINE_DASH_STYLE.DASH_DOT
            ln = shp._element.spPr.find(_a("ln"))
            if ln is not None:
                self._set_alpha_xml(ln, line.color.alpha)
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Failed to set line: {e}")

    def _set_alpha_xml(self, parent, alpha: float) -> None:
        """Set <a:alpha> on parent's solidFill/srgbClr (removed when fully opaque)."""
        srgb = parent.find(f"{_a('solidFill')}/{_a('srgbClr')}")
        if srgb is None:
            return
        for existing in srgb.findall(_a("alpha")):
            srgb.remove(existing)
        if alpha >= 1.0:
            return
        value = int(round(max(0.0, alpha) * 100000))
        ET.SubElement(srgb, _a("alpha")).set("val", str(value))

    def _set_font_color_xml(self, run, color: ColorDescriptor) -> None:
        """Set run color and alpha"""
        try:
            run.font.color.rgb = color.rgb
            r_pr = run._r.get_or_add_rPr()
            self._set_alpha_xml(r_pr, color.alpha)
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Failed to set font color: {e}")

    def _set_no_line_xml(self, shape) -> None:
        """Force <a:noFill/> on the line (ln) via XML."""
        try:
            sp_pr = shape._element.spPr
            ln_element = sp_pr.find(_a("ln"))
            if ln_element is None:
                ln_element = ET.SubElement(sp_pr, _a("ln"))
            for tag in ("noFill", "solidFill", "gradFill", "pattFill"):
                for elem in ln_element.findall(_a(tag)):
                    ln_element.remove(elem)
            ln_element.insert(0, ET.Element(_a("noFill")))
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Failed to disable line: {e}")

    def _set_slide_number_field_xml(self, paragraph, font: FontDescriptor, color: ColorDescriptor) -> None:
        """Insert <a:fld type="slidenum"> carrying the resolved font and color."""
        p_element = paragraph._p
        fld = ET.Element(_a("fld"))
        fld.set("id", "{" + str(uuid.uuid4()).upper() + "}")
        fld.set("type", "slidenum")

        r_pr = ET.SubElement(fld, _a("rPr"))
        r_pr.set("lang", "en-US")
        if font.size_points > 0:
            r_pr.set("sz", str(int(round(font.size_points * 100))))
        if font.bold:
            r_pr.set("b", "1")
        solid_fill = ET.SubElement(r_pr, _a("solidFill"))
        srgb = ET.SubElement(solid_fill, _a("srgbClr"))
        srgb.set("val", color.hex.lstrip("#").upper())
        self._set_alpha_xml(r_pr, color.alpha)
        latin = ET.SubElement(r_pr, _a("latin"))
        latin.set("typeface", replace_font(font.family, config=self.config))

        text = ET.SubElement(fld, _a("t"))
        text.text = "‹#›"

        end_para = p_element.find(_a("endParaRPr"))
        if end_para is not None:
            end_para.addprevious(fld)
        else:
            p_element.append(fld)
