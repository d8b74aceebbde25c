"""Test module for style mapping"""

import pytest

from html2pptx.config import STROKE_LIMIT
from html2pptx.logger import ConversionLogger
from html2pptx.mapping.color import ColorSampler, PillowColorSampler
from html2pptx.mapping.style_map import (
    StyleResolver, line_options, parse_factor, resolve_alignment, resolve_dash,
    resolve_font, resolve_stroke_width_px, resolve_stroke_width_units,
)
from html2pptx.model.intermediate import (
    Alignment, ColorDescriptor, DashStyle, StyleSnapshot, TRANSPARENT,
)

RED = ColorDescriptor("#ff0000", 1.0)


class ExplodingSampler(ColorSampler):
    def sample(self, css_color):
        raise RuntimeError("boom")


@pytest.fixture
def resolver():
    return StyleResolver(PillowColorSampler())


# ---- parse_factor ----
def test_parse_factor():
    assert parse_factor(None) == 1.0
    assert parse_factor("") == 1.0
    assert parse_factor("0.5") == 0.5
    assert parse_factor("50%") == 0.5
    assert parse_factor("2") == 1.0
    assert parse_factor("-1") == 0.0
    assert parse_factor("auto") == 1.0


# ---- colors ----
def test_descriptor_is_lowercase_hex(resolver):
    assert resolver.to_descriptor("rgb(171, 205, 239)") == ColorDescriptor("#abcdef", 1.0)


def test_descriptor_unparsable_is_transparent(resolver):
    assert resolver.to_descriptor("bogus") == TRANSPARENT
    assert resolver.to_descriptor(None) == TRANSPARENT


def test_sampler_failure_never_raises():
    logger = ConversionLogger()
    resolver = StyleResolver(ExplodingSampler(), logger)
    colors = resolver.resolve_colors(StyleSnapshot(fill="red"), "rect")
    assert colors.fill == TRANSPARENT
    assert not colors.stroke.is_visible


def test_composed_alpha(resolver):
    style = StyleSnapshot(fill="rgba(0, 0, 255, 1)", opacity="0.5", fill_opacity="0.5")
    colors = resolver.resolve_colors(style, "rect")
    assert colors.fill.alpha == pytest.approx(0.25, abs=0.01)
    assert colors.fill.hex == "#0000ff"


def test_vector_tag_prefers_fill(resolver):
    style = StyleSnapshot(background_color="transparent", fill="red")
    colors = resolver.resolve_colors(style, "rect")
    assert colors.fill.hex == "#ff0000"
    assert colors.fill.alpha == 1.0


def test_vector_tag_ignores_visible_background(resolver):
    style = StyleSnapshot(background_color="blue", fill="red")
    assert resolver.resolve_colors(style, "text").fill.hex == "#ff0000"


def test_box_tag_prefers_visible_background(resolver):
    style = StyleSnapshot(background_color="blue", fill="red", border_color="green", stroke="red")
    colors = resolver.resolve_colors(style, "div")
    assert colors.fill.hex == "#0000ff"
    assert colors.stroke.hex == "#008000"


def test_box_tag_falls_back_to_vector_paint(resolver):
    style = StyleSnapshot(background_color="rgba(0, 0, 0, 0)", fill="red")
    assert resolver.resolve_colors(style, "div").fill.hex == "#ff0000"


def test_text_and_background_use_own_opacity(resolver):
    style = StyleSnapshot(color="black", background_color="white", opacity="0.5", fill_opacity="0.1")
    colors = resolver.resolve_colors(style, "div")
    assert colors.text.alpha == pytest.approx(0.5)
    assert colors.background.alpha == pytest.approx(0.5)


def test_resolve_colors_is_deterministic(resolver):
    style = StyleSnapshot(fill="#123456", stroke="rgba(1, 2, 3, 0.3)", opacity="0.7")
    assert resolver.resolve_colors(style, "rect") == resolver.resolve_colors(style, "rect")


# ---- stroke width / line options ----
def test_stroke_width_prefers_stroke_width():
    assert resolve_stroke_width_px(StyleSnapshot(stroke_width="3px", border_width="1px")) == 3.0
    assert resolve_stroke_width_px(StyleSnapshot(stroke_width="0px", border_width="2px")) == 2.0
    assert resolve_stroke_width_px(StyleSnapshot()) == 0.0
    assert resolve_stroke_width_units(StyleSnapshot(stroke_width="2px")) == 19050


def test_line_options_at_limit_is_dropped():
    assert line_options(RED, STROKE_LIMIT) is None


def test_line_options_just_above_limit():
    line = line_options(RED, STROKE_LIMIT + 1)
    assert line is not None
    assert line.width_pt >= 1


def test_line_options_invisible_color():
    assert line_options(TRANSPARENT, 12700) is None


def test_line_options_clamped_width():
    assert line_options(RED, 19050).width_pt == pytest.approx(1.5)
    assert line_options(RED, 12700 * 5000).width_pt == 1584.0


def test_resolve_line_dashed(resolver):
    style = StyleSnapshot(stroke="black", stroke_width="2px", stroke_dasharray="4 2")
    colors = resolver.resolve_colors(style, "line")
    line = resolver.resolve_line(style, colors.stroke)
    assert line.dash == DashStyle.DASHED
    assert line.width_pt == pytest.approx(1.5)


def test_resolve_dash_none_is_solid():
    assert resolve_dash(StyleSnapshot(stroke_dasharray="none")) == DashStyle.SOLID
    assert resolve_dash(StyleSnapshot()) == DashStyle.SOLID


# ---- font / alignment ----
def test_resolve_font():
    font = resolve_font(StyleSnapshot(font_family='"Segoe UI", Arial, sans-serif', font_size="16px", font_weight="700"))
    assert font.family == "Segoe UI"
    assert font.size_points == 12.0
    assert font.bold is True


def test_resolve_font_normal_weight():
    assert resolve_font(StyleSnapshot(font_weight="400")).bold is False


def test_resolve_alignment():
    assert resolve_alignment(StyleSnapshot(text_align="right")) == Alignment("right", False)
    assert resolve_alignment(StyleSnapshot(text_anchor="start")) == Alignment("left", False)
    assert resolve_alignment(StyleSnapshot(text_align="justify")) == Alignment("left", True)
    assert resolve_alignment(StyleSnapshot()) == Alignment("center", False)
