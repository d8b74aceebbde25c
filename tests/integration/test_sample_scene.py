"""
Integration tests: sample scene → slides (FIT and VIEWPORT_PERCENT slides, filters, placeholders).
"""
from __future__ import annotations

from pathlib import Path

import pytest
from pptx.oxml.ns import qn

from html2pptx.config import ConversionConfig
from html2pptx.io.pptx_writer import PPTXWriter
from html2pptx.io.scene_loader import SceneLoader
from html2pptx.logger import ConversionLogger


@pytest.fixture
def converted(sample_scene_path: Path):
    config = ConversionConfig(slide_width_in=10.0, slide_height_in=6.0)
    logger = ConversionLogger()
    loader = SceneLoader(logger=logger, config=config)
    writer = PPTXWriter(logger=logger, config=config)
    prs, layout = writer.create_presentation()
    for scene_slide in loader.load_file(sample_scene_path):
        writer.add_slide(prs, layout, scene_slide, loader.extract_elements(scene_slide))
    return prs, logger


def _by_name(slide):
    return {shape.name: shape for shape in slide.shapes}


def test_first_slide_shapes(converted) -> None:
    prs, _ = converted
    shapes = _by_name(prs.slides[0])
    assert "html2pptx:rect:header-bg" in shapes
    assert "html2pptx:text:title" in shapes
    assert "html2pptx:line:divider" in shapes
    assert "html2pptx:div:card-1" in shapes
    assert "html2pptx:text:card-1" in shapes
    assert "html2pptx:text:bullet-1" in shapes
    assert any(name.startswith("html2pptx:page-number:") for name in shapes)


def test_excluded_element_not_emitted(converted) -> None:
    prs, _ = converted
    texts = [shape.text_frame.text for shape in prs.slides[0].shapes if shape.has_text_frame]
    assert "editor handle" not in texts


def test_header_geometry(converted) -> None:
    prs, _ = converted
    header = _by_name(prs.slides[0])["html2pptx:rect:header-bg"]
    assert (header.left, header.top, header.width, header.height) == (914400, 548640, 1828800, 1097280)


def test_divider_is_dashed_line(converted) -> None:
    prs, _ = converted
    divider = _by_name(prs.slides[0])["html2pptx:line:divider"]
    assert (divider.begin_x, divider.begin_y) == (914400, 1828800)
    assert divider.end_x == 8229600
    assert divider.line.dash_style is not None


def test_card_text_has_bold_run(converted) -> None:
    prs, _ = converted
    card = _by_name(prs.slides[0])["html2pptx:text:card-1"]
    runs = card.text_frame.paragraphs[0].runs
    assert runs[-1].text == "12%"
    assert runs[-1].font.bold is True


def test_percent_slide_bleed_and_opacity(converted) -> None:
    prs, _ = converted
    bleed = _by_name(prs.slides[1])["html2pptx:rect:bleed"]
    assert bleed.left == -914400
    alpha = bleed._element.spPr.find(f"{qn('a:solidFill')}/{qn('a:srgbClr')}/{qn('a:alpha')}")
    assert alpha.get("val") == "50000"


def test_no_warnings_for_sample(converted) -> None:
    _, logger = converted
    assert logger.get_warnings() == []


def test_table_cell_text_emitted_once() -> None:
    loader = SceneLoader()
    writer = PPTXWriter(config=ConversionConfig(slide_width_in=10.0, slide_height_in=6.0))
    prs, layout = writer.create_presentation()
    scene_slide = loader.load_data({
        "viewport": {"x": 0, "y": 0, "width": 1000, "height": 600},
        "elements": [
            {"tag": "tr", "text": "A B", "rect": {"x": 100, "y": 100, "width": 400, "height": 40}},
            {"tag": "td", "text": "A", "rect": {"x": 100, "y": 100, "width": 200, "height": 40},
             "style": {"color": "black"}},
            {"tag": "td", "text": "B", "rect": {"x": 300, "y": 100, "width": 200, "height": 40},
             "style": {"color": "black"}},
        ],
    })[0]
    slide = writer.add_slide(prs, layout, scene_slide, loader.extract_elements(scene_slide))
    texts = [shape.text_frame.text for shape in slide.shapes if shape.has_text_frame and shape.text_frame.text]
    assert texts == ["A", "B"]
