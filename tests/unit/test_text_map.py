"""Test module for text mapping"""

from html2pptx.mapping.text_map import align_x, markup_to_runs, normalize_entry, plain_text
from html2pptx.model.intermediate import SlideMetrics, StyleSnapshot


def test_markup_to_runs_empty():
    assert markup_to_runs("") == []
    assert markup_to_runs(None) == []


def test_markup_to_runs_plain_text():
    runs = markup_to_runs("Hello World")
    assert len(runs) == 1
    assert runs[0].text == "Hello World"
    assert runs[0].bold is False


def test_markup_to_runs_inline_formatting():
    runs = markup_to_runs("Hello <b>bold</b> and <i>italic</i>")
    assert [r.text for r in runs] == ["Hello ", "bold", " and ", "italic"]
    assert runs[1].bold is True
    assert runs[3].italic is True
    assert runs[2].bold is False


def test_markup_to_runs_nested_formatting():
    runs = markup_to_runs("<span><u><s>gone</s></u></span>")
    assert runs[0].underline is True
    assert runs[0].strike is True


def test_markup_to_runs_line_breaks():
    runs = markup_to_runs("first<br>second<div>third</div>")
    assert runs[0].text == "first"
    assert runs[1].break_line is True
    assert runs[2].text == "second"
    assert runs[3].text == "third"
    assert runs[3].break_line is True


def test_markup_to_runs_fallback_style():
    style = StyleSnapshot(font_weight="bold", text_decoration="underline")
    runs = markup_to_runs("plain", style)
    assert runs[0].bold is True
    assert runs[0].underline is True


def test_normalize_entry_strips_attributes():
    assert normalize_entry('<span style="color:red">x</span>') == "<span>x</span>"
    assert normalize_entry('<p class="a">x</p>') == "<p>x</p>"
    assert normalize_entry("a\u0007b") == "ab"


def test_plain_text():
    assert plain_text("  <b>Hi</b> there ") == "Hi there"


def test_align_x():
    metrics = SlideMetrics(100, 0, 200, 50)
    assert align_x("left", 400, metrics) == 100
    assert align_x("center", 400, metrics) == 0
    assert align_x("right", 400, metrics) == -100
