"""
Tests for CLI entry point (html2pptx.main).
"""
from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from pptx import Presentation

from html2pptx.main import main


def test_main_success_creates_pptx(sample_scene_path: Path, tmp_path: Path) -> None:
    """Running main with valid input creates the output pptx file."""
    out_pptx = tmp_path / "out.pptx"
    argv = ["html2pptx", str(sample_scene_path), str(out_pptx)]

    with patch("sys.argv", argv):
        main()  # success path does not call sys.exit()

    assert out_pptx.exists()
    prs = Presentation(str(out_pptx))
    assert len(prs.slides) == 2


def test_main_missing_input_exits_with_error(tmp_path: Path) -> None:
    """Main exits with code 1 when input file does not exist."""
    out_pptx = tmp_path / "out.pptx"

    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "nonexistent.json"), str(out_pptx)])

    assert exc_info.value.code == 1
    assert not out_pptx.exists()


def test_main_no_slides_exits_with_error(tmp_path: Path) -> None:
    scene = tmp_path / "empty.json"
    scene.write_text(json.dumps({"slides": []}), encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        main([str(scene), str(tmp_path / "out.pptx")])

    assert exc_info.value.code == 1


def test_main_invalid_json_exits_with_error(tmp_path: Path) -> None:
    scene = tmp_path / "bad.json"
    scene.write_text("{", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        main([str(scene), str(tmp_path / "out.pptx")])

    assert exc_info.value.code == 1


def test_main_options_applied(sample_scene_path: Path, tmp_path: Path) -> None:
    out_pptx = tmp_path / "out.pptx"
    main([
        str(sample_scene_path), str(out_pptx),
        "--width", "10", "--height", "6", "--title", "Review", "--author", "Team",
    ])

    prs = Presentation(str(out_pptx))
    assert prs.slide_width == 9144000
    assert prs.slide_height == 5486400
    assert prs.core_properties.title == "Review"
    assert prs.core_properties.author == "Team"


def test_main_prints_warnings(tmp_path: Path, capsys) -> None:
    scene = tmp_path / "scene.json"
    scene.write_text(json.dumps({
        "viewport": {"x": 0, "y": 0, "width": 100, "height": 100},
        "elements": [{"tag": "line", "attributes": {"id": "broken", "x1": "0"}, "style": {"stroke": "black"}}],
    }), encoding="utf-8")

    main([str(scene), str(tmp_path / "out.pptx")])

    out = capsys.readouterr().out
    assert "Warnings (1):" in out
    assert "Skipped element" in out
