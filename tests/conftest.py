"""Shared fixtures: project root, sample paths and slide contexts."""

from pathlib import Path

import pytest

from html2pptx.geom.metrics import build_slide_context
from html2pptx.model.intermediate import SizingMode, ViewportRect

# Repository root (html2pptx/)
ROOT_DIR = Path(__file__).resolve().parent.parent


@pytest.fixture
def sample_dir() -> Path:
    """Path to the sample/ directory."""
    return ROOT_DIR / "sample"


@pytest.fixture
def sample_scene_path(sample_dir: Path) -> Path:
    """Path to sample/sample_scene.json."""
    path = sample_dir / "sample_scene.json"
    if not path.exists():
        pytest.skip(f"Sample file not found: {path}")
    return path


@pytest.fixture
def fit_context():
    """1000x600 viewport projected onto a 10in x 6in slide (FIT)."""
    return build_slide_context(ViewportRect(0, 0, 1000, 600), None, SizingMode.FIT, 9144000, 5486400)


@pytest.fixture
def percent_context():
    """Same geometry as fit_context, in VIEWPORT_PERCENT mode."""
    return build_slide_context(
        ViewportRect(0, 0, 1000, 600), None, SizingMode.VIEWPORT_PERCENT, 9144000, 5486400
    )
