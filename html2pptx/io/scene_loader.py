"""
Scene snapshot loading module

Reads JSON snapshots of rendered slides (viewport, viewBox, per-element geometry and
computed style) and applies the export visibility filters
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import EXPORTED_TAGS, ConversionConfig, default_config
from ..errors import SceneLoadError
from ..geom.units import parse_px
from ..logger import ConversionLogger
from ..model.intermediate import (
    BoundingBox, ElementRect, RectSpace, SceneElement, SceneSlide,
    SizingMode, StyleSnapshot, ViewportRect, as_ctm,
)


def _number(raw: Dict[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    if isinstance(value, bool):
        return None
    return parse_px(value)


def _parse_box(raw: Any) -> Optional[tuple]:
    """(x, y, width, height) from a DOMRect-like mapping; None when any value is missing."""
    if not isinstance(raw, dict):
        return None
    values = (
        _number(raw, "x") if "x" in raw else _number(raw, "left"),
        _number(raw, "y") if "y" in raw else _number(raw, "top"),
        _number(raw, "width"),
        _number(raw, "height"),
    )
    if any(v is None for v in values):
        return None
    return values


def _class_names(raw: Any) -> tuple:
    if isinstance(raw, (list, tuple)):
        return tuple(str(c) for c in raw if str(c).strip())
    return tuple(str(raw or "").split())


class SceneLoader:
    """Scene snapshot loading and filtering"""

    def __init__(self, logger: Optional[ConversionLogger] = None, config: Optional[ConversionConfig] = None):
        """
        Args:
            logger: ConversionLogger instance
            config: ConversionConfig instance (uses default_config if None)
        """
        self.config = config or default_config
        self.logger = logger

    def load_file(self, path: Path) -> List[SceneSlide]:
        """
        Load a snapshot file and return its slides

        Raises:
            SceneLoadError: When the file cannot be read or is not valid JSON
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise SceneLoadError(f"cannot read file ({e})", str(path)) from e
        except json.JSONDecodeError as e:
            raise SceneLoadError(f"invalid JSON ({e})", str(path)) from e
        return self.load_data(data)

    def load_data(self, data: Any) -> List[SceneSlide]:
        """Parse slides from decoded JSON (a {'slides': [...]} document or a single slide object)"""
        if isinstance(data, dict) and "slides" in data:
            raw_slides = data.get("slides")
        elif isinstance(data, dict) and "elements" in data:
            raw_slides = [data]
        elif isinstance(data, list):
            raw_slides = data
        else:
            raise SceneLoadError("snapshot must contain 'slides' or 'elements'")
        if not isinstance(raw_slides, list):
            raise SceneLoadError("'slides' must be a list")

        slides = []
        for index, raw in enumerate(raw_slides):
            slide = self._parse_slide(raw)
            if slide is None:
                if self.logger:
                    self.logger.debug(f"Ignoring slide {index}: missing or invalid viewport")
                continue
            slides.append(slide)
        return slides

    def _parse_slide(self, raw: Any) -> Optional[SceneSlide]:
        if not isinstance(raw, dict):
            return None
        box = _parse_box(raw.get("viewport"))
        if box is None:
            return None
        sizing = raw.get("sizing")
        elements = []
        for raw_element in raw.get("elements") or []:
            element = self._parse_element(raw_element)
            if element is not None:
                elements.append(element)
        return SceneSlide(
            viewport=ViewportRect(*box),
            view_box=raw.get("viewBox"),
            sizing_mode=SizingMode.parse(sizing) if sizing else None,
            elements=elements,
        )

    def _parse_element(self, raw: Any) -> Optional[SceneElement]:
        if not isinstance(raw, dict) or not raw.get("tag"):
            return None
        rect_box = _parse_box(raw.get("rect"))
        bbox_box = _parse_box(raw.get("bbox"))
        attributes = raw.get("attributes")
        if not isinstance(attributes, dict):
            attributes = {}
        return SceneElement(
            tag=str(raw["tag"]).strip().lower(),
            rect=ElementRect(*rect_box, RectSpace.SCREEN) if rect_box else None,
            name=raw.get("name") or None,
            class_names=_class_names(raw.get("className")),
            bbox=BoundingBox(*bbox_box) if bbox_box else None,
            ctm=as_ctm(raw.get("ctm")),
            style=StyleSnapshot.from_mapping(raw.get("style")),
            attributes={str(k): str(v) for k, v in attributes.items() if v is not None},
            text=str(raw.get("text") or ""),
            html=str(raw.get("html") or ""),
            hidden=bool(raw.get("hidden", False)),
        )

    def extract_elements(self, slide: SceneSlide) -> List[SceneElement]:
        """Elements that participate in export, in document order"""
        result = []
        for element in slide.elements:
            if element.tag not in EXPORTED_TAGS:
                continue
            if element.tag == "g" and not element.name:
                continue
            if self.should_skip_element(element) or self.is_hidden(element):
                continue
            result.append(element)
        return result

    def should_skip_element(self, element: SceneElement) -> bool:
        """Class-based exclusion (no-export, hide-on-export, hide-on-presentation in preview)"""
        classes = set(element.class_names)
        if classes.intersection(self.config.excluded_classes):
            return True
        return "hide-on-presentation" in classes and self.config.presentation_mode

    @staticmethod
    def is_hidden(element: SceneElement) -> bool:
        """Hidden flag (set by the collector for hidden ancestors), display:none, visibility:hidden or opacity 0"""
        if element.hidden:
            return True
        style = element.style
        if (style.display or "").strip().lower() == "none":
            return True
        if (style.visibility or "").strip().lower() == "hidden":
            return True
        opacity = parse_px(style.opacity)
        return opacity == 0
