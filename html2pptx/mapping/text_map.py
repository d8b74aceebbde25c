"""
Text mapping module

Inline HTML fragments → text runs (bold/italic/underline/strike, line breaks) and
alignment-aware horizontal placement of text boxes
"""
import re
from typing import Dict, List, Optional

from lxml import etree
from lxml import html as lxml_html

from ..geom.units import round_emu
from ..model.intermediate import SlideMetrics, StyleSnapshot, TextRun
from .style_map import BOLD_WEIGHTS

# Child nodes that end the current line in PowerPoint
BREAK_TAGS = {"div", "p", "br"}

BOLD_TAGS = {"b", "strong"}
ITALIC_TAGS = {"i", "em"}
UNDERLINE_TAGS = {"u", "ins"}
STRIKE_TAGS = {"s", "strike", "del"}

BULLET_PREFIX = "•   "

_ATTRIBUTED_TAG = {
    tag: re.compile(rf"<{tag}\b([^>]*?)\s([^>]*)>")
    for tag in ("p", "div", "span", "font")
}
_STYLE_ATTR = re.compile(r' style="[^"]*"')


def normalize_entry(value: Optional[str]) -> str:
    """
    Strip markup that PowerPoint runs cannot carry

    Removes BEL characters, attributes on p/div/span/font tags and any inline style.
    """
    text = str(value or "").replace("\u0007", "")
    for tag, pattern in _ATTRIBUTED_TAG.items():
        text = pattern.sub(f"<{tag}>", text)
    return _STYLE_ATTR.sub("", text)


def _base_flags(style: Optional[StyleSnapshot]) -> Dict[str, bool]:
    if style is None:
        return {"bold": False, "italic": False, "underline": False, "strike": False}
    decoration = (style.text_decoration or "").lower()
    return {
        "bold": (style.font_weight or "").strip().lower() in BOLD_WEIGHTS,
        "italic": (style.font_style or "").strip().lower() == "italic",
        "underline": "underline" in decoration,
        "strike": "line-through" in decoration,
    }


def _flags_for_element(element, base: Dict[str, bool]) -> Dict[str, bool]:
    """Merge formatting implied by the element and its descendants' tags."""
    flags = dict(base)
    for node in element.iter():
        if not isinstance(node.tag, str):
            continue
        tag = node.tag.lower()
        if tag in BOLD_TAGS:
            flags["bold"] = True
        elif tag in ITALIC_TAGS:
            flags["italic"] = True
        elif tag in UNDERLINE_TAGS:
            flags["underline"] = True
        elif tag in STRIKE_TAGS:
            flags["strike"] = True
    return flags


def markup_to_runs(markup: Optional[str], fallback_style: Optional[StyleSnapshot] = None) -> List[TextRun]:
    """
    Convert an inline HTML fragment into text runs

    Args:
        markup: Inner HTML of the element
        fallback_style: Element style applied to bare text nodes

    Returns:
        List of TextRun (one per child node, tails as separate runs)
    """
    if not markup or not markup.strip():
        return []

    base = _base_flags(fallback_style)
    try:
        root = lxml_html.fromstring(f"<div>{normalize_entry(markup)}</div>")
    except (etree.ParserError, ValueError):
        return [TextRun(text=markup, **base)]

    runs: List[TextRun] = []
    if root.text:
        runs.append(TextRun(text=root.text, **base))
    for child in root:
        if isinstance(child.tag, str):
            tag = child.tag.lower()
            runs.append(TextRun(
                text=child.text_content(),
                break_line=tag in BREAK_TAGS,
                **_flags_for_element(child, base),
            ))
        if child.tail:
            runs.append(TextRun(text=child.tail, **base))
    return runs


def plain_text(markup: Optional[str]) -> str:
    """Text content of a fragment, trimmed"""
    return "".join(run.text for run in markup_to_runs(markup)).strip()


def align_x(align: str, box_width: int, metrics: SlideMetrics) -> int:
    """
    Horizontal position of a text box of box_width inside metrics

    Center/right aligned text is re-anchored so a wider box keeps the text
    where the source rendered it.
    """
    if align == "center":
        return round_emu(metrics.x + metrics.w / 2 - box_width / 2)
    if align == "right":
        return metrics.x + metrics.w - box_width
    return metrics.x
