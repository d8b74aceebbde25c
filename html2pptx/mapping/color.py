"""
Color sampling module

Resolves arbitrary CSS color syntax (named, hex, rgb()/rgba(), hsl()) to absolute RGBA
"""
import re
from typing import Optional, Tuple

from PIL import ImageColor

RGBA = Tuple[int, int, int, int]

# rgb()/rgba() with comma or space syntax and an optional alpha ("/ 50%", ", 0.5")
_RGB_FUNC = re.compile(
    r"^rgba?\(\s*"
    r"([+-]?[\d.]+%?)\s*[,\s]\s*([+-]?[\d.]+%?)\s*[,\s]\s*([+-]?[\d.]+%?)"
    r"(?:\s*[,/]\s*([+-]?[\d.]+%?))?\s*\)$",
    re.IGNORECASE,
)


def _channel(token: str) -> int:
    if token.endswith("%"):
        value = float(token[:-1]) * 255.0 / 100.0
    else:
        value = float(token)
    return int(max(0, min(255, round(value))))


def _alpha(token: Optional[str]) -> int:
    if token is None:
        return 255
    if token.endswith("%"):
        value = float(token[:-1]) / 100.0
    else:
        value = float(token)
    return int(max(0, min(255, round(value * 255))))


class ColorSampler:
    """Stateless color resolution service"""

    def sample(self, css_color: Optional[str]) -> Optional[RGBA]:
        """
        Resolve a CSS color

        Returns:
            (r, g, b, a) with channels in 0..255, or None when unparsable
        """
        raise NotImplementedError


class PillowColorSampler(ColorSampler):
    """ColorSampler backed by Pillow's ImageColor table"""

    def sample(self, css_color: Optional[str]) -> Optional[RGBA]:
        if not css_color:
            return None
        value = css_color.strip()
        low = value.lower()
        if not low or low == "none":
            return None
        if low == "transparent":
            return (0, 0, 0, 0)

        # Browsers serialize alpha as 0..1 ("rgba(0, 0, 0, 0.5)"), which ImageColor does not accept
        match = _RGB_FUNC.match(value)
        if match:
            try:
                r, g, b = (_channel(match.group(i)) for i in (1, 2, 3))
                return (r, g, b, _alpha(match.group(4)))
            except ValueError:
                return None

        try:
            rgba = ImageColor.getcolor(value, "RGBA")
        except ValueError:
            return None
        return tuple(int(c) for c in rgba)  # type: ignore[return-value]
