"""
Font replacement module

Provides the fallback font family and configuration-driven font replacement
"""
from typing import Optional

from .config import ConversionConfig, default_config

# Used when the computed font-family is empty (e.g. SVG groups without text)
DEFAULT_FONT_FAMILY = "Arial"


def replace_font(font_family: Optional[str], config: Optional[ConversionConfig] = None) -> str:
    """
    Replace font (based on configuration)

    Args:
        font_family: Resolved font family name (may be empty)
        config: ConversionConfig instance (uses default_config if None)

    Returns:
        Replacement from config.font_replacements, the original name, or DEFAULT_FONT_FAMILY
    """
    if not font_family:
        return DEFAULT_FONT_FAMILY
    replacements = (config or default_config).font_replacements
    return replacements.get(font_family, font_family)
