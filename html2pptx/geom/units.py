"""
Unit conversion module

CSS pixel / point / EMU conversion and numeric parsing helpers shared by the resolvers
"""
import math
import re
import sys
from typing import Optional, Union

PX_PER_IN = 96.0
PT_PER_IN = 72.0
EMU_PER_IN = 914400
EMU_PER_PT = 12700
PX_TO_EMU = EMU_PER_IN / PX_PER_IN

# Nudge applied before rounding so that e.g. 2.4999999999 from float noise does not flip down
ROUND_EPSILON = sys.float_info.epsilon

# Leading number of a CSS value, parseFloat-style ("12px" -> 12, "1.5e2" -> 150, ".5em" -> 0.5)
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_px(value: Union[str, float, int, None]) -> Optional[float]:
    """
    Parse the leading number of a CSS length

    Args:
        value: CSS value ("12px", "3", 4.5) or None

    Returns:
        Finite float, or None when missing/unparsable/non-finite
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return None
    try:
        number = float(match.group(1))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def round_emu(value: Optional[float]) -> int:
    """Round half away from zero after an epsilon nudge; None/NaN/inf give 0."""
    if value is None or not math.isfinite(value):
        return 0
    value = value + ROUND_EPSILON
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def px_to_emu(px: Optional[float]) -> int:
    """Convert CSS pixels to EMU (rounded)"""
    if px is None or not math.isfinite(px):
        return 0
    return round_emu(px * PX_TO_EMU)


def px_to_pt(px: Optional[float]) -> float:
    """Convert CSS pixels to points (72/96)"""
    if px is None or not math.isfinite(px):
        return 0.0
    return px * PT_PER_IN / PX_PER_IN


def emu_to_pt(emu: float) -> float:
    return emu / EMU_PER_PT


def inches_to_emu(inches: float) -> int:
    return round_emu(inches * EMU_PER_IN)
