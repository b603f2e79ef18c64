from __future__ import annotations

import re
from typing import Tuple

from PIL import ImageColor

RGBA = Tuple[int, int, int, int]

# CSS rgba() with a fractional alpha, e.g. "rgba(0,0,0,0.8)". Pillow only reads 0-255 alphas.
_CSS_RGBA = re.compile(
    r"^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d*\.?\d+)\s*\)$",
    re.IGNORECASE,
)


def parse_color(value: str) -> RGBA:
    """
    CSS-ish colour string -> RGBA tuple.
    Accepts hex (#rgb, #rrggbb, #rrggbbaa), named colours, rgb() and rgba() with a 0..1 alpha.
    Raises ValueError for anything else.
    """
    s = value.strip()
    m = _CSS_RGBA.match(s)
    if m:
        r, g, b = (min(255, int(m.group(i))) for i in (1, 2, 3))
        alpha = float(m.group(4))
        if alpha <= 1.0:
            alpha *= 255
        return r, g, b, max(0, min(255, int(round(alpha))))
    return ImageColor.getcolor(s, "RGBA")  # type: ignore[return-value]


def with_opacity(color: RGBA, opacity: float) -> RGBA:
    r, g, b, a = color
    return r, g, b, max(0, min(255, int(round(a * opacity))))
