from __future__ import annotations

from typing import Any, Dict

from neoncover.schemas.editor_schema import CANVAS_HEIGHT, CANVAS_WIDTH

CANVAS_SIZE = {"width": CANVAS_WIDTH, "height": CANVAS_HEIGHT}

# Breathing room around the scaled canvas inside its container.
DEFAULT_CANVAS_MARGIN = 0.95

MAX_IMAGE_BYTES = 10 * 1024 * 1024

EXPORT_FILENAME_PREFIX = "neon-cover"

# Approximate footprint of a fresh text layer; used to centre it on creation.
DEFAULT_TEXT_FOOTPRINT = {"width": 400.0, "height": 100.0}

DEFAULT_SHADOW: Dict[str, Any] = {
    "blur": 10.0,
    "color": "rgba(0,0,0,0.8)",
    "offset_x": 5.0,
    "offset_y": 5.0,
}

DEFAULT_TEXT_LAYER: Dict[str, Any] = {
    "font_size": 100.0,
    "font_family": "Inter",
    "color": "#ffffff",
    "font_weight": 800,
    "rotation": 0.0,
    "opacity": 1.0,
    "shadow": DEFAULT_SHADOW,
    "stroke_color": "#000000",
    "stroke_width": 0.0,
    "uppercase_display": True,
}

DEFAULT_IMAGE_LAYER: Dict[str, Any] = {
    "width": 400.0,
    "rotation": 0.0,
    "opacity": 1.0,
    "shadow": None,
}

# The cover a fresh session opens with.
INITIAL_TEXT_LAYER: Dict[str, Any] = {
    "content": "NEON COVER",
    "position": {"x": 600.0, "y": 400.0},
    "font_size": 120.0,
    "font_family": "Oswald",
    "color": "#00ffff",
    "font_weight": 800,
    "rotation": 0.0,
    "opacity": 1.0,
    "shadow": {"blur": 20.0, "color": "#000000", "offset_x": 8.0, "offset_y": 8.0},
    "stroke_color": "#000000",
    "stroke_width": 0.0,
    "uppercase_display": True,
}

FILTER_RANGES: Dict[str, Dict[str, float]] = {
    "brightness": {"min": 0, "max": 200, "default": 100},
    "contrast": {"min": 0, "max": 200, "default": 100},
    "saturate": {"min": 0, "max": 200, "default": 100},
    "blur": {"min": 0, "max": 20, "default": 0},
    "overlay_opacity": {"min": 0, "max": 1, "default": 0.2},
}

LAYER_RANGES: Dict[str, Dict[str, float]] = {
    "rotation": {"min": -180, "max": 180, "default": 0},
    "opacity": {"min": 0, "max": 1, "default": 1},
    "font_size": {"min": 20, "max": 300, "default": 100},
    "stroke_width": {"min": 0, "max": 20, "default": 0},
    "shadow_blur": {"min": 0, "max": 50, "default": 10},
    "image_width": {"min": 50, "max": 1000, "default": 400},
    "border_width": {"min": 0, "max": 20, "default": 0},
}


def clamp_to_range(name: str, value: float) -> float:
    """
    Clamp a control value to its documented range.
    For use by controls before they dispatch an update; the store never calls this.
    Raises KeyError for unknown names.
    """
    bounds = LAYER_RANGES.get(name) or FILTER_RANGES[name]
    return max(bounds["min"], min(bounds["max"], value))
