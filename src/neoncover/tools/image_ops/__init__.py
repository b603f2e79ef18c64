from __future__ import annotations

from neoncover.tools.image_ops import colors, compose_layers, filters

__all__ = [
    "colors",
    "compose_layers",
    "filters",
]
