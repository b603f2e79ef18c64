from __future__ import annotations

"""
Tools package for NeonCover.

Deterministic helpers used by the editor session:
- image_ops: Pillow colour parsing, background filters, layer compositing
- exporters: export flow and downloadable artifacts
"""

from neoncover.tools import image_ops, exporters

__all__ = [
    "image_ops",
    "exporters",
]
