from __future__ import annotations

from neoncover.tools.exporters import artifacts, export_flow

__all__ = [
    "artifacts",
    "export_flow",
]
