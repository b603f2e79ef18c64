from __future__ import annotations

"""
Pydantic models shared across the editor:
- layers (text/image tagged union) and geometry primitives
- background, editor state and render snapshot
- resource handles and uploads
- export artifacts
"""

from neoncover.schemas import editor_schema, export_schema, layer_schema, resource_schema

__all__ = [
    "editor_schema",
    "export_schema",
    "layer_schema",
    "resource_schema",
]
