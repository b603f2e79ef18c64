from __future__ import annotations

"""
Editor core:
- geometry: fit scale, centring, screen-to-canvas deltas
- store: the LayerStore owning the EditorState
- interaction: Idle/Dragging pointer state machine
- resources: decoded bitmap lifecycle
- snapshot: read-only render views
"""

from neoncover.editor import constants, geometry, interaction, resources, snapshot, store

__all__ = [
    "constants",
    "geometry",
    "interaction",
    "resources",
    "snapshot",
    "store",
]
