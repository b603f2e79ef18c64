from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from neoncover.schemas.layer_schema import Layer, Size
from neoncover.schemas.resource_schema import ResourceHandle

FitMode = Literal["cover", "contain"]

CANVAS_WIDTH = 1920
CANVAS_HEIGHT = 1080


def default_canvas_size() -> Size:
    return Size(width=CANVAS_WIDTH, height=CANVAS_HEIGHT)


class Background(BaseModel):
    """Base image plus its filter stack and colour overlay, painted beneath every layer."""
    model_config = ConfigDict(extra="forbid")

    resource_handle: Optional[ResourceHandle] = None
    fit_mode: FitMode = "cover"
    brightness: float = 100.0           # percent, [0, 200]
    contrast: float = 100.0             # percent, [0, 200]
    saturate: float = 100.0             # percent, [0, 200]
    blur: float = 0.0                   # px, [0, 20]
    overlay_color: str = "#000000"
    overlay_opacity: float = 0.2        # [0, 1]


class EditorState(BaseModel):
    """
    Single source of truth for one editing session.
    `layers` order is paint order: later entries are drawn on top.
    """
    model_config = ConfigDict(extra="forbid")

    layers: List[Layer] = Field(default_factory=list)
    selected_layer_id: Optional[str] = None
    background: Background = Field(default_factory=Background)
    canvas_size: Size = Field(default_factory=default_canvas_size)


class RenderSnapshot(BaseModel):
    """
    Read-only view handed to a Composition Renderer.
    The renderer paints `background` first, then `layers` strictly in list order.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    canvas_size: Size
    scale: float
    background: Background
    layers: List[Layer] = Field(default_factory=list)
    selected_layer_id: Optional[str] = None
