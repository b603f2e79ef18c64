from __future__ import annotations

from typing import Annotated, FrozenSet, Literal, Optional, Type, Union
from pydantic import BaseModel, ConfigDict, Field

from neoncover.schemas.resource_schema import ResourceHandle

# -----------------------------
# Core Types
# -----------------------------

FontFamily = Literal["Inter", "Oswald", "Playfair Display", "Roboto Mono"]

FontWeight = Literal[300, 400, 600, 800]

LayerType = Literal["text", "image"]

# -----------------------------
# Geometry
# -----------------------------

class Point(BaseModel):
    """Canvas-space point. For layers this is the top-left corner."""
    model_config = ConfigDict(extra="forbid")

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(x=self.x - other.x, y=self.y - other.y)


class Size(BaseModel):
    model_config = ConfigDict(extra="forbid")

    width: float
    height: float


class Shadow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    blur: float = 10.0
    color: str = "#000000"
    offset_x: float = 5.0
    offset_y: float = 5.0

# -----------------------------
# Layers
# -----------------------------

# Numeric fields carry no range constraints on purpose: range clamping belongs to the
# controls (see editor.constants.clamp_to_range) and the store keeps values verbatim.

class LayerBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    position: Point = Field(default_factory=Point)
    rotation: float = 0.0               # degrees, [-180, 180]
    opacity: float = 1.0                # [0, 1]
    shadow: Optional[Shadow] = None


class TextLayer(LayerBase):
    type: Literal["text"] = "text"

    content: str = ""
    font_size: float = 100.0
    font_family: FontFamily = "Inter"
    font_weight: FontWeight = 800
    color: str = "#ffffff"
    uppercase_display: bool = True
    stroke_width: float = 0.0
    stroke_color: str = "#000000"
    background_fill: Optional[str] = None

    @property
    def display_text(self) -> str:
        """Text as painted; uppercase_display never rewrites `content`."""
        return self.content.upper() if self.uppercase_display else self.content


class ImageLayer(LayerBase):
    type: Literal["image"] = "image"

    resource_handle: ResourceHandle
    width: float
    height: float
    border_width: Optional[float] = None
    border_color: Optional[str] = None


Layer = Annotated[Union[TextLayer, ImageLayer], Field(discriminator="type")]

# Fields a partial update may touch. `id` and `type` are immutable after creation.
_IMMUTABLE_FIELDS = frozenset({"id", "type"})


def patchable_fields(layer_cls: Type[LayerBase]) -> FrozenSet[str]:
    return frozenset(layer_cls.model_fields) - _IMMUTABLE_FIELDS


TEXT_FIELDS = patchable_fields(TextLayer)
IMAGE_FIELDS = patchable_fields(ImageLayer)
COMMON_FIELDS = patchable_fields(LayerBase)
