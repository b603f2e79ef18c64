from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Set

from pydantic import ValidationError

from neoncover.app.errors import InvalidLayerUpdateError, LayerNotFoundError
from neoncover.core.ids import new_layer_id
from neoncover.editor.constants import DEFAULT_IMAGE_LAYER, DEFAULT_TEXT_FOOTPRINT, DEFAULT_TEXT_LAYER
from neoncover.editor.geometry import center_position, height_for_width
from neoncover.editor.resources import ResourceManager
from neoncover.schemas.editor_schema import Background, EditorState
from neoncover.schemas.layer_schema import (
    IMAGE_FIELDS,
    TEXT_FIELDS,
    ImageLayer,
    Layer,
    Size,
    TextLayer,
)
from neoncover.schemas.resource_schema import ResourceHandle

logger = logging.getLogger(__name__)

_BACKGROUND_FIELDS = frozenset(Background.model_fields)

# Assigned by the store on creation, never taken from caller-supplied style.
_CREATION_ONLY_FIELDS = frozenset({"id", "type"})


class LayerStore:
    """
    Owns one EditorState and is the only code that mutates it.

    Every operation is synchronous and leaves a single consistent state behind.
    Stale ids (a layer deleted while an update was in flight) are silent no-ops unless
    the store was built with strict=True, in which case they raise.
    """

    def __init__(
        self,
        state: Optional[EditorState] = None,
        resources: Optional[ResourceManager] = None,
        *,
        strict: bool = False,
    ):
        self._state = state if state is not None else EditorState()
        self.resources = resources or ResourceManager()
        self.strict = strict

    @property
    def state(self) -> EditorState:
        return self._state

    # ---------- Reads ----------
    def get_layer(self, layer_id: Optional[str]) -> Optional[Layer]:
        idx = self._index_of(layer_id)
        return None if idx is None else self._state.layers[idx]

    def selected_layer(self) -> Optional[Layer]:
        """The selected layer, or None when nothing (or a stale id) is selected."""
        return self.get_layer(self._state.selected_layer_id)

    def layer_ids(self) -> list[str]:
        return [layer.id for layer in self._state.layers]

    # ---------- Create ----------
    def add_text_layer(self, initial_text: str = "NEW TEXT", style: Optional[Mapping[str, Any]] = None) -> TextLayer:
        """
        Append a text layer with default styling, centred on the canvas, and select it.
        `style` overrides individual defaults (including `position`); `id` and `type` in it
        are ignored.
        """
        footprint = Size(**DEFAULT_TEXT_FOOTPRINT)
        overrides = {k: v for k, v in (style or {}).items() if k not in _CREATION_ONLY_FIELDS}
        fields: Dict[str, Any] = {
            **DEFAULT_TEXT_LAYER,
            "content": initial_text,
            "position": center_position(self._state.canvas_size, footprint),
            **overrides,
        }
        layer = TextLayer(id=self._fresh_id(), **fields)
        return self._append(layer)

    def add_image_layer(
        self,
        resource_handle: ResourceHandle,
        natural_width: Optional[float] = None,
        natural_height: Optional[float] = None,
    ) -> ImageLayer:
        """
        Append an image layer at the default width, height taken from the source aspect
        ratio, centred on the canvas, and select it.
        """
        natural_width = natural_width if natural_width is not None else resource_handle.width
        natural_height = natural_height if natural_height is not None else resource_handle.height
        if natural_width <= 0 or natural_height <= 0:
            raise ValueError("natural image size must be positive")

        width = DEFAULT_IMAGE_LAYER["width"]
        height = height_for_width(width, natural_width / natural_height)
        layer = ImageLayer(
            id=self._fresh_id(),
            resource_handle=resource_handle,
            position=center_position(self._state.canvas_size, Size(width=width, height=height)),
            width=width,
            height=height,
            rotation=DEFAULT_IMAGE_LAYER["rotation"],
            opacity=DEFAULT_IMAGE_LAYER["opacity"],
            shadow=DEFAULT_IMAGE_LAYER["shadow"],
        )
        return self._append(layer)

    # ---------- Mutate ----------
    def update_layer(self, layer_id: str, patch: Mapping[str, Any]) -> Optional[Layer]:
        """
        Merge `patch` into the layer with `layer_id`.

        Returns the updated layer, or None when nothing changed: unknown id, a field that
        belongs to the other layer variant (or to no variant), or a value of the wrong type.
        Numeric ranges are not checked.
        """
        idx = self._index_of(layer_id)
        if idx is None:
            return self._stale(layer_id, "update")

        layer = self._state.layers[idx]
        allowed = TEXT_FIELDS if isinstance(layer, TextLayer) else IMAGE_FIELDS
        foreign = set(patch) - allowed
        if foreign:
            return self._reject(layer_id, f"fields {sorted(foreign)} not valid for {layer.type} layer")

        try:
            updated = type(layer).model_validate({**layer.model_dump(), **patch})
        except ValidationError as e:
            return self._reject(layer_id, f"invalid values: {e.error_count()} error(s)")

        self._state.layers[idx] = updated
        if isinstance(layer, ImageLayer) and layer.resource_handle != updated.resource_handle:
            self._release_if_unreferenced(layer.resource_handle)
        return updated

    def resize_image_layer(self, layer_id: str, width: float) -> Optional[ImageLayer]:
        """Set an image layer's width and rescale its height to keep the current ratio."""
        layer = self.get_layer(layer_id)
        if layer is None:
            return self._stale(layer_id, "resize")
        if not isinstance(layer, ImageLayer):
            return self._reject(layer_id, "resize applies to image layers only")
        ratio = layer.height / layer.width
        return self.update_layer(layer_id, {"width": width, "height": width * ratio})

    def delete_layer(self, layer_id: str) -> bool:
        idx = self._index_of(layer_id)
        if idx is None:
            self._stale(layer_id, "delete")
            return False

        layer = self._state.layers.pop(idx)
        if self._state.selected_layer_id == layer_id:
            self._state.selected_layer_id = None
        if isinstance(layer, ImageLayer):
            self._release_if_unreferenced(layer.resource_handle)
        logger.info("deleted %s layer", layer.type, extra={"layer_id": layer_id})
        return True

    def select_layer(self, layer_id: Optional[str]) -> None:
        # Not validated: readers resolve a stale selection to "nothing selected".
        self._state.selected_layer_id = layer_id

    def update_background(self, patch: Mapping[str, Any]) -> Background:
        """
        Merge `patch` into the background. Replacing or clearing `resource_handle`
        releases the previous handle. Unknown fields or mistyped values leave it unchanged.
        """
        current = self._state.background
        unknown = set(patch) - _BACKGROUND_FIELDS
        if unknown:
            self._reject(None, f"unknown background fields {sorted(unknown)}")
            return current

        try:
            updated = Background.model_validate({**current.model_dump(), **patch})
        except ValidationError as e:
            self._reject(None, f"invalid background values: {e.error_count()} error(s)")
            return current

        self._state.background = updated
        if current.resource_handle is not None and current.resource_handle != updated.resource_handle:
            self._release_if_unreferenced(current.resource_handle)
        return updated

    def clear(self) -> int:
        """Drop every layer and the background image, releasing their handles. Returns handles released."""
        handles = list(self._referenced_handles().values())
        self._state.layers.clear()
        self._state.selected_layer_id = None
        self._state.background = self._state.background.model_copy(update={"resource_handle": None})
        return sum(1 for h in handles if self.resources.release(h))

    # ---------- internals ----------
    def _append(self, layer: Layer) -> Layer:
        self._state.layers.append(layer)
        self._state.selected_layer_id = layer.id
        logger.info("added %s layer", layer.type, extra={"layer_id": layer.id})
        return layer

    def _fresh_id(self) -> str:
        existing = set(self.layer_ids())
        layer_id = new_layer_id()
        while layer_id in existing:
            layer_id = new_layer_id()
        return layer_id

    def _index_of(self, layer_id: Optional[str]) -> Optional[int]:
        if layer_id is None:
            return None
        for i, layer in enumerate(self._state.layers):
            if layer.id == layer_id:
                return i
        return None

    def _referenced_handles(self) -> Dict[str, ResourceHandle]:
        handles: Dict[str, ResourceHandle] = {}
        bg = self._state.background.resource_handle
        if bg is not None:
            handles[bg.handle_id] = bg
        for layer in self._state.layers:
            if isinstance(layer, ImageLayer):
                handles[layer.resource_handle.handle_id] = layer.resource_handle
        return handles

    def referenced_handle_ids(self) -> Set[str]:
        return set(self._referenced_handles())

    def _release_if_unreferenced(self, handle: ResourceHandle) -> None:
        if handle.handle_id in self._referenced_handles():
            return
        self.resources.release(handle)

    def _stale(self, layer_id: Optional[str], op: str) -> None:
        if self.strict:
            raise LayerNotFoundError(f"Layer not found: {layer_id}")
        logger.debug("%s ignored for missing layer", op, extra={"layer_id": layer_id})
        return None

    def _reject(self, layer_id: Optional[str], reason: str) -> None:
        if self.strict:
            raise InvalidLayerUpdateError(reason)
        logger.warning("update rejected: %s", reason, extra={"layer_id": layer_id})
        return None
