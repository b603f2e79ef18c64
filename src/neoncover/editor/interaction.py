from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

from neoncover.editor.constants import DEFAULT_CANVAS_MARGIN
from neoncover.editor.geometry import compute_fit_scale, screen_delta_to_canvas_delta
from neoncover.editor.store import LayerStore
from neoncover.schemas.layer_schema import Layer, Point, Size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    """A drag in progress. Positions are captured once, at pointer-down."""
    layer_id: str
    pointer_origin: Point
    layer_origin: Point
    pointer_id: Optional[int] = None


DragState = Union[Idle, Dragging]

IDLE = Idle()


class PointerCapture(Protocol):
    """Host hook for routing a pointer's events to the dragged element."""

    def capture(self, pointer_id: Optional[int]) -> None: ...

    def release(self, pointer_id: Optional[int]) -> None: ...

    def on_capture_lost(self, callback: Callable[[], None]) -> None: ...


class DragController:
    """
    Two-state drag machine (Idle / Dragging) turning pointer events into store updates.

    Positions are always recomputed from the values captured at pointer-down plus the
    cumulative pointer delta, so long drags do not accumulate rounding drift.
    """

    def __init__(
        self,
        store: LayerStore,
        *,
        scale: float = 1.0,
        margin: float = DEFAULT_CANVAS_MARGIN,
        capture: Optional[PointerCapture] = None,
    ):
        self.store = store
        self.margin = margin
        self.capture = capture
        self._state: DragState = IDLE
        self._scale = 1.0
        self.set_scale(scale)
        if capture is not None:
            capture.on_capture_lost(self.capture_lost)

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._state, Dragging)

    # ---------- Scale ----------
    @property
    def scale(self) -> float:
        return self._scale

    def set_scale(self, scale: float) -> None:
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self._scale = scale

    def resize_container(self, container: Size) -> float:
        """Recompute the display scale after the hosting container changed size."""
        self._scale = compute_fit_scale(container, self.store.state.canvas_size, self.margin)
        return self._scale

    # ---------- Transitions ----------
    def pointer_down(self, layer_id: str, pointer: Point, pointer_id: Optional[int] = None) -> DragState:
        if isinstance(self._state, Dragging):
            # Single-pointer model: a second press means the first release was missed.
            self._end_drag()

        self.store.select_layer(layer_id)
        layer = self.store.get_layer(layer_id)
        if layer is None:
            return self._state

        self._state = Dragging(
            layer_id=layer_id,
            pointer_origin=pointer,
            layer_origin=layer.position,
            pointer_id=pointer_id,
        )
        if self.capture is not None:
            self.capture.capture(pointer_id)
        logger.debug("drag started", extra={"layer_id": layer_id})
        return self._state

    def pointer_down_background(self) -> DragState:
        """Press on empty canvas: clear the selection, never start a drag."""
        self.store.select_layer(None)
        return self._state

    def pointer_move(self, pointer: Point) -> Optional[Layer]:
        state = self._state
        if not isinstance(state, Dragging):
            return None

        if self.store.get_layer(state.layer_id) is None:
            # Layer deleted mid-drag.
            self._end_drag()
            return None

        delta = screen_delta_to_canvas_delta(pointer - state.pointer_origin, self._scale)
        return self.store.update_layer(state.layer_id, {"position": state.layer_origin + delta})

    def pointer_up(self) -> DragState:
        self._end_drag()
        return self._state

    def capture_lost(self) -> None:
        """Capture-loss signal (window blur, cancelled pointer): always back to Idle."""
        if isinstance(self._state, Dragging):
            logger.debug("pointer capture lost", extra={"layer_id": self._state.layer_id})
        self._state = IDLE

    def _end_drag(self) -> None:
        state = self._state
        self._state = IDLE
        if isinstance(state, Dragging) and self.capture is not None:
            self.capture.release(state.pointer_id)
