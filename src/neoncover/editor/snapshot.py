from __future__ import annotations

from neoncover.schemas.editor_schema import EditorState, RenderSnapshot


def build_snapshot(state: EditorState, scale: float = 1.0) -> RenderSnapshot:
    """
    Deep-copied, read-only view of `state` for a renderer.
    Layers keep their list order; a selection pointing at a missing layer becomes None.
    """
    live_ids = {layer.id for layer in state.layers}
    selected = state.selected_layer_id if state.selected_layer_id in live_ids else None

    return RenderSnapshot(
        canvas_size=state.canvas_size.model_copy(),
        scale=scale,
        background=state.background.model_copy(deep=True),
        layers=[layer.model_copy(deep=True) for layer in state.layers],
        selected_layer_id=selected,
    )
