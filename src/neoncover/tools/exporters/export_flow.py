from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from neoncover.app.errors import ExportError
from neoncover.editor.constants import EXPORT_FILENAME_PREFIX
from neoncover.editor.snapshot import build_snapshot
from neoncover.editor.store import LayerStore
from neoncover.schemas.editor_schema import RenderSnapshot
from neoncover.schemas.export_schema import ExportArtifact
from neoncover.tools.exporters.artifacts import build_artifact

logger = logging.getLogger(__name__)


class CompositionRenderer(Protocol):
    """Turns a snapshot into PNG bytes sized exactly to the snapshot's canvas."""

    async def render(self, snapshot: RenderSnapshot) -> bytes: ...


async def export_composition(
    store: LayerStore,
    renderer: CompositionRenderer,
    *,
    scale: float = 1.0,
    prefix: str = EXPORT_FILENAME_PREFIX,
    settle_seconds: float = 0.0,
    millis: Optional[int] = None,
) -> ExportArtifact:
    """
    Export flow:
    1. clear the selection so no selection chrome ends up in the image
    2. yield once (or `settle_seconds`) so the renderer sees the cleared state
    3. render the snapshot and wrap the PNG as an artifact

    Layers are never touched. On failure the selection stays cleared and ExportError is raised.
    """
    store.select_layer(None)
    await asyncio.sleep(settle_seconds)

    snapshot = build_snapshot(store.state, scale)
    logger.info("export started with %d layer(s)", len(snapshot.layers))

    try:
        data = await renderer.render(snapshot)
    except ExportError:
        raise
    except Exception as e:
        logger.error("renderer failed", exc_info=True)
        raise ExportError("renderer_failure", "Could not export image. Please try again.") from e

    canvas = (int(snapshot.canvas_size.width), int(snapshot.canvas_size.height))
    artifact = build_artifact(
        data,
        expected_size=canvas,
        prefix=prefix,
        millis=millis,
        meta={"layer_count": len(snapshot.layers)},
    )
    logger.info("export finished: %s (%d bytes)", artifact.filename, artifact.byte_size)
    return artifact
