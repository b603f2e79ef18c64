from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from neoncover.app.errors import ExportError, LoadError, SessionClosedError
from neoncover.app.settings import Settings
from neoncover.core.ids import new_session_id
from neoncover.editor.constants import INITIAL_TEXT_LAYER
from neoncover.editor.interaction import DragController, PointerCapture
from neoncover.editor.resources import ResourceManager
from neoncover.editor.snapshot import build_snapshot
from neoncover.editor.store import LayerStore
from neoncover.llms.providers.gemini_client import GeminiTitleClient
from neoncover.llms.title_suggestions import suggest_titles
from neoncover.schemas.editor_schema import Background, EditorState, RenderSnapshot
from neoncover.schemas.export_schema import ExportArtifact
from neoncover.schemas.layer_schema import ImageLayer, TextLayer
from neoncover.schemas.resource_schema import UploadedFile
from neoncover.tools.exporters.artifacts import save_artifact
from neoncover.tools.exporters.export_flow import CompositionRenderer, export_composition
from neoncover.tools.image_ops.compose_layers import PillowRenderer

logger = logging.getLogger(__name__)


class EditorSession:
    """
    One editing session: owns the EditorState and every resource bound to it.

    Wires the LayerStore, ResourceManager, DragController and a renderer together,
    runs the upload and export flows, and releases everything on teardown.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        state: Optional[EditorState] = None,
        resources: Optional[ResourceManager] = None,
        renderer: Optional[CompositionRenderer] = None,
        title_client: Optional[GeminiTitleClient] = None,
        capture: Optional[PointerCapture] = None,
    ):
        self.settings = settings or Settings()
        self.session_id = new_session_id()
        self.resources = resources or ResourceManager(max_bytes=self.settings.max_upload_bytes)
        self.store = LayerStore(state, self.resources, strict=self.settings.strict_store)
        self.drag = DragController(self.store, margin=self.settings.canvas_margin, capture=capture)
        self.renderer: CompositionRenderer = renderer or PillowRenderer(self.resources)
        self.title_client = title_client
        self._exporting = False
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "EditorSession":
        """Session with a Gemini title client when an API key is configured."""
        if settings.gemini_api_key and "title_client" not in kwargs:
            kwargs["title_client"] = GeminiTitleClient(
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
            )
        return cls(settings, **kwargs)

    # ---------- State ----------
    @property
    def state(self) -> EditorState:
        return self.store.state

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> RenderSnapshot:
        return build_snapshot(self.store.state, self.drag.scale)

    def seed_initial_layer(self) -> TextLayer:
        """Add the "NEON COVER" title a fresh cover starts with."""
        style = {k: v for k, v in INITIAL_TEXT_LAYER.items() if k != "content"}
        return self.store.add_text_layer(INITIAL_TEXT_LAYER["content"], style=style)

    # ---------- Uploads ----------
    async def add_image_from_upload(self, upload: UploadedFile) -> ImageLayer:
        """
        Validate, decode and add an uploaded image as the topmost layer.
        LoadError and SessionClosedError propagate to the caller; the state is untouched then.
        """
        handle = await self._acquire(upload)
        try:
            return self.store.add_image_layer(handle)
        except Exception:
            self.resources.release(handle)
            raise

    async def set_background_from_upload(self, upload: UploadedFile) -> Background:
        """Replace the background image; the previous one is released."""
        handle = await self._acquire(upload)
        background = self.store.update_background({"resource_handle": handle})
        if background.resource_handle != handle:
            self.resources.release(handle)
        return background

    async def _acquire(self, upload: UploadedFile):
        """
        Decode an upload into a handle. Raises SessionClosedError when the session is
        (or becomes, while decoding) torn down; no handle outlives teardown.
        """
        if self._closed:
            raise SessionClosedError(f"Session {self.session_id} is closed")
        try:
            handle = await self.resources.acquire_async(upload)
        except LoadError as e:
            logger.warning(
                "upload %s rejected (%s): %s", upload.filename, e.kind, e.message,
                extra={"session_id": self.session_id},
            )
            raise
        if self._closed:
            self.resources.release(handle)
            raise SessionClosedError(f"Session {self.session_id} was closed during upload")
        return handle

    # ---------- Export ----------
    async def export(self) -> ExportArtifact:
        """
        Render the composition to a PNG artifact. A second export while one is
        running raises ExportError("busy").
        """
        if self._exporting:
            raise ExportError("busy", "An export is already in progress.")
        self._exporting = True
        try:
            return await export_composition(
                self.store,
                self.renderer,
                scale=self.drag.scale,
                prefix=self.settings.export_prefix,
                settle_seconds=self.settings.export_settle_seconds,
            )
        finally:
            self._exporting = False

    async def export_to_dir(self, directory: Optional[Union[str, Path]] = None) -> Path:
        artifact = await self.export()
        path = save_artifact(artifact, directory or self.settings.export_dir)
        logger.info("export saved to %s", path, extra={"session_id": self.session_id})
        return path

    # ---------- Titles ----------
    def suggest_titles(self, topic: str) -> List[str]:
        return suggest_titles(topic, self.title_client)

    # ---------- Teardown ----------
    def teardown(self) -> int:
        """
        Release every resource handle and empty the state. Safe to call twice.
        Returns the number of handles released by this call.
        """
        if self._closed:
            return 0
        self.drag.capture_lost()
        released = self.store.clear()
        released += self.resources.close()
        self._closed = True
        logger.info("session torn down, %d resource(s) released", released, extra={"session_id": self.session_id})
        return released

    def __enter__(self) -> "EditorSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()
