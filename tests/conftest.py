"""
Shared fixtures for NeonCover tests.

Provides in-memory PNG factories, a resource manager, a layer store and fake renderers.
"""
import asyncio
import io

import pytest
from PIL import Image

from neoncover.editor.resources import ResourceManager
from neoncover.editor.store import LayerStore
from neoncover.schemas.resource_schema import UploadedFile


def _png(width=200, height=100, color=(255, 0, 0, 255)):
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


class RecordingRenderer:
    """Fake renderer: remembers what it was asked to paint and returns a canvas-sized PNG."""

    def __init__(self, store=None, delay=0.0):
        self.store = store
        self.delay = delay
        self.snapshots = []
        self.selection_seen = []

    async def render(self, snapshot):
        if self.store is not None:
            self.selection_seen.append(self.store.state.selected_layer_id)
        self.snapshots.append(snapshot)
        if self.delay:
            await asyncio.sleep(self.delay)
        return _png(int(snapshot.canvas_size.width), int(snapshot.canvas_size.height), (0, 0, 0, 255))


class FailingRenderer:
    async def render(self, snapshot):
        raise RuntimeError("backend exploded")


@pytest.fixture
def make_png():
    return _png


@pytest.fixture
def make_upload():
    def _upload(width=200, height=100, media_type="image/png", filename="pic.png", color=(255, 0, 0, 255)):
        return UploadedFile(filename=filename, media_type=media_type, data=_png(width, height, color))
    return _upload


@pytest.fixture
def resources():
    return ResourceManager()


@pytest.fixture
def store(resources):
    return LayerStore(resources=resources)


@pytest.fixture
def recording_renderer():
    return RecordingRenderer


@pytest.fixture
def failing_renderer():
    return FailingRenderer()
