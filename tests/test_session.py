"""
Tests for EditorSession: upload flows, initial cover, export to disk and teardown.
"""
import asyncio
import re

import pytest

from neoncover.app.errors import LoadError, SessionClosedError
from neoncover.app.settings import Settings
from neoncover.schemas.resource_schema import UploadedFile
from neoncover.session.session_manager import EditorSession


@pytest.fixture
def session(recording_renderer):
    s = EditorSession(Settings(), renderer=recording_renderer())
    yield s
    s.teardown()


def test_seed_initial_layer(session):
    layer = session.seed_initial_layer()

    assert layer.content == "NEON COVER"
    assert layer.font_family == "Oswald"
    assert layer.font_size == 120
    assert layer.color == "#00ffff"
    assert (layer.position.x, layer.position.y) == (600, 400)
    assert layer.shadow.blur == 20
    assert session.state.selected_layer_id == layer.id


def test_add_image_from_upload(session, make_upload):
    layer = asyncio.run(session.add_image_from_upload(make_upload(800, 400)))

    assert session.state.layers[-1].id == layer.id
    assert (layer.width, layer.height) == (400, 200)
    assert session.resources.is_live(layer.resource_handle)


def test_failed_upload_leaves_state_intact(session):
    session.store.add_text_layer("keep")
    before = session.state.model_copy(deep=True)
    bad = UploadedFile(filename="notes.txt", media_type="text/plain", data=b"hello")

    with pytest.raises(LoadError) as exc:
        asyncio.run(session.add_image_from_upload(bad))

    assert exc.value.kind == "format"
    assert session.state == before
    assert session.resources.live_count == 0


def test_upload_over_session_limit(recording_renderer, make_upload):
    session = EditorSession(Settings(max_upload_bytes=10), renderer=recording_renderer())
    with pytest.raises(LoadError) as exc:
        asyncio.run(session.add_image_from_upload(make_upload(300, 300)))
    assert exc.value.kind == "size"


def test_background_replacement_releases_old(session, make_upload):
    first = asyncio.run(session.set_background_from_upload(make_upload())).resource_handle
    second = asyncio.run(session.set_background_from_upload(make_upload())).resource_handle

    assert session.resources.is_released(first)
    assert session.state.background.resource_handle == second


def test_teardown_releases_everything_once(recording_renderer, make_upload):
    session = EditorSession(Settings(), renderer=recording_renderer())
    asyncio.run(session.add_image_from_upload(make_upload()))
    layer = asyncio.run(session.add_image_from_upload(make_upload()))
    asyncio.run(session.set_background_from_upload(make_upload()))
    session.store.delete_layer(layer.id)

    released = session.teardown()

    assert released == 2
    assert session.closed
    assert session.state.layers == []
    assert session.resources.live_count == 0
    assert session.resources.acquired_count == session.resources.released_count == 3
    assert session.teardown() == 0


def test_teardown_during_upload_leaves_nothing_live(recording_renderer, make_upload):
    session = EditorSession(Settings(), renderer=recording_renderer())

    async def run():
        task = asyncio.create_task(session.add_image_from_upload(make_upload()))
        await asyncio.sleep(0)
        session.teardown()
        with pytest.raises(SessionClosedError):
            await task

    asyncio.run(run())

    assert session.closed
    assert session.state.layers == []
    assert session.resources.live_count == 0
    assert session.resources.acquired_count == session.resources.released_count


def test_teardown_during_background_upload(recording_renderer, make_upload):
    session = EditorSession(Settings(), renderer=recording_renderer())

    async def run():
        task = asyncio.create_task(session.set_background_from_upload(make_upload()))
        await asyncio.sleep(0)
        session.teardown()
        with pytest.raises(SessionClosedError):
            await task

    asyncio.run(run())

    assert session.state.background.resource_handle is None
    assert session.resources.live_count == 0


def test_upload_after_teardown_is_refused(recording_renderer, make_upload):
    session = EditorSession(Settings(), renderer=recording_renderer())
    session.teardown()

    with pytest.raises(SessionClosedError):
        asyncio.run(session.add_image_from_upload(make_upload()))
    assert session.resources.acquired_count == 0


def test_context_manager_tears_down(recording_renderer, make_upload):
    with EditorSession(Settings(), renderer=recording_renderer()) as session:
        asyncio.run(session.add_image_from_upload(make_upload()))
    assert session.closed
    assert session.resources.live_count == 0


def test_export_to_dir(recording_renderer, tmp_path):
    settings = Settings(export_dir=str(tmp_path), export_prefix="thumb")
    with EditorSession(settings, renderer=recording_renderer()) as session:
        session.seed_initial_layer()
        path = asyncio.run(session.export_to_dir())

    assert path.parent == tmp_path
    assert re.match(r"^thumb-\d+\.png$", path.name)
    assert path.stat().st_size > 0


def test_snapshot_uses_display_scale(session):
    session.drag.set_scale(0.5)
    session.seed_initial_layer()
    snap = session.snapshot()
    assert snap.scale == 0.5
    assert len(snap.layers) == 1


def test_from_settings_without_key_has_no_title_client(recording_renderer):
    session = EditorSession.from_settings(Settings(gemini_api_key=None), renderer=recording_renderer())
    assert session.title_client is None
    assert session.suggest_titles("  space ")[0] == "EPIC SPACE"
