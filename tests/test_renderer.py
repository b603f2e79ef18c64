"""
Tests for the Pillow renderer: paint order, background fit and filters, PNG output size.
"""
import asyncio
import io

import pytest
from PIL import Image

from neoncover.editor.snapshot import build_snapshot
from neoncover.editor.store import LayerStore
from neoncover.schemas.editor_schema import EditorState
from neoncover.schemas.layer_schema import Size
from neoncover.tools.image_ops.colors import parse_color
from neoncover.tools.image_ops.compose_layers import PillowRenderer

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def small_store(resources):
    state = EditorState(canvas_size=Size(width=200, height=100))
    store = LayerStore(state, resources)
    store.update_background({"overlay_opacity": 0})
    return store


def _square(store, resources, make_png, color, x):
    handle = resources.acquire(make_png(50, 50, color))
    layer = store.add_image_layer(handle)
    store.update_layer(layer.id, {"position": {"x": x, "y": 0}, "width": 50, "height": 50})
    return layer


def test_layers_paint_in_list_order(small_store, resources, make_png):
    _square(small_store, resources, make_png, RED, 0)
    _square(small_store, resources, make_png, BLUE, 25)

    img = PillowRenderer(resources).compose(build_snapshot(small_store.state))

    assert img.getpixel((10, 25)) == (255, 0, 0)
    assert img.getpixel((40, 25)) == (0, 0, 255)
    assert img.getpixel((150, 80)) == (0, 0, 0)


@pytest.mark.parametrize("fit_mode, edge", [("contain", (0, 0, 0)), ("cover", (255, 0, 0))])
def test_background_fit_mode(small_store, resources, make_png, fit_mode, edge):
    handle = resources.acquire(make_png(100, 100, RED))
    small_store.update_background({"resource_handle": handle, "fit_mode": fit_mode})

    img = PillowRenderer(resources).compose(build_snapshot(small_store.state))

    assert img.getpixel((100, 50)) == (255, 0, 0)
    assert img.getpixel((5, 50)) == edge


def test_brightness_filter(small_store, resources, make_png):
    handle = resources.acquire(make_png(200, 100, (255, 255, 255, 255)))
    small_store.update_background({"resource_handle": handle, "brightness": 50})

    r, g, b = PillowRenderer(resources).compose(build_snapshot(small_store.state)).getpixel((100, 50))

    assert abs(r - 127) <= 1 and r == g == b


def test_overlay_darkens(small_store, resources, make_png):
    handle = resources.acquire(make_png(200, 100, (255, 255, 255, 255)))
    small_store.update_background({"resource_handle": handle, "overlay_opacity": 0.5})

    r, _, _ = PillowRenderer(resources).compose(build_snapshot(small_store.state)).getpixel((100, 50))

    assert abs(r - 127) <= 1


def test_text_layer_paints_pixels(small_store, resources):
    small_store.add_text_layer("Hi", {"position": {"x": 10, "y": 10}, "font_size": 40, "shadow": None})

    img = PillowRenderer(resources).compose(build_snapshot(small_store.state))

    assert max(px[0] for px in img.getdata()) > 200


def test_render_produces_canvas_sized_png(store, resources, make_png):
    store.add_image_layer(resources.acquire(make_png(300, 200)))
    store.add_text_layer("NEON COVER", {"rotation": 15})

    data = asyncio.run(PillowRenderer(resources).render(build_snapshot(store.state)))

    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "PNG"
        assert img.size == (1920, 1080)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#00ffff", (0, 255, 255, 255)),
        ("rgba(0,0,0,0.8)", (0, 0, 0, 204)),
        ("white", (255, 255, 255, 255)),
    ],
)
def test_parse_color(value, expected):
    assert parse_color(value) == expected


def test_parse_color_rejects_garbage():
    with pytest.raises(ValueError):
        parse_color("not-a-colour")
