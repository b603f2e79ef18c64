"""
Tests for the pure geometry helpers: fit scale, centring and delta conversion.
"""
import pytest

from neoncover.editor.constants import clamp_to_range
from neoncover.editor.geometry import (
    center_position,
    compute_fit_scale,
    height_for_width,
    screen_delta_to_canvas_delta,
)
from neoncover.schemas.layer_schema import Point, Size

CANVAS = Size(width=1920, height=1080)


def test_fit_scale_same_size_applies_margin():
    assert compute_fit_scale(Size(width=1920, height=1080), CANVAS, 0.95) == pytest.approx(0.95)


def test_fit_scale_narrow_container_is_width_limited():
    scale = compute_fit_scale(Size(width=960, height=1080), CANVAS, 0.95)
    assert scale == pytest.approx(960 / 1920 * 0.95)
    assert scale == pytest.approx(0.475)


def test_fit_scale_wide_container_is_height_limited():
    scale = compute_fit_scale(Size(width=4000, height=540), CANVAS, 1.0)
    assert scale == pytest.approx(0.5)


@pytest.mark.parametrize("container", [Size(width=0, height=1080), Size(width=800, height=0), Size(width=0, height=0)])
def test_fit_scale_zero_container_is_neutral(container):
    assert compute_fit_scale(container, CANVAS, 0.95) == 1.0


def test_center_position():
    pos = center_position(CANVAS, Size(width=400, height=100))
    assert (pos.x, pos.y) == (760, 490)


def test_screen_delta_divides_by_scale():
    delta = screen_delta_to_canvas_delta(Point(x=10, y=-5), 0.5)
    assert (delta.x, delta.y) == (20, -10)


def test_fit_scale_then_delta_round_trip():
    scale = compute_fit_scale(Size(width=960, height=1080), CANVAS, 0.95)
    delta = screen_delta_to_canvas_delta(Point(x=47.5, y=95), scale)
    assert delta.x == pytest.approx(47.5 / scale)
    assert delta.y == pytest.approx(95 / scale)


def test_screen_delta_rejects_zero_scale():
    with pytest.raises(ValueError):
        screen_delta_to_canvas_delta(Point(x=1, y=1), 0)


def test_height_for_width_keeps_ratio():
    assert height_for_width(400, 2.0) == 200


@pytest.mark.parametrize(
    "name, value, expected",
    [("font_size", 500, 300), ("font_size", 5, 20), ("brightness", 150, 150), ("overlay_opacity", 2, 1)],
)
def test_clamp_to_range_for_controls(name, value, expected):
    assert clamp_to_range(name, value) == expected
