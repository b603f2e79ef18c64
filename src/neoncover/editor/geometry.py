from __future__ import annotations

from neoncover.schemas.layer_schema import Point, Size

# Pure helpers: no state, no logging.


def compute_fit_scale(container: Size, canvas: Size, margin: float = 0.95) -> float:
    """
    Scale that fits `canvas` inside `container` with its aspect ratio intact, shrunk by `margin`.

    A container wider than the canvas ratio is height-limited, otherwise width-limited.
    A zero-sized container yields 1.0 so callers never divide by zero.
    """
    if container.width <= 0 or container.height <= 0:
        return 1.0

    target_ratio = canvas.width / canvas.height
    container_ratio = container.width / container.height

    if container_ratio > target_ratio:
        scale = container.height / canvas.height
    else:
        scale = container.width / canvas.width

    return scale * margin


def center_position(canvas: Size, obj: Size) -> Point:
    """Top-left position that centres `obj` within `canvas`."""
    return Point(
        x=canvas.width / 2 - obj.width / 2,
        y=canvas.height / 2 - obj.height / 2,
    )


def screen_delta_to_canvas_delta(screen_delta: Point, scale: float) -> Point:
    """Convert an on-screen pointer delta into canvas units."""
    if scale == 0:
        raise ValueError("scale must be non-zero; compute a fit scale first")
    return Point(x=screen_delta.x / scale, y=screen_delta.y / scale)


def height_for_width(width: float, aspect_ratio: float) -> float:
    """Height that keeps `aspect_ratio` (width / height) for the given width."""
    return width / aspect_ratio
