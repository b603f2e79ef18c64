from __future__ import annotations

from typing import Optional, Tuple

from PIL import Image, ImageEnhance, ImageFilter

from neoncover.schemas.editor_schema import Background
from neoncover.tools.image_ops.colors import parse_color, with_opacity


def fit_image(img: Image.Image, canvas: Tuple[int, int], fit_mode: str) -> Image.Image:
    """
    Scale `img` to cover or fit inside `canvas`, centred, on a transparent canvas-sized image.
    """
    cw, ch = canvas
    if fit_mode == "cover":
        factor = max(cw / img.width, ch / img.height)
    else:
        factor = min(cw / img.width, ch / img.height)

    size = (max(1, round(img.width * factor)), max(1, round(img.height * factor)))
    resized = img.resize(size, Image.Resampling.LANCZOS)

    out = Image.new("RGBA", canvas, (0, 0, 0, 0))
    out.paste(resized, ((cw - size[0]) // 2, (ch - size[1]) // 2))
    return out


def apply_filter_stack(img: Image.Image, bg: Background) -> Image.Image:
    """
    brightness -> contrast -> saturate -> blur, in the order a CSS filter list applies them.
    Percentages are relative to 100; alpha is kept untouched.
    """
    alpha = img.getchannel("A")
    rgb = img.convert("RGB")

    if bg.brightness != 100:
        rgb = ImageEnhance.Brightness(rgb).enhance(bg.brightness / 100)
    if bg.contrast != 100:
        rgb = ImageEnhance.Contrast(rgb).enhance(bg.contrast / 100)
    if bg.saturate != 100:
        rgb = ImageEnhance.Color(rgb).enhance(bg.saturate / 100)

    out = rgb.convert("RGBA")
    out.putalpha(alpha)
    if bg.blur > 0:
        out = out.filter(ImageFilter.GaussianBlur(radius=bg.blur))
    return out


def render_background(bg: Background, canvas: Tuple[int, int], bitmap: Optional[Image.Image]) -> Image.Image:
    """
    Black base, optional fitted + filtered background bitmap, then the colour overlay.
    """
    base = Image.new("RGBA", canvas, (0, 0, 0, 255))

    if bitmap is not None:
        fitted = apply_filter_stack(fit_image(bitmap, canvas, bg.fit_mode), bg)
        base = Image.alpha_composite(base, fitted)

    if bg.overlay_opacity > 0:
        overlay = Image.new("RGBA", canvas, with_opacity(parse_color(bg.overlay_color), bg.overlay_opacity))
        base = Image.alpha_composite(base, overlay)

    return base
