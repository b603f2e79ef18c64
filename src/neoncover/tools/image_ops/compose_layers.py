from __future__ import annotations

import asyncio
import io
import math
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from neoncover.editor.resources import ResourceManager
from neoncover.schemas.editor_schema import RenderSnapshot
from neoncover.schemas.layer_schema import ImageLayer, Layer, Shadow, TextLayer
from neoncover.tools.image_ops.colors import parse_color
from neoncover.tools.image_ops.filters import render_background

_WEIGHT_NAMES = {300: "Light", 400: "Regular", 600: "SemiBold", 800: "ExtraBold"}

# Padding around text with a background fill, in em.
_FILL_PAD_X = 0.4
_FILL_PAD_Y = 0.2


def _font_candidates(family: str, weight: int) -> Iterable[str]:
    stem = family.replace(" ", "")
    yield f"{stem}-{_WEIGHT_NAMES.get(weight, 'Regular')}.ttf"
    yield f"{stem}-Regular.ttf"
    yield f"{stem}.ttf"


class PillowRenderer:
    """
    Reference Composition Renderer.

    Paints the snapshot at full canvas resolution (the display scale is ignored):
    background with its filter stack and overlay first, then every layer in list order.
    Returns PNG bytes.
    """

    def __init__(self, resources: ResourceManager, font_dirs: Sequence[Path] = ()):
        self.resources = resources
        self.font_dirs = [Path(p) for p in font_dirs]
        self._font_cache: Dict[Tuple[str, int, float], ImageFont.ImageFont | ImageFont.FreeTypeFont] = {}

    async def render(self, snapshot: RenderSnapshot) -> bytes:
        # Bitmaps are copied on the caller's thread so a release during rendering cannot
        # pull pixels out from under the worker.
        bitmaps = self._collect_bitmaps(snapshot)
        return await asyncio.to_thread(self.render_png, snapshot, bitmaps)

    def render_png(self, snapshot: RenderSnapshot, bitmaps: Optional[Dict[str, Image.Image]] = None) -> bytes:
        image = self.compose(snapshot, bitmaps)
        buf = io.BytesIO()
        image.save(buf, format="PNG")
        return buf.getvalue()

    def compose(self, snapshot: RenderSnapshot, bitmaps: Optional[Dict[str, Image.Image]] = None) -> Image.Image:
        if bitmaps is None:
            bitmaps = self._collect_bitmaps(snapshot)

        canvas = (int(snapshot.canvas_size.width), int(snapshot.canvas_size.height))
        bg_handle = snapshot.background.resource_handle
        bg_bitmap = bitmaps.get(bg_handle.handle_id) if bg_handle is not None else None

        out = render_background(snapshot.background, canvas, bg_bitmap)
        for layer in snapshot.layers:
            out = self._paint_layer(out, layer, bitmaps)
        return out.convert("RGB")

    # ---------- layers ----------
    def _paint_layer(self, canvas: Image.Image, layer: Layer, bitmaps: Dict[str, Image.Image]) -> Image.Image:
        if isinstance(layer, TextLayer):
            tile = self._text_tile(layer)
        else:
            tile = self._image_tile(layer, bitmaps[layer.resource_handle.handle_id])

        sprite = self._with_shadow(tile, layer.shadow)
        if layer.rotation:
            # CSS rotates clockwise about the element centre; Pillow rotates counter-clockwise.
            sprite = sprite.rotate(-layer.rotation, resample=Image.Resampling.BICUBIC, expand=True)
        if layer.opacity < 1:
            alpha = sprite.getchannel("A").point(lambda v: int(v * max(0.0, layer.opacity)))
            sprite.putalpha(alpha)

        cx = layer.position.x + tile.width / 2
        cy = layer.position.y + tile.height / 2
        dest = (round(cx - sprite.width / 2), round(cy - sprite.height / 2))

        plane = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        plane.paste(sprite, dest)
        return Image.alpha_composite(canvas, plane)

    def _text_tile(self, layer: TextLayer) -> Image.Image:
        font = self._font(layer.font_family, layer.font_weight, layer.font_size)
        text = layer.display_text
        stroke = max(0, round(layer.stroke_width))

        probe = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
        left, top, right, bottom = probe.textbbox((0, 0), text, font=font, stroke_width=stroke)

        pad_x = round(layer.font_size * _FILL_PAD_X) if layer.background_fill else 0
        pad_y = round(layer.font_size * _FILL_PAD_Y) if layer.background_fill else 0
        size = (max(1, right - left + 2 * pad_x), max(1, bottom - top + 2 * pad_y))

        fill = parse_color(layer.background_fill) if layer.background_fill else (0, 0, 0, 0)
        tile = Image.new("RGBA", size, fill)
        ImageDraw.Draw(tile).text(
            (pad_x - left, pad_y - top),
            text,
            font=font,
            fill=parse_color(layer.color),
            stroke_width=stroke,
            stroke_fill=parse_color(layer.stroke_color),
        )
        return tile

    def _image_tile(self, layer: ImageLayer, bitmap: Image.Image) -> Image.Image:
        size = (max(1, round(layer.width)), max(1, round(layer.height)))
        tile = bitmap.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
        border = round(layer.border_width or 0)
        if border > 0:
            # Border sits inside the box, like a border-box element.
            ImageDraw.Draw(tile).rectangle(
                (0, 0, size[0] - 1, size[1] - 1),
                outline=parse_color(layer.border_color or "#ffffff"),
                width=border,
            )
        return tile

    def _with_shadow(self, tile: Image.Image, shadow: Optional[Shadow]) -> Image.Image:
        """Tile on a symmetric margin (so its centre is the sprite centre), shadow underneath."""
        if shadow is None:
            return tile

        margin = math.ceil(2 * shadow.blur + max(abs(shadow.offset_x), abs(shadow.offset_y)))
        sprite = Image.new("RGBA", (tile.width + 2 * margin, tile.height + 2 * margin), (0, 0, 0, 0))

        color = parse_color(shadow.color)
        silhouette = Image.new("RGBA", tile.size, color)
        silhouette.putalpha(tile.getchannel("A").point(lambda v: v * color[3] // 255))
        sprite.paste(silhouette, (margin + round(shadow.offset_x), margin + round(shadow.offset_y)))
        if shadow.blur > 0:
            # CSS blur radius is roughly two standard deviations.
            sprite = sprite.filter(ImageFilter.GaussianBlur(radius=shadow.blur / 2))

        body = Image.new("RGBA", sprite.size, (0, 0, 0, 0))
        body.paste(tile, (margin, margin))
        return Image.alpha_composite(sprite, body)

    # ---------- resources ----------
    def _collect_bitmaps(self, snapshot: RenderSnapshot) -> Dict[str, Image.Image]:
        bitmaps: Dict[str, Image.Image] = {}
        handles = [snapshot.background.resource_handle] + [
            layer.resource_handle for layer in snapshot.layers if isinstance(layer, ImageLayer)
        ]
        for handle in handles:
            if handle is not None and handle.handle_id not in bitmaps:
                bitmaps[handle.handle_id] = self.resources.get_image(handle).copy()
        return bitmaps

    def _font(self, family: str, weight: int, size: float):
        key = (family, weight, size)
        if key not in self._font_cache:
            self._font_cache[key] = self._load_font(family, weight, size)
        return self._font_cache[key]

    def _load_font(self, family: str, weight: int, size: float):
        for directory in self.font_dirs:
            for name in _font_candidates(family, weight):
                path = directory / name
                if path.is_file():
                    return ImageFont.truetype(str(path), size=size)
        return ImageFont.load_default(size=size)
