from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from neoncover.app.errors import ExportError
from neoncover.core.clock import epoch_millis, utc_now
from neoncover.core.hashing import sha256_of_bytes
from neoncover.core.ids import new_artifact_id
from neoncover.schemas.export_schema import ExportArtifact

PNG_MIME = "image/png"


def export_filename(prefix: str, millis: Optional[int] = None) -> str:
    """<prefix>-<epoch ms>.png"""
    return f"{prefix}-{millis if millis is not None else epoch_millis()}.png"


def _png_size(data: bytes) -> Tuple[int, int]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format != "PNG":
                raise ExportError("renderer_failure", f"Renderer produced {img.format}, expected PNG")
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        raise ExportError("renderer_failure", "Renderer output is not a readable image") from e


def build_artifact(
    data: bytes,
    *,
    expected_size: Tuple[int, int],
    prefix: str,
    millis: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> ExportArtifact:
    """
    Wrap rendered PNG bytes as a downloadable artifact.
    Raises ExportError("size_mismatch") unless the raster is exactly `expected_size`.
    """
    width, height = _png_size(data)
    if (width, height) != expected_size:
        raise ExportError(
            "size_mismatch",
            f"Rendered {width}x{height}, canvas is {expected_size[0]}x{expected_size[1]}",
        )

    return ExportArtifact(
        artifact_id=new_artifact_id(),
        filename=export_filename(prefix, millis),
        media_type=PNG_MIME,
        width=width,
        height=height,
        byte_size=len(data),
        sha256=sha256_of_bytes(data),
        created_at=utc_now(),
        data=data,
        meta=dict(meta or {}),
    )


def save_artifact(artifact: ExportArtifact, directory: Union[str, Path]) -> Path:
    """Write the artifact under `directory` (created if needed) and return its path."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / artifact.filename
    path.write_bytes(artifact.data)
    return path
