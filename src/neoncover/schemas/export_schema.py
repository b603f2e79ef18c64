from __future__ import annotations

from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel, Field


class ExportArtifact(BaseModel):
    """
    Flat raster produced by one export, ready to be offered as a download.
    """
    artifact_id: str
    filename: str
    media_type: str = "image/png"
    width: int
    height: int
    byte_size: int
    sha256: str
    created_at: datetime
    data: bytes = Field(repr=False)
    meta: Dict[str, Any] = Field(default_factory=dict)
