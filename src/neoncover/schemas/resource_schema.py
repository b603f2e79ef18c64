from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

# "ephemeral": decoded from uploaded bytes, owned by the session.
# "static": loaded from a durable file on disk (bundled assets).
ResourceOrigin = Literal["ephemeral", "static"]


class ResourceHandle(BaseModel):
    """
    Opaque reference to a decoded bitmap held by the ResourceManager.
    The handle carries metadata only; pixel data never leaves the manager.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    handle_id: str
    origin: ResourceOrigin = "ephemeral"
    media_type: str = "image/png"
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    byte_size: int = Field(default=0, ge=0)
    sha256: Optional[str] = None

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class UploadedFile(BaseModel):
    """What a file picker hands over: declared media type plus raw bytes."""
    model_config = ConfigDict(extra="forbid")

    filename: str = "upload"
    media_type: str
    data: bytes = Field(repr=False)

    @property
    def byte_size(self) -> int:
        return len(self.data)
