from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

from PIL import Image, UnidentifiedImageError

from neoncover.app.errors import LoadError, ResourceReleasedError, SessionClosedError
from neoncover.core.hashing import sha256_of_bytes
from neoncover.core.ids import new_handle_id
from neoncover.editor.constants import MAX_IMAGE_BYTES
from neoncover.schemas.resource_schema import ResourceHandle, ResourceOrigin, UploadedFile

logger = logging.getLogger(__name__)

Source = Union[UploadedFile, bytes, str, Path]


def _check_size(byte_size: int, max_bytes: int) -> None:
    if byte_size > max_bytes:
        limit_mib = max_bytes / (1024 * 1024)
        raise LoadError(
            "size",
            f"File size too large. Please select an image smaller than {limit_mib:g}MB.",
        )


def validate_upload(media_type: Optional[str], byte_size: int, max_bytes: int = MAX_IMAGE_BYTES) -> None:
    """
    Reject a file before any decoding happens.
    Raises LoadError("format") for non-image media types and LoadError("size") above `max_bytes`.
    """
    if not media_type or not media_type.lower().startswith("image/"):
        raise LoadError("format", "Please select a valid image file.")
    _check_size(byte_size, max_bytes)


def _decode(data: bytes) -> Tuple[Image.Image, str]:
    """Decode bytes into a detached RGBA bitmap plus its media type."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            media_type = Image.MIME.get(img.format or "", "image/png")
            return img.convert("RGBA"), media_type
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise LoadError("decode", "Failed to load image. Please try again.") from e


@dataclass
class _Entry:
    handle: ResourceHandle
    image: Image.Image


class ResourceManager:
    """
    Owns every decoded bitmap of a session.

    acquire() hands out a ResourceHandle; release() frees it exactly once and tolerates
    repeated or unknown releases. Pixel data of a released handle can no longer be read.
    After close() nothing new is registered, including decodes that were already in flight.

    Released ids are kept for the lifetime of the manager (one editing session) so that
    is_released() can tell a freed handle from a foreign one.
    """

    def __init__(self, max_bytes: int = MAX_IMAGE_BYTES):
        self.max_bytes = max_bytes
        self._live: Dict[str, _Entry] = {}
        self._released: Set[str] = set()
        self._closed = False
        self.acquired_count = 0
        self.released_count = 0

    @property
    def closed(self) -> bool:
        return self._closed

    # ---------- Acquire ----------
    def acquire(self, source: Source, *, media_type: Optional[str] = None) -> ResourceHandle:
        self._ensure_open()
        data, origin, declared = self._prepare(source, media_type)
        image, decoded_type = _decode(data)
        return self._register(image, data, origin, declared or decoded_type)

    async def acquire_async(self, source: Source, *, media_type: Optional[str] = None) -> ResourceHandle:
        """Same as acquire(), with decoding moved off the event loop."""
        self._ensure_open()
        data, origin, declared = self._prepare(source, media_type)
        image, decoded_type = await asyncio.to_thread(_decode, data)
        return self._register(image, data, origin, declared or decoded_type)

    def _prepare(self, source: Source, media_type: Optional[str]) -> Tuple[bytes, ResourceOrigin, Optional[str]]:
        if isinstance(source, UploadedFile):
            validate_upload(source.media_type, source.byte_size, self.max_bytes)
            return source.data, "ephemeral", source.media_type

        if isinstance(source, (bytes, bytearray)):
            if media_type is not None:
                validate_upload(media_type, len(source), self.max_bytes)
            else:
                _check_size(len(source), self.max_bytes)
            return bytes(source), "ephemeral", media_type

        path = Path(source)
        try:
            size = path.stat().st_size
            _check_size(size, self.max_bytes)
            data = path.read_bytes()
        except OSError as e:
            raise LoadError("decode", f"Could not read image file {path.name}.") from e
        return data, "static", media_type

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Resource manager is closed")

    def _register(self, image: Image.Image, data: bytes, origin: ResourceOrigin, media_type: str) -> ResourceHandle:
        if self._closed:
            # Decode finished after teardown: drop the bitmap, never hand out a handle.
            image.close()
            logger.info("discarded resource decoded after close")
            raise SessionClosedError("Resource manager was closed while the image was loading")

        handle_id = new_handle_id()
        while handle_id in self._live or handle_id in self._released:
            handle_id = new_handle_id()

        handle = ResourceHandle(
            handle_id=handle_id,
            origin=origin,
            media_type=media_type,
            width=image.width,
            height=image.height,
            byte_size=len(data),
            sha256=sha256_of_bytes(data),
        )
        self._live[handle_id] = _Entry(handle=handle, image=image)
        self.acquired_count += 1
        logger.info(
            "acquired %s resource %dx%d (%d bytes)",
            origin, image.width, image.height, len(data),
            extra={"handle_id": handle_id},
        )
        return handle

    # ---------- Release ----------
    def release(self, handle: Optional[ResourceHandle]) -> bool:
        """Free a handle. Returns False (and does nothing) for None, unknown or already released handles."""
        if handle is None:
            return False
        entry = self._live.pop(handle.handle_id, None)
        if entry is None:
            logger.debug("release ignored for unknown or released handle", extra={"handle_id": handle.handle_id})
            return False
        entry.image.close()
        self._released.add(handle.handle_id)
        self.released_count += 1
        logger.info("released resource", extra={"handle_id": handle.handle_id})
        return True

    def release_all(self) -> int:
        released = 0
        for entry in list(self._live.values()):
            if self.release(entry.handle):
                released += 1
        return released

    def close(self) -> int:
        """Release every live handle and refuse further acquisitions. Returns handles released."""
        released = self.release_all()
        self._closed = True
        return released

    # ---------- Read ----------
    def get_image(self, handle: ResourceHandle) -> Image.Image:
        entry = self._live.get(handle.handle_id)
        if entry is None:
            raise ResourceReleasedError(f"Resource {handle.handle_id} is not live")
        return entry.image

    def is_live(self, handle: ResourceHandle) -> bool:
        return handle.handle_id in self._live

    def is_released(self, handle: ResourceHandle) -> bool:
        return handle.handle_id in self._released

    def live_handles(self) -> List[ResourceHandle]:
        return [e.handle for e in self._live.values()]

    @property
    def live_count(self) -> int:
        return len(self._live)
