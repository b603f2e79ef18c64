from __future__ import annotations

from typing import Literal

LoadErrorKind = Literal["format", "size", "decode"]
ExportErrorReason = Literal["renderer_failure", "size_mismatch", "busy"]


class AppError(Exception):
    """Base application error"""


class ConfigError(AppError):
    """Missing or invalid configuration"""


class LoadError(AppError):
    """
    An uploaded image could not become a resource.
    kind: "format" (not an image), "size" (over the byte limit) or "decode" (corrupt bitmap).
    """

    def __init__(self, kind: LoadErrorKind, message: str):
        super().__init__(message)
        self.kind: LoadErrorKind = kind
        self.message = message


class ResourceReleasedError(AppError):
    """Bitmap data requested for a handle that was released or never acquired"""


class ExportError(AppError):
    """The composition could not be exported"""

    def __init__(self, reason: ExportErrorReason, message: str):
        super().__init__(message)
        self.reason: ExportErrorReason = reason
        self.message = message


class LayerNotFoundError(AppError):
    """Layer id not present in the editor state (strict stores only)"""


class InvalidLayerUpdateError(AppError):
    """Partial update does not fit the layer variant (strict stores only)"""


class TitleSuggestionError(AppError):
    """Title provider call failed"""


class SessionClosedError(AppError):
    """Operation on a session (or its resource manager) after teardown"""
