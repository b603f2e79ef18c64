from __future__ import annotations
import os
from dataclasses import dataclass

from neoncover.app.errors import ConfigError

_TRUTHY = {"1", "true", "yes", "y", "on"}
_FALSY = {"0", "false", "no", "n", "off", ""}


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"Env var {name} must be a number, got {raw!r}") from e


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"Env var {name} must be an integer, got {raw!r}") from e


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.lower().strip()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    raise ConfigError(f"Env var {name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    # Logging
    log_level: str = "INFO"

    # Uploads
    max_upload_bytes: int = 10 * 1024 * 1024

    # Canvas display
    canvas_margin: float = 0.95

    # Export
    export_prefix: str = "neon-cover"
    export_dir: str = "exports"
    export_settle_seconds: float = 0.0

    # Store behaviour outside an interactive UI
    strict_store: bool = False

    # Gemini (optional title suggestions)
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"


def load_settings() -> Settings:
    max_upload_bytes = _get_int("NEONCOVER_MAX_UPLOAD_BYTES", Settings.max_upload_bytes)
    if max_upload_bytes <= 0:
        raise ConfigError("NEONCOVER_MAX_UPLOAD_BYTES must be positive")

    margin = _get_float("NEONCOVER_CANVAS_MARGIN", Settings.canvas_margin)
    if not 0.0 < margin <= 1.0:
        raise ConfigError("NEONCOVER_CANVAS_MARGIN must be in (0, 1]")

    settle = _get_float("NEONCOVER_EXPORT_SETTLE_SECONDS", Settings.export_settle_seconds)
    if settle < 0:
        raise ConfigError("NEONCOVER_EXPORT_SETTLE_SECONDS must not be negative")

    return Settings(
        log_level=os.getenv("NEONCOVER_LOG_LEVEL", Settings.log_level),
        max_upload_bytes=max_upload_bytes,
        canvas_margin=margin,
        export_prefix=os.getenv("NEONCOVER_EXPORT_PREFIX") or Settings.export_prefix,
        export_dir=os.getenv("NEONCOVER_EXPORT_DIR") or Settings.export_dir,
        export_settle_seconds=settle,
        strict_store=_get_bool("NEONCOVER_STRICT_STORE", Settings.strict_store),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_TEXT_MODEL") or Settings.gemini_model,
    )
