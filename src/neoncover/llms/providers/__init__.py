from __future__ import annotations

from neoncover.llms.providers import gemini_client

__all__ = [
    "gemini_client",
]
