from __future__ import annotations

"""
Text suggestions for cover titles (deterministic defaults, optional Gemini provider).
"""

from neoncover.llms import providers, title_suggestions

__all__ = [
    "providers",
    "title_suggestions",
]
